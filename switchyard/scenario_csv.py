"""Per-component CSV telemetry sinks for scenario recording."""

from __future__ import annotations

import math
import os
import struct
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import TextIO

from switchyard.telemetry import Category, Telemetry

CSV_HEADER = "ts_iso,active_power_w,reactive_power_var,dc_power_w,soc_pct\n"


def _as_f32(value: float) -> float:
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return value


def _f32_text(value: float) -> str:
    """Shortest plain decimal text that reads back as the same single-precision value."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    target = _as_f32(value)
    text = repr(target)
    for digits in range(1, 18):
        candidate = f"{target:.{digits}g}"
        if _as_f32(float(candidate)) == target:
            text = candidate
            break
    plain = format(Decimal(text), "f")
    if "." in plain:
        plain = plain.rstrip("0").rstrip(".")
    return plain


def _cell(value: float | None) -> str:
    return "" if value is None else _f32_text(value)


class CsvSink:
    """One open CSV file receiving a component's telemetry rows."""

    def __init__(self, stream: TextIO, path: Path) -> None:
        self._stream = stream
        self.path = path

    @classmethod
    def open(cls, directory: str | os.PathLike, id: int, category: Category) -> "CsvSink":
        """Create ``<directory>/<id>-<category>.csv`` and write the header.

        Raises OSError if the directory is missing or not writable.
        """
        path = Path(directory) / f"{id}-{category.slug()}.csv"
        stream = path.open("w", encoding="utf-8", newline="")
        stream.write(CSV_HEADER)
        return cls(stream, path)

    def write_row(self, ts: datetime, snap: Telemetry) -> None:
        """Append one row; fields the component doesn't publish stay empty."""
        cells = [
            ts.isoformat(),
            _cell(snap.active_power_w),
            _cell(snap.reactive_power_var),
            _cell(snap.dc_power_w),
            _cell(snap.soc_pct),
        ]
        self._stream.write(",".join(cells) + "\n")

    def close(self) -> None:
        """Flush and close the file. Safe to call more than once."""
        if not self._stream.closed:
            self._stream.close()

    @property
    def closed(self) -> bool:
        return self._stream.closed

    def __enter__(self) -> "CsvSink":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


CsvSinks = dict[int, CsvSink]