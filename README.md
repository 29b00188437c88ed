# switchyard

Building blocks for a microgrid simulator: a scenario journal with the
energy and power metrics a scenario report needs, bounded telemetry
history rings, per-component setpoint logs, a non-blocking event bus,
a log capture tap, setpoint expiry tracking and per-component CSV
recording.

The package has no third-party runtime dependencies.

## Modules

- `switchyard.telemetry` — `Category` (grid, meter, inverter, battery,
  ev-charger, chp), `Metric` (the history series names, with
  `Metric.parse`) and the `Telemetry` snapshot dataclass;
  `Telemetry.metric_values()` lists the published metrics with their values.
- `switchyard.history` — `History`, a time-ordered ring of `Sample`s for
  one metric with `iter_window(since)`, and `ComponentHistory`, which
  keeps one `History` per metric and records a whole snapshot with
  `push_snapshot(ts, snap)`.
- `switchyard.scenario` — `ScenarioJournal`: scenario name and lifecycle
  (`start`, `stop`, `elapsed_s`), a ring of up to 4096 `ScenarioEvent`s with
  monotonic ids (`record`, `events_since`, `next_event_id`), the main
  meter's peak active power, 15-minute UTC-aligned window averages, and
  per-battery / per-PV energy integrals.
- `switchyard.report` — `compute_soc_stats` (mean, lower median, and
  integer-bucketed mode with the lowest bucket winning a tie) and the
  `ScenarioSummary` / `ScenarioReport` snapshots with `to_dict()`.
- `switchyard.setpoints` — `SetpointKind`, the `Accepted` / `Rejected`
  outcomes, `SetpointEvent` and the bounded `SetpointLog`.
- `switchyard.events` — the broadcast event types `TopologyChanged`,
  `SampleEvent`, `SetpointNotice` and `LogLine`, and `EventBus`, whose
  subscribers are `queue.Queue`s that drop their oldest events when they
  fall behind instead of blocking the publisher.
- `switchyard.ui_log` — `LogTap`, a `logging.Handler` that keeps a ring
  buffer of `LogEvent`s and fans them out to subscriber queues;
  `install_log_tap` attaches one process-wide tap to the root logger and
  `get_log_tap` returns it.
- `switchyard.timeout_tracker` — `TimeoutTracker`: `add(id, lifetime)`
  schedules an expiry (latest call wins), `remove_expired()` returns and
  drops the ids whose deadline has passed.
- `switchyard.scenario_csv` — `CsvSink.open(directory, id, category)`
  creates `<id>-<category>.csv` with the header
  `ts_iso,active_power_w,reactive_power_var,dc_power_w,soc_pct`;
  `write_row` appends a snapshot, leaving unpublished fields empty.

## Examples

Scenario journal:

```python
from datetime import datetime, timedelta, timezone
from switchyard.scenario import ScenarioJournal

t0 = datetime(2026, 1, 1, tzinfo=timezone.utc)
journal = ScenarioJournal()
journal.start("warmup", t0)
journal.record("outage", "bat-1003", t0)
journal.record("note", "hi", t0)
[e.kind for e in journal.events_since(0, 10)]   # ['outage', 'note']
journal.next_event_id()                         # 2

# 10 s of charging at 1800 W -> 5 Wh
journal.record_battery_sample(1, 1800.0, t0 + timedelta(seconds=10))
journal.advance_sample_cursor(t0 + timedelta(seconds=10))
journal.per_battery()[1].charge_wh              # 5.0
```

SoC statistics:

```python
from switchyard.report import compute_soc_stats

stats = compute_soc_stats([20.0, 40.0, 60.0, 80.0])
stats.mean_pct, stats.median_pct, stats.mode_pct   # (50.0, 40.0, 20)
```

Setpoint log:

```python
from switchyard.setpoints import Accepted, SetpointEvent, SetpointKind, SetpointLog

log = SetpointLog(1000)
log.push(SetpointEvent(t0, SetpointKind.ACTIVE_POWER, 2500.0, Accepted(2500.0)))
[e.value for e in log.iter_window(t0)]   # [2500.0]
```

Event bus:

```python
from switchyard.events import EventBus, TopologyChanged

bus = EventBus()
inbox = bus.subscribe()
bus.publish(TopologyChanged(version=1))   # 1 subscriber reached
inbox.get_nowait().to_dict()              # {'kind': 'topology_changed', 'version': 1}
```

## Sign conventions

Battery DC power is positive while charging and negative while
discharging. Solar inverters publish negative active power while
producing. The journal's energy integrals are always positive
watt-hours in each direction.

## What the package does not do

It holds no simulated components and no physics: there is no component
registry, no parent-to-child topology, no tick loop and no reactive-power
model. It runs no HTTP, WebSocket or gRPC server and installs no
command-line program. Callers drive the journal, histories and logs
themselves from whatever loop produces their telemetry.