from datetime import datetime, timedelta, timezone

from switchyard.history import ComponentHistory, History, Sample
from switchyard.telemetry import Metric, Telemetry


def t(secs: int) -> datetime:
    return datetime.fromtimestamp(secs, tz=timezone.utc)


def test_push_and_iterate_round_trip():
    h = History(10)
    h.push(t(1), 1.5)
    h.push(t(2), 2.5)
    assert list(h) == [Sample(t(1), 1.5), Sample(t(2), 2.5)]
    assert len(h) == 2


def test_capacity_evicts_oldest():
    h = History(3)
    for i in range(1, 6):
        h.push(t(i), float(i))
    assert len(h) == 3
    assert [s.value for s in h] == [3.0, 4.0, 5.0]


def test_iter_window_is_inclusive_of_since():
    h = History(10)
    for i in range(1, 6):
        h.push(t(i), float(i))
    assert [s.value for s in h.iter_window(t(3))] == [3.0, 4.0, 5.0]
    assert list(h.iter_window(t(100))) == []
    assert len(list(h.iter_window(t(0)))) == 5


def test_push_snapshot_records_published_metrics():
    ch = ComponentHistory(600)
    snap = Telemetry(active_power_w=2500.0, soc_pct=72.5)
    pushed = ch.push_snapshot(t(1000), snap)
    assert pushed == snap.metric_values()
    assert set(ch.metrics()) == {Metric.ACTIVE_POWER_W, Metric.SOC_PCT}
    assert ch.get(Metric.FREQUENCY_HZ) is None
    series = ch.get(Metric.ACTIVE_POWER_W)
    assert [s.value for s in series] == [2500.0]


def test_push_snapshot_accumulates_across_ticks():
    ch = ComponentHistory(600)
    snap = Telemetry(active_power_w=2500.0, soc_pct=72.5)
    ch.push_snapshot(t(1000), snap)
    ch.push_snapshot(t(1001), snap)
    series = ch.get(Metric.ACTIVE_POWER_W)
    assert len(series) == 2
    assert [s.ts for s in series.iter_window(t(1001))] == [t(1001)]


def test_component_history_respects_capacity():
    ch = ComponentHistory(2)
    base = t(0)
    for i in range(4):
        ch.push_snapshot(base + timedelta(seconds=i), Telemetry(soc_pct=float(i)))
    assert [s.value for s in ch.get(Metric.SOC_PCT)] == [2.0, 3.0]


def test_empty_snapshot_records_nothing():
    ch = ComponentHistory(5)
    assert ch.push_snapshot(t(0), Telemetry()) == []
    assert ch.metrics() == []