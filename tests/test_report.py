import json
from datetime import datetime, timezone

from switchyard.report import (
    PerBatteryReport,
    PerPvReport,
    ScenarioReport,
    ScenarioSummary,
    SocStats,
    WindowAverageEntry,
    compute_soc_stats,
)


def test_soc_stats_compute_on_typical_set():
    s = compute_soc_stats([20.0, 40.0, 60.0, 80.0])
    assert abs(s.mean_pct - 50.0) < 1e-6
    assert abs(s.median_pct - 40.0) < 1e-6
    assert s.mode_pct == 20


def test_soc_stats_mode_picks_repeated_bucket():
    s = compute_soc_stats([50.0, 50.4, 50.6, 25.0, 80.0])
    assert s.mode_pct == 50


def test_soc_stats_empty_returns_none():
    assert compute_soc_stats([]) is None


def test_soc_stats_odd_count_median_is_middle():
    s = compute_soc_stats([80.0, 20.0, 50.0])
    assert s.median_pct == 50.0


def test_soc_stats_clamps_out_of_range_values():
    s = compute_soc_stats([150.0, 120.0, 10.0])
    assert s.mode_pct == 100


def test_summary_to_dict_before_start():
    summary = ScenarioSummary(
        name=None, started_at=None, ended_at=None, elapsed_s=0.0, event_count=0, next_event_id=0
    )
    d = summary.to_dict()
    assert d["name"] is None
    assert d["started_at"] is None
    assert d["event_count"] == 0
    json.dumps(d)


def test_summary_to_dict_formats_timestamps_as_utc():
    start = datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
    summary = ScenarioSummary(
        name="warmup", started_at=start, ended_at=None, elapsed_s=60.0, event_count=2, next_event_id=2
    )
    d = summary.to_dict()
    assert d["name"] == "warmup"
    assert d["started_at"] == "2026-01-01T00:00:00Z"
    assert d["next_event_id"] == 2


def test_report_to_dict_nests_entries():
    report = ScenarioReport(
        scenario_elapsed_s=10.0,
        peak_main_meter_w=4500.0,
        main_meter_id=1,
        total_battery_charged_wh=5.0,
        total_battery_discharged_wh=0.0,
        total_pv_produced_wh=7200.0,
        per_battery=[PerBatteryReport(id=3, charge_wh=5.0, discharge_wh=0.0)],
        per_pv=[PerPvReport(id=2, produced_wh=7200.0)],
        soc_stats=SocStats(mean_pct=50.0, median_pct=50.0, mode_pct=50),
        main_meter_window_averages=[
            WindowAverageEntry(window_start=datetime.fromtimestamp(900, tz=timezone.utc), avg_w=7500.0)
        ],
    )
    d = json.loads(json.dumps(report.to_dict()))
    assert d["main_meter_id"] == 1
    assert d["peak_main_meter_w"] == 4500.0
    assert d["per_battery"] == [{"id": 3, "charge_wh": 5.0, "discharge_wh": 0.0}]
    assert d["per_pv"][0]["id"] == 2
    assert d["soc_stats"]["mode_pct"] == 50
    assert d["main_meter_window_averages"][0]["window_start"] == "1970-01-01T00:15:00Z"
    assert d["main_meter_window_averages"][0]["avg_w"] == 7500.0


def test_report_to_dict_without_soc_stats():
    report = ScenarioReport(
        scenario_elapsed_s=0.0,
        peak_main_meter_w=0.0,
        main_meter_id=None,
        total_battery_charged_wh=0.0,
        total_battery_discharged_wh=0.0,
        total_pv_produced_wh=0.0,
    )
    d = report.to_dict()
    assert d["soc_stats"] is None
    assert d["per_battery"] == []
    assert d["main_meter_window_averages"] == []