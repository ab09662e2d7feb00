# 📄 File: tests/test_aggregator.py
# 🧪 Purpose (Technical Summary):
# Pure aggregation over scan records: UTC day bucketing, half-up rounding,
# malformed-record tolerance, ragged metric averaging and input-order independence.

import random
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from farmx.modules.analytics.domain.models.analytics import ScanRecord
from farmx.modules.analytics.domain.services import aggregator


def scan(timestamp, health_score=None, metrics=None, scan_id="s"):
    return ScanRecord(scan_id=scan_id, timestamp=timestamp, health_score=health_score, metrics=metrics or {})


def utc(year, month, day, hour=12, minute=0):
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def test_health_trend_groups_by_utc_day_and_rounds_half_up():
    minus_two = timezone(timedelta(hours=-2))
    scans = [
        scan(utc(2026, 3, 1, 8), 80),
        scan(utc(2026, 3, 1, 9), 81),
        # 23:30 at UTC-2 is already the next UTC day
        scan(datetime(2026, 3, 1, 23, 30, tzinfo=minus_two), 60),
    ]

    trend = aggregator.health_trend(scans)

    assert [(p.date, p.avg_health_score, p.count) for p in trend] == [
        ("2026-03-01", 81, 2),
        ("2026-03-02", 60, 1),
    ]


def test_health_trend_skips_malformed_scores():
    scans = [
        scan(utc(2026, 3, 1), 70),
        scan(utc(2026, 3, 1), "90"),
        scan(utc(2026, 3, 1), True),
        scan(utc(2026, 3, 1), None),
        scan(utc(2026, 3, 1), 150),
        scan(utc(2026, 3, 1), -5),
        scan(utc(2026, 3, 1), float("nan")),
        scan(None, 50),
        scan(utc(2026, 3, 2), "bad"),
    ]

    trend = aggregator.health_trend(scans)

    assert [(p.date, p.avg_health_score, p.count) for p in trend] == [("2026-03-01", 70, 1)]


def test_health_trend_treats_naive_timestamps_as_utc():
    trend = aggregator.health_trend([scan(datetime(2026, 5, 4, 23, 59), 10)])

    assert trend[0].date == "2026-05-04"


def test_scan_frequency_averages_over_the_whole_window():
    scans = [
        scan(utc(2026, 3, 1, 1)),
        scan(utc(2026, 3, 1, 2)),
        scan(utc(2026, 3, 3)),
        scan(None),
    ]

    result = aggregator.scan_frequency(scans, days_in_window=7)

    assert result.total_scans == 3
    assert result.avg_daily_scans == 0.43
    assert [(p.date, p.count) for p in result.frequency] == [("2026-03-01", 2), ("2026-03-03", 1)]


def test_scan_frequency_with_no_scans():
    result = aggregator.scan_frequency([], days_in_window=30)

    assert result.total_scans == 0
    assert result.avg_daily_scans == 0.0
    assert result.frequency == []


def test_scan_frequency_never_divides_by_zero():
    result = aggregator.scan_frequency([scan(utc(2026, 3, 1))], days_in_window=0)

    assert result.avg_daily_scans == 1.0


def test_metric_averages_handle_ragged_and_malformed_metrics():
    scans = [
        scan(utc(2026, 3, 1), metrics={"ph": 7.0, "temp": 20}),
        scan(utc(2026, 3, 1), metrics={"ph": 8.0, "oxygen": 5.5}),
        scan(utc(2026, 3, 2), metrics={"ph": "7.5", "temp": None, "flag": True}),
        ScanRecord(scan_id="odd", timestamp=utc(2026, 3, 2), metrics=["not", "a", "map"]),
    ]

    averages = aggregator.metric_averages(scans)

    assert averages == {"oxygen": 5.5, "ph": 7.5, "temp": 20.0}


def test_pond_analytics_builds_daily_trend():
    scans = [
        scan(utc(2026, 3, 2), metrics={"ph": 6.0}),
        scan(utc(2026, 3, 1), metrics={"ph": 7.0, "temp": 18}),
        scan(utc(2026, 3, 1), metrics={"ph": 8.0}),
        scan(None, metrics={"ph": 100}),
    ]

    result = aggregator.pond_analytics(scans)

    assert result.total_scans == 3
    assert result.avg_metrics == {"ph": 7.0, "temp": 18.0}
    assert [(p.date, p.count, p.avg_metrics) for p in result.trend] == [
        ("2026-03-01", 2, {"ph": 7.5, "temp": 18.0}),
        ("2026-03-02", 1, {"ph": 6.0}),
    ]


def test_round_half_up():
    assert aggregator.round_half_up(2.5) == Decimal("3")
    assert aggregator.round_half_up(3.5) == Decimal("4")
    assert aggregator.round_half_up(0.125, 2) == Decimal("0.13")
    assert aggregator.round_half_up(80.49) == Decimal("80")


def test_health_trend_daily_means_over_two_days():
    scans = [
        scan(utc(2024, 1, 1, 8), 80),
        scan(utc(2024, 1, 1, 17), 60),
        scan(utc(2024, 1, 2, 9), 90),
    ]

    trend = aggregator.health_trend(scans)

    assert [(p.date, p.avg_health_score, p.count) for p in trend] == [
        ("2024-01-01", 70, 2),
        ("2024-01-02", 90, 1),
    ]


def test_results_do_not_depend_on_input_order():
    rng = random.Random(7)
    scans = [
        scan(
            utc(2026, 4, 1 + i % 6, i % 24),
            health_score=rng.uniform(0, 100),
            metrics={"ph": rng.uniform(6, 9), "temp": rng.uniform(10, 30)},
            scan_id=f"s{i}",
        )
        for i in range(60)
    ]
    expected_trend = aggregator.health_trend(scans)
    expected_pond = aggregator.pond_analytics(scans)

    for _ in range(20):
        shuffled = scans[:]
        rng.shuffle(shuffled)
        assert aggregator.health_trend(shuffled) == expected_trend
        assert aggregator.scan_frequency(shuffled, 7) == aggregator.scan_frequency(scans, 7)
        assert aggregator.pond_analytics(shuffled) == expected_pond
