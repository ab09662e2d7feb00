# 📄 File: farmx/modules/analytics/domain/services/aggregator.py
# 🧭 Purpose (Layman Explanation):
# Does the number crunching for the farm charts: average health per day, how many
# scans happened each day, and the average of each water measurement.
# 🧪 Purpose (Technical Summary):
# Pure, order-independent aggregation over ScanRecord lists. Days are UTC calendar days
# (naive timestamps read as UTC), sums use math.fsum, output is date-sorted, and
# malformed records or values are skipped individually instead of failing the request.
# 🔗 Dependencies:
# math, decimal, collections, farmx.shared.utils.formatters
# 🔄 Connected Modules / Calls From:
# analytics_service.py, tests

import math
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional

from farmx.modules.analytics.domain.models.analytics import (
    FrequencyPoint,
    HealthTrendPoint,
    PondAnalytics,
    PondTrendPoint,
    ScanFrequency,
    ScanRecord,
)
from farmx.shared.utils.formatters import format_day

HEALTH_SCORE_MIN = 0
HEALTH_SCORE_MAX = 100


def numeric_value(value: Any) -> Optional[float]:
    """
    Value as float if it is a finite real number, else None.

    Booleans are not numbers here, and neither are numeric-looking strings.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def valid_health_score(value: Any) -> Optional[float]:
    score = numeric_value(value)
    if score is None or not HEALTH_SCORE_MIN <= score <= HEALTH_SCORE_MAX:
        return None
    return score


def round_half_up(value: float, places: int = 0) -> Decimal:
    exponent = Decimal(1).scaleb(-places)
    return Decimal(repr(value)).quantize(exponent, rounding=ROUND_HALF_UP)


def _scan_day(scan: ScanRecord) -> Optional[str]:
    if scan.timestamp is None:
        return None
    return format_day(scan.timestamp)


def _numeric_metrics(scan: ScanRecord) -> Dict[str, float]:
    if not isinstance(scan.metrics, dict):
        return {}
    values = {}
    for key, raw in scan.metrics.items():
        number = numeric_value(raw)
        if number is not None:
            values[str(key)] = number
    return values


def _average_metrics(samples: Dict[str, List[float]]) -> Dict[str, float]:
    return {key: math.fsum(values) / len(values) for key, values in sorted(samples.items()) if values}


# =============================================================================
# AGGREGATIONS
# =============================================================================

def health_trend(scans: Iterable[ScanRecord]) -> List[HealthTrendPoint]:
    """
    Mean health score per UTC day, rounded half-up to an integer.

    count is the number of scored scans that day; days without a usable
    score do not appear.
    """
    scores_by_day: Dict[str, List[float]] = defaultdict(list)
    for scan in scans:
        day = _scan_day(scan)
        score = valid_health_score(scan.health_score)
        if day is None or score is None:
            continue
        scores_by_day[day].append(score)

    return [
        HealthTrendPoint(
            date=day,
            avg_health_score=int(round_half_up(math.fsum(scores) / len(scores))),
            count=len(scores),
        )
        for day, scores in sorted(scores_by_day.items())
    ]


def scan_frequency(scans: Iterable[ScanRecord], days_in_window: int) -> ScanFrequency:
    """Scans per UTC day plus the average over the whole window (not just active days)."""
    counts: Dict[str, int] = defaultdict(int)
    for scan in scans:
        day = _scan_day(scan)
        if day is None:
            continue
        counts[day] += 1

    total = sum(counts.values())
    days = max(int(days_in_window), 1)
    average = (Decimal(total) / Decimal(days)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    return ScanFrequency(
        total_scans=total,
        avg_daily_scans=float(average),
        frequency=[FrequencyPoint(date=day, count=count) for day, count in sorted(counts.items())],
    )


def metric_averages(scans: Iterable[ScanRecord]) -> Dict[str, float]:
    """Per-key mean over every scan that reports a usable value for that key."""
    samples: Dict[str, List[float]] = defaultdict(list)
    for scan in scans:
        for key, value in _numeric_metrics(scan).items():
            samples[key].append(value)
    return _average_metrics(samples)


def pond_analytics(scans: Iterable[ScanRecord]) -> PondAnalytics:
    """Totals, overall metric means and a per-day trend for one pond's window."""
    scans = [scan for scan in scans if scan.timestamp is not None]

    day_counts: Dict[str, int] = defaultdict(int)
    day_samples: Dict[str, Dict[str, List[float]]] = defaultdict(lambda: defaultdict(list))
    for scan in scans:
        day = _scan_day(scan)
        day_counts[day] += 1
        for key, value in _numeric_metrics(scan).items():
            day_samples[day][key].append(value)

    trend = [
        PondTrendPoint(date=day, count=count, avg_metrics=_average_metrics(day_samples.get(day, {})))
        for day, count in sorted(day_counts.items())
    ]
    return PondAnalytics(total_scans=len(scans), avg_metrics=metric_averages(scans), trend=trend)
