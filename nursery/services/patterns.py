"""Pattern learning over the activity log."""

import logging
from datetime import datetime, timedelta
from typing import Iterable, Sequence
from zoneinfo import ZoneInfo
import numpy as np

from nursery.services.clock import UTC, utc_to_local
from nursery.services.intervals import extract_intervals
from nursery.services.types import ActivityKind, ActivityRecord, Pattern

logger = logging.getLogger(__name__)

MINIMUM_SAMPLE_SIZE = 5
DEFAULT_WINDOW_DAYS = 14

NO_PATTERNS_MESSAGE = (
    "No patterns learned yet. Keep logging activities to help the app "
    "learn your baby's schedule."
)


def median_by_index(values: Sequence[float]) -> float:
    """
    Middle element of the sorted values.

    Even-length input returns the upper of the two middle elements rather
    than their average.
    """
    ordered = sorted(values)
    return ordered[len(ordered) // 2]


def compute_confidence(intervals: Sequence[float]) -> float:
    """
    Score how regular the intervals are, in [0, 1].

    Base score is 1 - coefficient of variation, plus a small bonus for
    larger samples (capped at 0.1).
    """
    if not intervals:
        return 0.0

    values = np.asarray(intervals, dtype=float)
    mean = float(np.mean(values))
    if mean == 0:
        return 0.0

    cv = float(np.std(values)) / mean
    base = max(0.0, min(1.0, 1.0 - cv))
    sample_bonus = min(0.1, len(values) / 100.0)
    return min(1.0, base + sample_bonus)


def hour_distribution(records: Sequence[ActivityRecord], tz: ZoneInfo = UTC) -> dict[int, float]:
    """Share of activities starting in each local hour of the day (all 24 hours present)."""
    counts = {hour: 0 for hour in range(24)}
    for record in records:
        counts[utc_to_local(record.start_time, tz).hour] += 1

    total = len(records)
    if total == 0:
        return {hour: 0.0 for hour in range(24)}
    return {hour: count / total for hour, count in counts.items()}


def analyze_pattern(
    records: Iterable[ActivityRecord],
    kind: ActivityKind,
    computed_at: datetime,
    minimum_sample_size: int = MINIMUM_SAMPLE_SIZE,
    tz: ZoneInfo = UTC,
) -> Pattern | None:
    """
    Learn the timing pattern for one activity kind.

    Args:
        records: Activity log entries (any kinds, any order)
        kind: The activity kind to analyse
        computed_at: Timestamp stamped on the resulting pattern
        minimum_sample_size: Activities of this kind required for a pattern
        tz: Zone whose wall clock defines the hour distribution

    Returns:
        The pattern, or None when there is not enough data.
    """
    kind_records = sorted(
        (r for r in records if r.kind == kind),
        key=lambda r: r.start_time,
    )

    if len(kind_records) < minimum_sample_size:
        logger.debug(f"Insufficient data for {kind.value}: {len(kind_records)} activities (need {minimum_sample_size})")
        return None

    intervals = extract_intervals(kind_records)
    if not intervals:
        logger.debug(f"No usable intervals for {kind.value}")
        return None

    return Pattern(
        kind=kind,
        typical_interval_minutes=float(median_by_index(intervals)),
        confidence=compute_confidence(intervals),
        hour_distribution=hour_distribution(kind_records, tz),
        sample_size=len(kind_records),
        computed_at=computed_at,
    )


def analyze_patterns(
    records: Iterable[ActivityRecord],
    reference_time: datetime,
    window_days: int = DEFAULT_WINDOW_DAYS,
    minimum_sample_size: int = MINIMUM_SAMPLE_SIZE,
    tz: ZoneInfo = UTC,
) -> dict[ActivityKind, Pattern]:
    """
    Learn patterns for every activity kind from a recent window of the log.

    Args:
        records: Activity log snapshot
        reference_time: End of the analysis window, also used as computed_at
        window_days: Days of history before reference_time to consider
        minimum_sample_size: Activities per kind required for a pattern
        tz: Zone whose wall clock defines the hour distribution

    Returns:
        Mapping of kind to pattern. Kinds without enough data are omitted.
    """
    cutoff = reference_time - timedelta(days=window_days)
    recent = [r for r in records if cutoff <= r.start_time <= reference_time]

    patterns = {}
    for kind in ActivityKind:
        pattern = analyze_pattern(recent, kind, reference_time, minimum_sample_size, tz)
        if pattern is not None:
            patterns[kind] = pattern

    logger.info(f"Learned {len(patterns)} patterns from {len(recent)} activities in the last {window_days} days")
    return patterns


def pattern_summary(patterns: dict[ActivityKind, Pattern]) -> str:
    """Plain-English summary of the learned patterns."""
    if not patterns:
        return NO_PATTERNS_MESSAGE

    lines = ["Learned patterns:"]
    for kind in sorted(patterns, key=lambda k: k.value):
        pattern = patterns[kind]
        lines.append(
            f"- {kind.description.title()}: every ~{pattern.interval_description} "
            f"({pattern.confidence_description} confidence)"
        )
    return "\n".join(lines)


def typical_sleep_duration_minutes(records: Iterable[ActivityRecord]) -> float | None:
    """Typical length of a completed sleep, or None with fewer than 3 sleeps."""
    durations = [
        (r.end_time - r.start_time).total_seconds() / 60
        for r in records
        if r.kind == ActivityKind.SLEEP and r.end_time is not None
    ]
    if len(durations) < 3:
        return None
    return median_by_index(durations)
