"""Gap extraction between consecutive activities of one kind."""

from typing import Sequence

from nursery.services.types import ActivityRecord

# Gaps of a day or more come from logging breaks, not from the baby's routine
MAX_INTERVAL_MINUTES = 24 * 60


def gap_minutes(previous: ActivityRecord, current: ActivityRecord) -> float:
    """Minutes from the effective end of one activity to the start of the next."""
    return (current.start_time - previous.effective_end()).total_seconds() / 60


def extract_intervals(records: Sequence[ActivityRecord]) -> list[float]:
    """
    Compute usable gaps between consecutive activities.

    Args:
        records: Activities of a single kind, sorted by start time

    Returns:
        Gap durations in minutes, in log order. Non-positive gaps (duplicates,
        overlapping entries) and gaps of 24h or more are dropped.
    """
    if len(records) < 2:
        return []

    intervals = []
    for previous, current in zip(records, records[1:]):
        gap = gap_minutes(previous, current)
        if 0 < gap < MAX_INTERVAL_MINUTES:
            intervals.append(gap)
    return intervals
