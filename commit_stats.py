# commit_stats.py
"""
Commit-pattern aggregator.

Turns a sequence of CommitRecord into a CommitStatistics profile in a
single pass. Pure and synchronous: no I/O, no logging, no failure modes
for well-formed records (the empty sequence included).
"""
from typing import Iterable, List, Sequence, Tuple

from models import (
    HOUR_LABELS,
    WEEKDAY_LABELS,
    CommitRecord,
    CommitStatistics,
    MessageLengthStats,
)

HOUR_GROUP_SIZE = 6


def round_half_up(numerator: int, denominator: int) -> int:
    """Integer division rounded half-up (1.5 -> 2), for non-negative inputs."""
    if denominator <= 0:
        return 0
    return (2 * numerator + denominator) // (2 * denominator)


def busiest_label(counts: Sequence[int], labels: Sequence[str]) -> str:
    """
    Argmax over a fixed bucket array.

    Scans in canonical order and only replaces the leader on a strictly
    greater count, so ties resolve to the earliest label.
    """
    leader = 0
    for index in range(1, len(labels)):
        if counts[index] > counts[leader]:
            leader = index
    return labels[leader]


def weekday_index(commit: CommitRecord) -> int:
    # isoweekday(): Monday=1 .. Sunday=7, so % 7 puts Sunday at 0.
    return commit.timestamp.isoweekday() % 7


def compute_statistics(commits: Iterable[CommitRecord]) -> CommitStatistics:
    """
    Build the commit-pattern profile.

    Weekday and hour come from each timestamp in its own UTC offset, so a
    commit keeps the local time of the author who made it.
    """
    weekday_counts: List[int] = [0] * len(WEEKDAY_LABELS)
    hour_counts: List[int] = [0] * len(HOUR_LABELS)
    total = 0
    total_length = 0
    min_length = float("inf")
    max_length = 0

    for commit in commits:
        weekday_counts[weekday_index(commit)] += 1
        hour_counts[commit.timestamp.hour] += 1

        length = len(commit.message)
        total += 1
        total_length += length
        min_length = min(min_length, length)
        max_length = max(max_length, length)

    message_length = MessageLengthStats(
        min=int(min_length) if total > 0 else 0,
        max=max_length,
        avg=round_half_up(total_length, total),
    )

    return CommitStatistics(
        total=total,
        weekday_counts=tuple(weekday_counts),
        hour_counts=tuple(hour_counts),
        message_length=message_length,
        busiest_weekday=busiest_label(weekday_counts, WEEKDAY_LABELS),
        busiest_hour=busiest_label(hour_counts, HOUR_LABELS),
    )


def group_hours(
    hour_counts: Sequence[int], size: int = HOUR_GROUP_SIZE
) -> List[Tuple[str, int]]:
    """Collapse the 24 hour buckets into labelled blocks ("00-05", ...)."""
    groups = []
    for start in range(0, len(hour_counts), size):
        end = min(start + size, len(hour_counts)) - 1
        groups.append(
            (f"{start:02d}-{end:02d}", sum(hour_counts[start : end + 1]))
        )
    return groups
