# models.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Tuple

# Canonical bucket order: Sunday first, hours ascending.
WEEKDAY_LABELS: Tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)
HOUR_LABELS: Tuple[str, ...] = tuple(str(hour) for hour in range(24))


@dataclass(frozen=True)
class CommitRecord:
    """One commit as reported by a history source."""

    hash: str
    timestamp: datetime
    message: str
    author_name: str
    author_email: str

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    @property
    def is_merge_commit(self) -> bool:
        return self.message.lower().startswith("merge")


@dataclass(frozen=True)
class MessageLengthStats:
    min: int = 0
    max: int = 0
    avg: int = 0


@dataclass(frozen=True)
class CommitStatistics:
    """
    Commit-pattern profile derived from a sequence of CommitRecord.

    The bucket tuples are indexed by WEEKDAY_LABELS / HOUR_LABELS.
    """

    total: int
    weekday_counts: Tuple[int, ...]
    hour_counts: Tuple[int, ...]
    message_length: MessageLengthStats = field(default_factory=MessageLengthStats)
    busiest_weekday: str = WEEKDAY_LABELS[0]
    busiest_hour: str = HOUR_LABELS[0]

    @property
    def counts_by_weekday(self) -> Dict[str, int]:
        return {
            label: self.weekday_counts[index]
            for index, label in enumerate(WEEKDAY_LABELS)
        }

    @property
    def counts_by_hour(self) -> Dict[str, int]:
        return {
            label: self.hour_counts[index] for index, label in enumerate(HOUR_LABELS)
        }

    def to_dict(self) -> Dict:
        return {
            "total": self.total,
            "countsByWeekday": self.counts_by_weekday,
            "countsByHour": self.counts_by_hour,
            "messageLength": {
                "min": self.message_length.min,
                "max": self.message_length.max,
                "avg": self.message_length.avg,
            },
            "busiestWeekday": self.busiest_weekday,
            "busiestHour": self.busiest_hour,
        }


@dataclass(frozen=True)
class RepoInfo:
    """Repository identity shown in reports."""

    name: str
    branch_count: int
    path: str
