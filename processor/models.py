"""Data models for version timelines and resolved events."""
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, Iterator, Optional

# The wiki publishes every date in China Standard Time
WIKI_TIMEZONE = timezone(timedelta(hours=8))

VERSION_DURATION = timedelta(days=42)


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as UTC ISO 8601 with milliseconds, e.g. 2023-06-05T19:59:00.000Z."""
    utc_value = value.astimezone(timezone.utc)
    return utc_value.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass(frozen=True)
class VersionInterval:
    """Effective window of one game version."""
    version_id: str
    start: datetime
    end: datetime

    @classmethod
    def from_start(cls, version_id: str, start: datetime) -> 'VersionInterval':
        return cls(version_id=version_id, start=start, end=start + VERSION_DURATION)


class VersionTimeline(Mapping):
    """Read-only mapping from version id to its VersionInterval."""

    def __init__(self, intervals: Optional[Dict[str, VersionInterval]] = None):
        self._intervals = dict(intervals or {})

    def __getitem__(self, version_id: str) -> VersionInterval:
        return self._intervals[version_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._intervals)

    def __len__(self) -> int:
        return len(self._intervals)

    def __repr__(self) -> str:
        return f"VersionTimeline({sorted(self._intervals)})"


class ResolutionKind(Enum):
    """How a date phrase was turned into a timestamp."""
    VERSION_START = 'version_start'
    VERSION_END = 'version_end'
    OPEN_HORIZON = 'open_horizon'
    SERVICE_LAUNCH = 'service_launch'
    ABSOLUTE = 'absolute'


@dataclass(frozen=True)
class Resolution:
    """Resolved date phrase."""
    timestamp: datetime
    kind: ResolutionKind
    version: Optional[str] = None

    @property
    def is_open_horizon(self) -> bool:
        return self.kind is ResolutionKind.OPEN_HORIZON


@dataclass(frozen=True)
class EventRecord:
    """Normalized event from the schedule page."""
    id: str
    name: str
    description: str
    start: datetime
    end: datetime

    def to_dict(self) -> Dict[str, str]:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'start': format_timestamp(self.start),
            'end': format_timestamp(self.end)
        }
