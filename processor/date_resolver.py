"""Resolver for the wiki's version-relative date phrases."""
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Tuple

from processor.errors import DateParseError, UnknownVersionError
from processor.models import (
    WIKI_TIMEZONE,
    Resolution,
    ResolutionKind,
    VersionTimeline,
)

logger = logging.getLogger(__name__)

SERVICE_LAUNCH = datetime(2023, 6, 5, 19, 59, tzinfo=timezone.utc)

DATE_FORMATS = [
    '%Y-%m-%dT%H:%M:%S.%f%z',  # ISO 8601 with offset
    '%Y-%m-%dT%H:%M:%S%z',
    '%Y-%m-%d %H:%M:%S%z',
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%d %H:%M',
    '%Y-%m-%d',
    '%Y/%m/%d %H:%M:%S',
    '%Y/%m/%d %H:%M',
    '%Y/%m/%d',
    '%Y年%m月%d日 %H:%M:%S',
    '%Y年%m月%d日 %H:%M',
    '%Y年%m月%d日%H:%M',
    '%Y年%m月%d日',
]


def parse_wiki_datetime(text: str) -> datetime:
    """
    Parse an absolute date-time as published on the wiki.

    Args:
        text: Date text, e.g. "2024/02/06 12:00" or "2023-04-26"

    Returns:
        Timezone-aware datetime; naive values are anchored to UTC+8

    Raises:
        DateParseError: If no known format matches
    """
    normalized = ' '.join(text.split())

    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(normalized, fmt)
        except ValueError:
            continue
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=WIKI_TIMEZONE)
        return parsed

    raise DateParseError(text)


def end_of_next_month(now: datetime) -> datetime:
    """Return UTC+8 midnight at the start of the last day of the month after `now`."""
    local_now = now.astimezone(WIKI_TIMEZONE)
    year = local_now.year
    month = local_now.month + 2
    if month > 12:
        year += 1
        month -= 12
    return datetime(year, month, 1, tzinfo=WIKI_TIMEZONE) - timedelta(days=1)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PhraseRule:
    """One (matcher, resolver) pair of the phrase dispatch table."""
    name: str
    pattern: re.Pattern
    handler: Callable[['DateExpressionResolver', re.Match, str], Resolution]


VERSION = r'(\d+\.\d+)\s*'


class DateExpressionResolver:
    """Turns date phrases into absolute timestamps using a VersionTimeline."""

    def __init__(
        self,
        timeline: VersionTimeline,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the resolver.

        Args:
            timeline: Version windows to resolve version phrases against
            clock: Returns the current moment; used by the open-horizon fallback
        """
        self.timeline = timeline
        self.clock = clock or utc_now

    def resolve(self, phrase: str) -> datetime:
        """Resolve a phrase to its timestamp."""
        return self.resolve_phrase(phrase).timestamp

    def resolve_phrase(self, phrase: str) -> Resolution:
        """
        Resolve a phrase by trying each rule in PHRASE_RULES, first match wins.

        Args:
            phrase: One side of an event's time range

        Returns:
            Resolution carrying the timestamp and how it was derived

        Raises:
            UnknownVersionError: A start or "ends" phrase names an unknown version
            DateParseError: No rule matched and the text is not an absolute date
        """
        for rule in PHRASE_RULES:
            match = rule.pattern.search(phrase)
            if match:
                return rule.handler(self, match, phrase)

        return Resolution(
            timestamp=parse_wiki_datetime(phrase),
            kind=ResolutionKind.ABSOLUTE
        )

    def _resolve_released_after(self, match: re.Match, phrase: str) -> Resolution:
        version = match.group(1)
        if version not in self.timeline:
            raise UnknownVersionError(version, phrase)
        return Resolution(
            timestamp=self.timeline[version].start,
            kind=ResolutionKind.VERSION_START,
            version=version
        )

    def _resolve_ends_before(self, match: re.Match, phrase: str) -> Resolution:
        version = match.group(1)
        if version in self.timeline:
            return Resolution(
                timestamp=self.timeline[version].end,
                kind=ResolutionKind.VERSION_END,
                version=version
            )

        # Events are often announced to run past the newest documented version
        fallback = end_of_next_month(self.clock())
        logger.info(
            f"Version {version} not in timeline yet, "
            f"using open-horizon end {fallback.isoformat()}"
        )
        return Resolution(
            timestamp=fallback,
            kind=ResolutionKind.OPEN_HORIZON,
            version=version
        )

    def _resolve_ends(self, match: re.Match, phrase: str) -> Resolution:
        version = match.group(1)
        if version not in self.timeline:
            raise UnknownVersionError(version, phrase)
        return Resolution(
            timestamp=self.timeline[version].end,
            kind=ResolutionKind.VERSION_END,
            version=version
        )

    def _resolve_service_launch(self, match: re.Match, phrase: str) -> Resolution:
        return Resolution(timestamp=SERVICE_LAUNCH, kind=ResolutionKind.SERVICE_LAUNCH)


# Evaluated in order; "ends before" has to be tried ahead of the bare "ends".
PHRASE_RULES: Tuple[PhraseRule, ...] = (
    PhraseRule(
        name='released_after',
        pattern=re.compile(VERSION + r'(?:版本更新后|version released after)', re.IGNORECASE),
        handler=DateExpressionResolver._resolve_released_after
    ),
    PhraseRule(
        name='ends_before',
        pattern=re.compile(VERSION + r'(?:版本结束前|version ends before)', re.IGNORECASE),
        handler=DateExpressionResolver._resolve_ends_before
    ),
    PhraseRule(
        name='ends',
        pattern=re.compile(VERSION + r'(?:版本结束|version ends)', re.IGNORECASE),
        handler=DateExpressionResolver._resolve_ends
    ),
    PhraseRule(
        name='service_launch',
        pattern=re.compile(r'正式开服后|official service launch after', re.IGNORECASE),
        handler=DateExpressionResolver._resolve_service_launch
    ),
)
