"""Extractor for the event schedule page."""
import hashlib
import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from processor.date_resolver import DateExpressionResolver
from processor.errors import MalformedRowError, WikiStructureError
from processor.models import EventRecord, VersionTimeline
from processor.version_timeline import cell_text, table_rows

logger = logging.getLogger(__name__)


class EventExtractor:
    """Extracts and resolves time-bounded events from the schedule table."""

    TABLE_ID = 'CardSelectTr'
    CATEGORY_ATTRIBUTE = 'data-param1'
    CATEGORY_SEPARATOR = ', '
    RANGE_SEPARATOR = '~'
    TIME_COLUMN = 0
    NAME_COLUMN = 2

    # Events without a bounded window
    EXCLUDED_CATEGORIES = frozenset({
        '特殊活动',
        '永久活动',
        'special event',
        'permanent event',
    })

    def __init__(
        self,
        timeline: VersionTimeline,
        clock: Optional[Callable[[], datetime]] = None,
        skip_malformed: bool = False
    ):
        """
        Initialize the extractor.

        Args:
            timeline: Version windows used to resolve date phrases
            clock: Current-moment source for the open-horizon fallback
            skip_malformed: Log and skip malformed rows instead of raising
        """
        self.resolver = DateExpressionResolver(timeline, clock=clock)
        self.skip_malformed = skip_malformed

    def extract(self, document: BeautifulSoup) -> List[EventRecord]:
        """
        Extract events in document order.

        Args:
            document: Parsed event schedule page

        Returns:
            List of EventRecord objects, excluded categories removed

        Raises:
            WikiStructureError: If the schedule table is missing
            MalformedRowError: If a row's time range cannot be split
            UnknownVersionError: If a phrase references an unknown version
        """
        table = self._find_schedule_table(document)

        events = []
        skipped = 0

        for row_index, row in enumerate(table_rows(table)[1:], start=1):
            categories = row.get(self.CATEGORY_ATTRIBUTE, '')
            if self.is_excluded(categories):
                logger.debug(f"Skipping row {row_index} with categories '{categories}'")
                skipped += 1
                continue

            try:
                events.append(self._extract_row(row_index, row, categories))
            except MalformedRowError as e:
                if not self.skip_malformed:
                    raise
                logger.warning(f"Skipping malformed row: {e}")

        logger.info(
            f"Extracted {len(events)} events, skipped {skipped} excluded rows"
        )
        return events

    def _find_schedule_table(self, document: BeautifulSoup) -> Tag:
        anchor = document.find(id=self.TABLE_ID)
        if anchor is None:
            raise WikiStructureError(f"Event schedule table #{self.TABLE_ID} not found")

        # The id may sit on the table itself or on a wrapper around it
        table = anchor if anchor.name == 'table' else anchor.find('table')
        if table is None:
            raise WikiStructureError(f"Element #{self.TABLE_ID} contains no table")
        return table

    def is_excluded(self, categories: str) -> bool:
        """Check whether a category list contains an excluded category."""
        return any(
            category in self.EXCLUDED_CATEGORIES
            for category in categories.split(self.CATEGORY_SEPARATOR)
        )

    def _extract_row(self, row_index: int, row: Tag, categories: str) -> EventRecord:
        cells = row.find_all('td')
        if len(cells) <= max(self.TIME_COLUMN, self.NAME_COLUMN):
            raise MalformedRowError(row_index, '', f"expected at least {self.NAME_COLUMN + 1} cells")

        name = cell_text(cells[self.NAME_COLUMN]).strip()
        start_phrase, end_phrase = self.split_time_range(
            row_index, name, cell_text(cells[self.TIME_COLUMN])
        )

        return EventRecord(
            id=self.generate_event_id(name),
            name=name,
            description=categories,
            start=self.resolver.resolve(start_phrase),
            end=self.resolver.resolve(end_phrase)
        )

    def split_time_range(self, row_index: int, name: str, time_text: str) -> Tuple[str, str]:
        """
        Split a time range cell into start and end phrases.

        Args:
            row_index: Position of the row after the header, for error context
            name: Event name, for error context
            time_text: Time cell text, e.g. "2024/02/06 12:00~2.0版本结束"

        Returns:
            Tuple of (start_phrase, end_phrase)
        """
        parts = time_text.split(self.RANGE_SEPARATOR)
        if len(parts) != 2:
            raise MalformedRowError(
                row_index,
                name,
                f"expected exactly one '{self.RANGE_SEPARATOR}' in {time_text!r}"
            )
        return parts[0].strip(), parts[1].strip()

    @staticmethod
    def generate_event_id(name: str) -> str:
        """
        Generate a stable identifier for an event from its name.

        Args:
            name: Event display name

        Returns:
            SHA256 hex digest of the name
        """
        return hashlib.sha256(name.encode('utf-8')).hexdigest()
