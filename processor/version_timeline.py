"""Builder for the version timeline from the version history page."""
import logging
from typing import Dict, List

from bs4 import BeautifulSoup, Tag

from processor.date_resolver import parse_wiki_datetime
from processor.errors import WikiStructureError
from processor.models import VersionInterval, VersionTimeline

logger = logging.getLogger(__name__)


def cell_text(cell: Tag) -> str:
    """Return the text of a table cell with line breaks removed."""
    return cell.get_text().replace('\r', '').replace('\n', '')


def table_rows(table: Tag) -> List[Tag]:
    """Return the rows that belong to `table` itself, skipping nested tables."""
    return [row for row in table.find_all('tr') if row.find_parent('table') is table]


class VersionTimelineBuilder:
    """Parses the version history table into a VersionTimeline."""

    # The table has no id; it is the only one with a header this wide
    HEADER_MIN_COLUMNS = 10

    def build(self, document: BeautifulSoup) -> VersionTimeline:
        """
        Build the timeline from the version history document.

        Args:
            document: Parsed version history page

        Returns:
            VersionTimeline keyed by version id

        Raises:
            WikiStructureError: If the version table or a row cell is missing
            DateParseError: If a row's release date cannot be parsed
        """
        rows = self._find_version_rows(document)
        intervals: Dict[str, VersionInterval] = {}

        for row in rows:
            header = row.find('th')
            first_cell = row.find('td')
            if header is None or first_cell is None:
                raise WikiStructureError(f"Version row without header or date cell: {row}")

            version_id = cell_text(header).strip()
            start = parse_wiki_datetime(cell_text(first_cell))

            if version_id in intervals:
                logger.warning(
                    f"Duplicate version row for {version_id}, keeping first occurrence"
                )
                continue

            intervals[version_id] = VersionInterval.from_start(version_id, start)

        logger.info(f"Built version timeline with {len(intervals)} versions")
        return VersionTimeline(intervals)

    def _find_version_rows(self, document: BeautifulSoup) -> List[Tag]:
        for table in document.find_all('table'):
            rows = table_rows(table)
            if not rows:
                continue
            header_cells = rows[0].find_all(['th', 'td'], recursive=False)
            if len(header_cells) >= self.HEADER_MIN_COLUMNS:
                return rows[1:]

        raise WikiStructureError(
            f"No table with at least {self.HEADER_MIN_COLUMNS} header columns found"
        )
