"""Unit tests for VersionTimelineBuilder."""
from datetime import datetime, timedelta, timezone

import pytest
from bs4 import BeautifulSoup

from processor.errors import DateParseError, WikiStructureError
from processor.models import WIKI_TIMEZONE, VersionInterval, VersionTimeline
from processor.version_timeline import VersionTimelineBuilder


def _version_page(rows: str) -> BeautifulSoup:
    header = ''.join(f'<th>col{i}</th>' for i in range(10))
    html = f"<table><tbody><tr>{header}</tr>{rows}</tbody></table>"
    return BeautifulSoup(html, 'html.parser')


class TestVersionTimelineBuilder:
    """Test cases for VersionTimelineBuilder class."""

    def test_build_from_sample_page(self, versions_document):
        """Test that the wide table is found and every row becomes a version."""
        timeline = VersionTimelineBuilder().build(versions_document)

        assert list(timeline) == ['1.0', '3.2', '3.3']
        assert timeline['3.2'].start == datetime(2024, 1, 31, 16, 0, tzinfo=timezone.utc)
        assert timeline['3.3'].start == datetime(2024, 3, 14, 4, 0, tzinfo=timezone.utc)

    def test_end_is_start_plus_six_weeks(self, timeline):
        """Test that every version window lasts exactly 42 days."""
        for interval in timeline.values():
            assert interval.end - interval.start == timedelta(days=42)
            assert interval.end > interval.start

    def test_line_breaks_are_stripped(self, timeline):
        """Test that version ids carry no line breaks."""
        assert '1.0' in timeline
        assert all('\n' not in version_id for version_id in timeline)

    def test_duplicate_version_keeps_first(self):
        """Test that a repeated version row does not overwrite the first one."""
        document = _version_page(
            "<tr><th>2.0</th><td>2024/02/06</td></tr>"
            "<tr><th>2.0</th><td>2024/03/27</td></tr>"
        )

        timeline = VersionTimelineBuilder().build(document)

        assert len(timeline) == 1
        assert timeline['2.0'].start == datetime(2024, 2, 6, tzinfo=WIKI_TIMEZONE)

    def test_unparseable_date_fails_build(self):
        """Test that a bad release date aborts the whole build."""
        document = _version_page(
            "<tr><th>2.0</th><td>2024/02/06</td></tr>"
            "<tr><th>2.1</th><td>待定</td></tr>"
        )

        with pytest.raises(DateParseError):
            VersionTimelineBuilder().build(document)

    def test_missing_table_raises(self):
        """Test that a page without a wide table is rejected."""
        document = BeautifulSoup(
            "<table><tr><th>a</th><th>b</th></tr><tr><th>1.0</th><td>2023/04/26</td></tr></table>",
            'html.parser'
        )

        with pytest.raises(WikiStructureError):
            VersionTimelineBuilder().build(document)

    def test_row_without_date_cell_raises(self):
        """Test that a row missing its date cell is a structure error."""
        document = _version_page("<tr><th>2.0</th></tr>")

        with pytest.raises(WikiStructureError):
            VersionTimelineBuilder().build(document)


class TestVersionTimeline:
    """Test cases for the VersionTimeline mapping."""

    def test_is_read_only(self):
        """Test that the timeline cannot be modified after construction."""
        start = datetime(2024, 2, 6, tzinfo=timezone.utc)
        source = {'2.0': VersionInterval.from_start('2.0', start)}
        timeline = VersionTimeline(source)

        source['2.1'] = VersionInterval.from_start('2.1', start)

        assert '2.1' not in timeline
        with pytest.raises(TypeError):
            timeline['2.2'] = VersionInterval.from_start('2.2', start)

    def test_get_missing_version(self):
        """Test mapping lookups for an unknown version."""
        timeline = VersionTimeline()

        assert timeline.get('9.9') is None
        assert len(timeline) == 0
