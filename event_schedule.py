"""Query for the resolved wiki event schedule."""
import logging
from datetime import datetime
from typing import Callable, List, Optional

from bs4 import BeautifulSoup

from processor.event_extractor import EventExtractor
from processor.models import EventRecord
from processor.version_timeline import VersionTimelineBuilder
from scraper.wiki_scraper import WikiScraper

logger = logging.getLogger(__name__)


def build_events(
    events_document: BeautifulSoup,
    versions_document: BeautifulSoup,
    clock: Optional[Callable[[], datetime]] = None,
    skip_malformed: bool = False
) -> List[EventRecord]:
    """
    Build the version timeline and resolve every event against it.

    Args:
        events_document: Parsed event schedule page
        versions_document: Parsed version history page
        clock: Current-moment source for the open-horizon fallback
        skip_malformed: Log and skip malformed event rows instead of raising

    Returns:
        EventRecords in schedule table order
    """
    timeline = VersionTimelineBuilder().build(versions_document)
    extractor = EventExtractor(timeline, clock=clock, skip_malformed=skip_malformed)
    return extractor.extract(events_document)


def get_all_events() -> List[EventRecord]:
    """Fetch both wiki pages and return the resolved event list."""
    events_document, versions_document = WikiScraper().fetch_documents()
    return build_events(events_document, versions_document)
