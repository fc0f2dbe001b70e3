"""Page fetcher for the Star Rail bilibili wiki."""
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Tuple

import requests
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)


def parse_document(html_content: str) -> BeautifulSoup:
    """Parse fetched HTML into a queryable document."""
    return BeautifulSoup(html_content, 'html.parser')


class WikiScraper:
    """Fetches the event schedule and version history pages."""

    EVENTS_URL = "https://wiki.biligame.com/sr/活动一览"
    VERSIONS_URL = "https://wiki.biligame.com/sr/版本新增内容"

    MAX_RETRIES = 3
    BASE_DELAY = 1  # seconds

    def __init__(
        self,
        timeout: int = 30,
        events_url: str = EVENTS_URL,
        versions_url: str = VERSIONS_URL
    ):
        """
        Initialize the wiki scraper.

        Args:
            timeout: HTTP request timeout in seconds (default: 30)
            events_url: Event schedule page URL
            versions_url: Version history page URL
        """
        self.timeout = timeout
        self.events_url = events_url
        self.versions_url = versions_url

    def fetch_documents(self) -> Tuple[BeautifulSoup, BeautifulSoup]:
        """
        Fetch both pages in parallel.

        Returns:
            Tuple of (events_document, versions_document)

        Raises:
            requests.RequestException: If either page fails after all retries
        """
        logger.info("Fetching event schedule and version history pages")

        with ThreadPoolExecutor(max_workers=2) as executor:
            events_future = executor.submit(self.fetch_page, self.events_url)
            versions_future = executor.submit(self.fetch_page, self.versions_url)
            events_html = events_future.result()
            versions_html = versions_future.result()

        return parse_document(events_html), parse_document(versions_html)

    def fetch_page(self, url: str) -> str:
        """
        Fetch page HTML with retry logic.

        Args:
            url: Page URL

        Returns:
            HTML content as string

        Raises:
            requests.RequestException: If all retry attempts fail
        """
        for attempt in range(self.MAX_RETRIES):
            try:
                logger.info(f"Fetching {url} (attempt {attempt + 1}/{self.MAX_RETRIES})")
                response = requests.get(url, timeout=self.timeout)
                response.raise_for_status()
                return response.text

            except requests.RequestException as e:
                if attempt < self.MAX_RETRIES - 1:
                    delay = self.BASE_DELAY * (2 ** attempt)
                    logger.warning(
                        f"Request for {url} failed (attempt {attempt + 1}/{self.MAX_RETRIES}): {e}. "
                        f"Retrying in {delay} seconds..."
                    )
                    time.sleep(delay)
                else:
                    logger.error(
                        f"All {self.MAX_RETRIES} retry attempts failed for {url}. Last error: {e}"
                    )
                    raise
