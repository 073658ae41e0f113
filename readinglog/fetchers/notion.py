"""
Notion database fetcher for the reading log.
"""
import logging
from typing import Dict, Iterator, List, Mapping, Optional

import requests
import tqdm

from readinglog.config import NotionSettings
from readinglog.core.article import Article, Category
from readinglog.core.classifier import classify_category

# Configure logging
logger = logging.getLogger(__name__)

NOTION_API_URL = "https://api.notion.com/v1"


class NotionFetcher:
    """
    Fetches reading log entries from a Notion database.
    """
    def __init__(self, settings: NotionSettings, session: Optional[requests.Session] = None,
                 show_progress: bool = True):
        """
        Initialize the NotionFetcher.

        Args:
            settings: Notion credentials and query options
            session: HTTP session to use, a new one is created if omitted
            show_progress: Whether to display a progress bar while paging
        """
        self.settings = settings
        self.show_progress = show_progress
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({
            'Authorization': f'Bearer {settings.token}',
            'Notion-Version': settings.version,
            'Content-Type': 'application/json',
        })

    def close(self) -> None:
        """Close the HTTP session if this fetcher created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "NotionFetcher":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    @property
    def query_url(self) -> str:
        return f"{NOTION_API_URL}/databases/{self.settings.database}/query"

    def query_page(self, log_number: int, cursor: Optional[str] = None) -> Dict:
        """
        Query a single page of entries for a reading log.

        Args:
            log_number: The issue number to filter on
            cursor: Continuation cursor from the previous page, if any

        Returns:
            The decoded response body

        Raises:
            requests.RequestException: If the request fails
        """
        payload = {
            "filter": {
                "property": self.settings.issue_property,
                "number": {"equals": log_number},
            },
            "page_size": self.settings.page_size,
        }
        if cursor:
            payload["start_cursor"] = cursor

        try:
            response = self.session.post(self.query_url, json=payload, timeout=self.settings.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"An error occurred while querying Notion: {e}")
            if getattr(e, 'response', None) is not None:
                logger.error(f"Status code: {e.response.status_code}")
                if e.response.status_code == 401:
                    logger.error("Authentication failed. Please check your Notion token")
            raise

    def iter_pages(self, log_number: int) -> Iterator[Dict]:
        """
        Yield every result page for a reading log, following cursors.

        Args:
            log_number: The issue number to filter on

        Yields:
            Response bodies in the order the API returned them
        """
        if log_number < 1:
            raise ValueError(f"Reading log number must be positive, got {log_number}")

        cursor = None
        while True:
            page = self.query_page(log_number, cursor)
            yield page

            cursor = page.get('next_cursor')
            if not page.get('has_more') or not cursor:
                break

    def fetch_records(self, log_number: int) -> List[Dict]:
        """
        Fetch all raw Notion records for a reading log.

        Args:
            log_number: The issue number to filter on

        Returns:
            List of records across all pages, in arrival order
        """
        records = []
        with tqdm.tqdm(desc="Fetching pages", unit="page", disable=not self.show_progress) as pbar:
            for page in self.iter_pages(log_number):
                results = page.get('results') or []
                records.extend(results)
                logger.debug(f"Fetched page with {len(results)} records")
                pbar.update(1)

        logger.info(f"Fetched {len(records)} records for reading log #{log_number}")
        return records

    def fetch_articles(self, log_number: int,
                       aliases: Optional[Mapping[str, Category]] = None) -> List[Article]:
        """
        Fetch and map all articles for a reading log.

        Args:
            log_number: The issue number to filter on
            aliases: Extra category label mappings

        Returns:
            List of Article objects
        """
        return [article_from_record(record, aliases) for record in self.fetch_records(log_number)]


def _find_property(properties: Mapping[str, Dict], name: str) -> Dict:
    for key, value in properties.items():
        if key.lower() == name:
            return value or {}
    return {}


def _first_plain_text(fragments) -> str:
    if not fragments:
        return ""
    return fragments[0].get('plain_text') or ""


def article_from_record(record: Mapping, aliases: Optional[Mapping[str, Category]] = None) -> Article:
    """
    Map a Notion page record to an Article.

    Args:
        record: A page object from a database query
        aliases: Extra category label mappings

    Returns:
        The mapped Article; missing values become empty strings
    """
    properties = record.get('properties') or {}

    title = _find_property(properties, 'title')
    author = _find_property(properties, 'author')
    url = _find_property(properties, 'url')
    category = _find_property(properties, 'category')

    select = category.get('select') or {}
    label = (select.get('name') or "").lower()

    return Article(
        title=_first_plain_text(title.get('title')),
        author=_first_plain_text(author.get('rich_text')),
        url=url.get('url') or "",
        category=classify_category(label, aliases),
    )
