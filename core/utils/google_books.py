# core/utils/google_books.py
"""Best-effort lookup against the public Google Books volumes API."""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from core.config import settings
from core.sa.models import Category

logger = logging.getLogger(__name__)

# Non-Fiction must be tried before Fiction, which it contains
_CATEGORY_MATCH_ORDER = [
    Category.NON_FICTION,
    Category.FICTION,
    Category.SCIENCE,
    Category.TECHNOLOGY,
    Category.HISTORY,
    Category.BIOGRAPHY,
    Category.OTHER,
]


def _normalize(label: str) -> str:
    return label.lower().replace("-", "").replace(" ", "")


def map_external_category(raw: Optional[str]) -> Category:
    """Map a free-form category string onto the fixed categories.

    The first category whose name occurs in ``raw`` wins; anything else is Other.
    """
    if not raw:
        return Category.OTHER
    normalized = _normalize(raw)
    for category in _CATEGORY_MATCH_ORDER:
        if _normalize(category.value) in normalized:
            return category
    return Category.OTHER


@dataclass
class ExternalBook:
    title: str
    author: str
    cover_url: Optional[str]
    category: Category

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "author": self.author,
            "cover_url": self.cover_url,
            "category": self.category.value,
        }


class GoogleBooksClient:
    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None,
                 timeout: Optional[float] = None):
        self.base_url = base_url or settings.google_books_url
        self.api_key = api_key if api_key is not None else settings.google_books_api_key
        self.timeout = timeout if timeout is not None else settings.google_books_timeout

    def lookup(self, query: str) -> Optional[ExternalBook]:
        """
        Return the first volume matching a free-text query.

        Args:
            query: Title, author, ISBN or any other search text

        Returns:
            ExternalBook for the first match, or None if nothing was found or
            the service could not be reached
        """
        if not query or not query.strip():
            return None

        params = {"q": query.strip()}
        if self.api_key:
            params["key"] = self.api_key

        try:
            response = requests.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.warning(f"Book lookup failed for '{query}': {e}")
            return None
        except ValueError as e:
            logger.warning(f"Book lookup returned invalid JSON for '{query}': {e}")
            return None

        items = data.get("items") or []
        if not items:
            logger.info(f"No books found for query: {query}")
            return None

        return self._parse_volume(items[0])

    def _parse_volume(self, volume: Dict[str, Any]) -> ExternalBook:
        volume_info = volume.get("volumeInfo", {})
        authors = volume_info.get("authors") or []
        categories = volume_info.get("categories") or []
        thumbnail = (volume_info.get("imageLinks") or {}).get("thumbnail")
        if thumbnail:
            thumbnail = thumbnail.replace("http:", "https:", 1)

        return ExternalBook(
            title=volume_info.get("title", ""),
            author=authors[0] if authors else "",
            cover_url=thumbnail or None,
            category=map_external_category(categories[0] if categories else ""),
        )
