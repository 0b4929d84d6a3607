"""HTML parsing utilities for catalog listing pages.

This module extracts product cards from a listing page and resolves how
many pages a section has. All selectors come from SelectorConfig so that
site markup stays configuration, not code.
"""

from typing import Optional

from bs4 import BeautifulSoup, Tag

from harvester.utils import get_logger
from harvester.utils.config import SelectorConfig

from .exceptions import PaginationParseError
from .models import ProductRecord
from .utils import normalize_price, parse_page_number

logger = get_logger(__name__)


class CatalogParser:
    """Parser for extracting products and pagination from listing pages."""

    def __init__(self, selectors: Optional[SelectorConfig] = None):
        """Initialize parser.

        Args:
            selectors: CSS selectors for the target site (defaults apply if None)
        """
        self.selectors = selectors or SelectorConfig()

    def extract_products(self, page: BeautifulSoup) -> list[ProductRecord]:
        """Extract every product card on a page, in document order.

        Each card yields exactly one record. The name comes from the first
        name selector that matches inside the card, tried in priority order,
        and the price from the first price-bearing element. A card without a
        name gets an empty name and a card without price text gets 0.0.

        Args:
            page: Parsed listing page

        Returns:
            List of ProductRecord objects
        """
        cards = page.select(self.selectors.product_card)
        if not cards:
            logger.debug(f"No product cards matched '{self.selectors.product_card}'")
            return []

        products = []
        for card in cards:
            name = self._first_name(card)
            price_elem = card.select_one(self.selectors.product_price)
            price_text = price_elem.get_text(" ", strip=True) if price_elem else ""
            products.append(ProductRecord(name=name, price=normalize_price(price_text)))

        return products

    def resolve_page_count(self, first_page: BeautifulSoup) -> int:
        """Determine how many pages a section has.

        The last page link inside the pagination region decides, by position
        rather than by value. Missing or malformed pagination means a single
        page.

        Args:
            first_page: Parsed first page of the section

        Returns:
            Total page count, at least 1
        """
        nav = first_page.select_one(self.selectors.pagination)
        if nav is None:
            logger.debug("No pagination region found, assuming a single page")
            return 1

        links = nav.select(self.selectors.page_link)
        if not links:
            logger.debug("Pagination region has no page links, assuming a single page")
            return 1

        href = links[-1].get('href')
        if not href:
            logger.debug("Last page link has no href, assuming a single page")
            return 1

        try:
            page_count = parse_page_number(href)
        except PaginationParseError as e:
            logger.debug(f"Could not read page count: {e}")
            return 1

        return page_count if page_count >= 1 else 1

    def _first_name(self, card: Tag) -> str:
        """Text of the first element matching the highest-priority name selector."""
        for selector in self.selectors.product_name:
            elem = card.select_one(selector)
            if elem is not None:
                return elem.get_text(" ", strip=True)
        return ""
