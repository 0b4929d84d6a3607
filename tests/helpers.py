"""Shared markup builders and an in-memory fetcher for tests."""

import asyncio
import random
from typing import Optional, Union

from bs4 import BeautifulSoup

from harvester.scraper.exceptions import FetchError


BASE_TEMPLATE = "https://shop.example.com/ladies/{section}.html"


def card_html(name: str, price: str) -> str:
    """Markup of one product card."""
    return f"""
        <li>
            <article>
                <h2>{name}</h2>
                <p>{price}</p>
            </article>
        </li>
    """


def listing_html(products: list[tuple[str, str]], last_page: Optional[int] = None) -> str:
    """Markup of a listing page with optional pagination up to last_page."""
    cards = "".join(card_html(name, price) for name, price in products)
    pagination = ""
    if last_page is not None:
        links = "".join(
            f'<a aria-label="Go to page {n}" href="?page={n}">{n}</a>'
            for n in range(1, last_page + 1)
        )
        pagination = f'<nav aria-label="Pagination">{links}</nav>'

    return f"""
    <html>
    <body>
        <div id="products-listing-section">
            <ul>{cards}</ul>
        </div>
        {pagination}
    </body>
    </html>
    """


class FakeFetcher:
    """In-memory fetcher with per-URL latency and failures.

    ``pages`` maps URL to HTML, or to an exception that the fetch raises as
    FetchError. Unknown URLs fail like a 404.
    """

    def __init__(
        self,
        pages: dict[str, Union[str, Exception]],
        latency: Union[float, dict[str, float]] = 0.005,
        seed: Optional[int] = None,
        max_latency: float = 0.03,
    ):
        self.pages = pages
        self.latency = latency
        self.random = random.Random(seed) if seed is not None else None
        self.max_latency = max_latency
        self.calls: list[str] = []
        self.in_flight = 0
        self.peak_in_flight = 0
        self.in_flight_urls: set[str] = set()
        self.overlaps: list[set[str]] = []

    def _delay_for(self, url: str) -> float:
        if self.random is not None:
            return self.random.uniform(0.001, self.max_latency)
        if isinstance(self.latency, dict):
            return self.latency.get(url, 0.005)
        return self.latency

    async def fetch(self, url: str) -> BeautifulSoup:
        self.calls.append(url)
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        self.in_flight_urls.add(url)
        self.overlaps.append(set(self.in_flight_urls))
        try:
            await asyncio.sleep(self._delay_for(url))
            page = self.pages.get(url)
            if page is None:
                raise FetchError(url, "HTTP 404")
            if isinstance(page, Exception):
                raise FetchError(url, page)
            return BeautifulSoup(page, "html.parser")
        finally:
            self.in_flight -= 1
            self.in_flight_urls.discard(url)


def section_pages(section: str, page_products: list[list[tuple[str, str]]]) -> dict[str, str]:
    """Build the URL to HTML map of a section whose pages hold page_products."""
    base = BASE_TEMPLATE.format(section=section)
    total = len(page_products)
    last_page = total if total > 1 else None

    pages = {base: listing_html(page_products[0], last_page)}
    for index in range(1, total):
        pages[f"{base}?page={index + 1}"] = listing_html(page_products[index], last_page)
    return pages


