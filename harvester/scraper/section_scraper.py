"""Concurrent scraper for one paginated catalog section.

The first page is fetched to discover the page count, then every page is
fetched and parsed as an independent unit on the shared worker pool. Page
results are assembled in page order whatever order they complete in.
"""

import time
from dataclasses import dataclass, field
from typing import Optional, Protocol

from bs4 import BeautifulSoup

from harvester.utils import get_logger
from harvester.utils.config import ScraperConfig

from .exceptions import FetchError, ParsingError
from .models import PageFailure, ProductRecord, SectionResult
from .parsers import CatalogParser
from .pool import WorkerPool
from .utils import page_url

logger = get_logger(__name__)


class Fetcher(Protocol):
    async def fetch(self, url: str) -> BeautifulSoup: ...


@dataclass
class PageOutcome:
    """Result of one page unit: its records, or the reason it has none."""

    page_index: int
    url: str
    products: list[ProductRecord] = field(default_factory=list)
    error: Optional[str] = None

    def to_failure(self) -> PageFailure:
        return PageFailure(page_index=self.page_index, url=self.url, error=self.error or "unknown error")


class SectionScraper:
    """Scrape every page of a section under a shared worker pool."""

    def __init__(
        self,
        fetcher: Fetcher,
        pool: WorkerPool,
        parser: Optional[CatalogParser] = None,
        config: Optional[ScraperConfig] = None,
    ):
        """Initialize the section scraper.

        Args:
            fetcher: Object with an async ``fetch(url)`` returning a parsed document
            pool: Worker pool shared across the pipeline run
            parser: Catalog parser (built from config selectors if None)
            config: Scraper configuration (defaults apply if None)
        """
        self.config = config or ScraperConfig()
        self.fetcher = fetcher
        self.pool = pool
        self.parser = parser or CatalogParser(self.config.selectors)

    async def scrape_section(self, section_id: str) -> SectionResult:
        """Scrape a section by id, using the configured URL template."""
        return await self.scrape_url(section_id, self.config.section_url(section_id))

    async def scrape_url(self, section_id: str, base_url: str) -> SectionResult:
        """Scrape every page of the section at base_url.

        Never raises for fetch or parse failures: failed pages contribute no
        records and one diagnostic entry each, and a failed first page
        yields an empty result.

        Args:
            section_id: Section identifier carried into the result
            base_url: URL of the section's first page

        Returns:
            SectionResult with products in page order
        """
        start = time.perf_counter()
        logger.info(f"Scraping section '{section_id}': {base_url}")

        try:
            first_page = await self.pool.submit(self.fetcher.fetch, base_url)
        except FetchError as e:
            logger.warning(f"Section '{section_id}' unavailable, first page failed: {e}")
            return SectionResult(
                section_id=section_id,
                url=base_url,
                products=[],
                elapsed_millis=self._elapsed_millis(start),
                total_pages=0,
                diagnostics=[PageFailure(page_index=0, url=base_url, error=str(e))],
            )

        total_pages = self.parser.resolve_page_count(first_page)
        logger.debug(f"Section '{section_id}' has {total_pages} page(s)")

        async def scrape_page(page_index: int) -> PageOutcome:
            url = page_url(base_url, page_index)
            try:
                document = first_page if page_index == 0 else await self.fetcher.fetch(url)
                products = self.parser.extract_products(document)
            except (FetchError, ParsingError) as e:
                logger.warning(f"Page {page_index} of section '{section_id}' skipped: {e}")
                return PageOutcome(page_index=page_index, url=url, error=str(e))

            logger.debug(f"Page {page_index} of section '{section_id}': {len(products)} products")
            return PageOutcome(page_index=page_index, url=url, products=products)

        outcomes = await self.pool.map(scrape_page, range(total_pages))

        products = []
        diagnostics = []
        for outcome in outcomes:
            if outcome.error is not None:
                diagnostics.append(outcome.to_failure())
            else:
                products.extend(outcome.products)

        result = SectionResult(
            section_id=section_id,
            url=base_url,
            products=products,
            elapsed_millis=self._elapsed_millis(start),
            total_pages=total_pages,
            diagnostics=diagnostics,
        )

        logger.info(
            f"Section '{section_id}': {result.product_count} products from "
            f"{total_pages - result.pages_failed}/{total_pages} pages in {result.elapsed_millis} ms"
        )
        return result

    @staticmethod
    def _elapsed_millis(start: float) -> int:
        return max(0, int((time.perf_counter() - start) * 1000))
