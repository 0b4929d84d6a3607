"""Pipeline runner that scrapes catalog sections one after another.

Sections run strictly in sequence while the pages of each section run
concurrently on one worker pool that lives for the whole run, so peak
outbound concurrency never exceeds the pool capacity.
"""

import time
from typing import Iterable, Optional

from tqdm import tqdm

from harvester.utils import get_logger
from harvester.utils.config import ScraperConfig

from .fetcher import DocumentFetcher
from .models import PipelineResult, SectionResult
from .parsers import CatalogParser
from .pool import WorkerPool
from .section_scraper import Fetcher, SectionScraper

logger = get_logger(__name__)


class PipelineRunner:
    """Scrape a list of sections and collect every product."""

    def __init__(
        self,
        config: Optional[ScraperConfig] = None,
        fetcher: Optional[Fetcher] = None,
        pool: Optional[WorkerPool] = None,
        show_progress: bool = False,
    ):
        """Initialize the runner.

        Args:
            config: Scraper configuration (defaults apply if None)
            fetcher: Document fetcher; an aiohttp-backed one is created and
                closed by the runner if None
            pool: Worker pool; one sized by ``config.concurrency`` if None
            show_progress: Display a progress bar over sections
        """
        self.config = config or ScraperConfig()
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or DocumentFetcher.from_config(self.config)
        self.pool = pool or WorkerPool(self.config.concurrency)
        self.show_progress = show_progress

        self.scraper = SectionScraper(
            fetcher=self.fetcher,
            pool=self.pool,
            parser=CatalogParser(self.config.selectors),
            config=self.config,
        )

    async def run(self, section_ids: Optional[Iterable[str]] = None) -> PipelineResult:
        """Scrape sections in order and accumulate their results.

        The pool is shut down once every section has been processed.

        Args:
            section_ids: Sections to scrape (configured sections if None)

        Returns:
            PipelineResult with one SectionResult per section, in order
        """
        section_ids = list(section_ids) if section_ids is not None else list(self.config.sections)
        logger.info(f"Starting pipeline for {len(section_ids)} section(s), pool capacity {self.pool.capacity}")

        start = time.perf_counter()
        results: list[SectionResult] = []
        running_total = 0

        try:
            for section_id in tqdm(section_ids, desc="Scraping sections", disable=not self.show_progress):
                result = await self.scraper.scrape_section(section_id)
                results.append(result)
                running_total += result.product_count
                logger.info(f"Running total after '{section_id}': {running_total} products")
        finally:
            self.pool.shutdown()
            if self._owns_fetcher:
                await self.fetcher.close()

        elapsed_millis = max(0, int((time.perf_counter() - start) * 1000))
        logger.info(f"Pipeline complete: {running_total} products from {len(results)} sections in {elapsed_millis} ms")
        return PipelineResult(sections=results, elapsed_millis=elapsed_millis)
