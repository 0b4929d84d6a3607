"""Web scraping components for paginated retail catalogs.

This module provides the concurrent section scraping pipeline:
- DocumentFetcher: aiohttp fetcher returning BeautifulSoup documents
- CatalogParser: product card extraction and page-count resolution
- WorkerPool: semaphore-bounded scheduler shared by all page fetches
- SectionScraper: fan-out/fan-in scraping of one section
- PipelineRunner: sequential scraping of many sections
- Report and chart utilities: statistics, top-N ranking, PNG bar chart

Usage:
    from harvester.scraper import PipelineRunner, print_report

    result = await PipelineRunner().run(["dresses", "tops"])
    print_report(result, top_n=5)
"""

from .chart import render_top_products_chart
from .exceptions import FetchError, PaginationParseError, ParsingError, PoolClosedError, PriceParseError, ScraperError
from .fetcher import DocumentFetcher
from .models import PageFailure, PipelineResult, ProductRecord, SectionResult, SectionStats
from .parsers import CatalogParser
from .pipeline import PipelineRunner
from .pool import WorkerPool
from .report import format_report, print_report, section_stats, top_n_by_price
from .section_scraper import SectionScraper
from .utils import normalize_price, page_url, parse_page_number, parse_price

__all__ = [
    "ProductRecord",
    "PageFailure",
    "SectionResult",
    "SectionStats",
    "PipelineResult",
    "DocumentFetcher",
    "CatalogParser",
    "WorkerPool",
    "SectionScraper",
    "PipelineRunner",
    "section_stats",
    "top_n_by_price",
    "format_report",
    "print_report",
    "render_top_products_chart",
    "normalize_price",
    "parse_price",
    "parse_page_number",
    "page_url",
    "ScraperError",
    "FetchError",
    "ParsingError",
    "PaginationParseError",
    "PriceParseError",
    "PoolClosedError",
]
