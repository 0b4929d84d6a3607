"""Unit tests for concurrent section scraping."""

import asyncio

import pytest

from harvester.scraper.pool import WorkerPool
from harvester.scraper.section_scraper import SectionScraper

from tests.helpers import BASE_TEMPLATE, FakeFetcher, section_pages


DRESSES_URL = BASE_TEMPLATE.format(section="dresses")


def scrape(pages, config, section="dresses", **fetcher_kwargs):
    """Scrape one section with a fake fetcher and return (result, fetcher, pool)."""
    fetcher = FakeFetcher(pages, **fetcher_kwargs)
    pool = WorkerPool(config.concurrency)
    scraper = SectionScraper(fetcher=fetcher, pool=pool, config=config)
    result = asyncio.run(scraper.scrape_section(section))
    return result, fetcher, pool


class TestSectionScraper:
    """Test fan-out, fan-in and partial failure."""

    def test_three_page_section(self, three_page_section, scraper_config):
        """Test 2/0/3 products per page aggregate to 5 in page order."""
        result, fetcher, _ = scrape(three_page_section, scraper_config)

        assert result.section_id == "dresses"
        assert result.url == DRESSES_URL
        assert result.total_pages == 3
        assert result.product_count == 5
        assert [p.name for p in result.products] == [
            "Linen Dress", "Satin Slip Dress", "Knit Dress", "Shirt Dress", "Maxi Dress",
        ]
        assert result.elapsed_millis > 0
        assert result.diagnostics == ()

    def test_first_page_not_fetched_twice(self, three_page_section, scraper_config):
        """Test page 0 reuses the document fetched for pagination."""
        _, fetcher, _ = scrape(three_page_section, scraper_config)

        assert fetcher.calls.count(DRESSES_URL) == 1
        assert sorted(fetcher.calls) == sorted([DRESSES_URL, f"{DRESSES_URL}?page=2", f"{DRESSES_URL}?page=3"])

    def test_order_independent_of_latency(self, scraper_config):
        """Test randomized page latency never changes the assembled order."""
        page_products = [
            [(f"Item {page}-{i}", f"£{page}.{i}0") for i in range(page % 3 + 1)]
            for page in range(8)
        ]
        pages = section_pages("dresses", page_products)
        expected = [name for products in page_products for name, _ in products]

        first, _, _ = scrape(pages, scraper_config, seed=1)
        second, _, _ = scrape(pages, scraper_config, seed=2)

        assert [p.name for p in first.products] == expected
        assert first.products == second.products

    def test_slow_early_page(self, scraper_config):
        """Test an early page completing last still comes first."""
        pages = section_pages("dresses", [
            [("A", "£1")], [("B", "£2")], [("C", "£3")],
        ])
        latency = {f"{DRESSES_URL}?page=2": 0.05, f"{DRESSES_URL}?page=3": 0.001}

        result, _, _ = scrape(pages, scraper_config, latency=latency)

        assert [p.name for p in result.products] == ["A", "B", "C"]

    def test_failed_middle_page(self, three_page_section, scraper_config):
        """Test a failed page contributes nothing and is reported."""
        three_page_section[f"{DRESSES_URL}?page=2"] = ConnectionResetError("reset by peer")

        result, _, _ = scrape(three_page_section, scraper_config)

        assert [p.name for p in result.products] == [
            "Linen Dress", "Satin Slip Dress", "Knit Dress", "Shirt Dress", "Maxi Dress",
        ]
        assert result.pages_failed == 1
        assert result.diagnostics[0].page_index == 1
        assert result.diagnostics[0].url == f"{DRESSES_URL}?page=2"
        assert "reset by peer" in result.diagnostics[0].error

    def test_failed_page_drops_only_its_products(self, scraper_config):
        """Test pages 0 and 2 survive when page 1 fails."""
        pages = section_pages("dresses", [
            [("A", "£1")], [("B", "£2"), ("B2", "£2")], [("C", "£3")],
        ])
        del pages[f"{DRESSES_URL}?page=2"]

        result, _, _ = scrape(pages, scraper_config)

        assert [p.name for p in result.products] == ["A", "C"]
        assert result.total_pages == 3
        assert result.pages_failed == 1

    def test_first_page_failure(self, scraper_config):
        """Test a failed first page degrades to an empty result."""
        result, fetcher, _ = scrape({}, scraper_config)

        assert result.products == ()
        assert result.total_pages == 0
        assert result.elapsed_millis >= 0
        assert result.diagnostics[0].page_index == 0
        assert fetcher.calls == [DRESSES_URL]

    def test_single_page_section(self, scraper_config):
        """Test a section without pagination is fetched once."""
        pages = section_pages("dresses", [[("Only", "£9.99")]])

        result, fetcher, _ = scrape(pages, scraper_config)

        assert result.total_pages == 1
        assert [p.price for p in result.products] == pytest.approx([9.99])
        assert fetcher.calls == [DRESSES_URL]

    def test_concurrency_bounded_by_pool(self, scraper_config):
        """Test page fetches never exceed the pool capacity."""
        pages = section_pages("dresses", [[("X", "£1")] for _ in range(12)])

        result, fetcher, pool = scrape(pages, scraper_config, latency=0.01)

        assert result.product_count == 12
        assert fetcher.peak_in_flight <= scraper_config.concurrency
        assert pool.peak <= scraper_config.concurrency

    def test_duplicates_across_pages_preserved(self, scraper_config):
        pages = section_pages("dresses", [[("Tee", "£5")], [("Tee", "£5")]])

        result, _, _ = scrape(pages, scraper_config)

        assert len(result.products) == 2

    def test_scrape_url(self, three_page_section, scraper_config):
        """Test scraping by explicit URL keeps the given section id."""
        fetcher = FakeFetcher(three_page_section)
        scraper = SectionScraper(fetcher=fetcher, pool=WorkerPool(2), config=scraper_config)

        result = asyncio.run(scraper.scrape_url("custom", DRESSES_URL))

        assert result.section_id == "custom"
        assert result.product_count == 5
