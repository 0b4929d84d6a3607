"""Pytest fixtures and configuration for catalog harvester tests."""

import os
import tempfile

# Keep test log files out of the working tree
os.environ.setdefault("HARVESTER_LOG_DIR", tempfile.mkdtemp(prefix="harvester-logs-"))

import pytest

from harvester.scraper.models import ProductRecord
from harvester.utils.config import ScraperConfig, reset_config

from tests.helpers import BASE_TEMPLATE, section_pages


@pytest.fixture
def scraper_config() -> ScraperConfig:
    """Scraper configuration pointing at the fake shop."""
    return ScraperConfig(
        base_url_template=BASE_TEMPLATE,
        sections=["dresses", "tops"],
        concurrency=4,
        timeout=5,
        html_parser="html.parser",
    )


@pytest.fixture
def three_page_section() -> dict[str, str]:
    """A 'dresses' section with 2, 0 and 3 products on its pages."""
    return section_pages("dresses", [
        [("Linen Dress", "£24.99"), ("Satin Slip Dress", "£34.99")],
        [],
        [("Knit Dress", "£19.99"), ("Shirt Dress", "£29.99"), ("Maxi Dress", "£49.99")],
    ])


@pytest.fixture
def sample_products() -> list[ProductRecord]:
    """Products with prices 5, 20, 20, 3, 15."""
    return [
        ProductRecord(name="Socks", price=5.0),
        ProductRecord(name="Blazer A", price=20.0),
        ProductRecord(name="Blazer B", price=20.0),
        ProductRecord(name="Hair Clip", price=3.0),
        ProductRecord(name="Scarf", price=15.0),
    ]


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Reset the cached configuration between tests."""
    monkeypatch.delenv("HARVESTER_CONFIG", raising=False)
    reset_config()
    yield
    reset_config()
