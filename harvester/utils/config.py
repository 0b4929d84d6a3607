"""Configuration management system using Pydantic v2 and YAML.

This module provides type-safe configuration loading with validation
for the catalog harvester. Site-specific CSS selectors live here as data
so that markup changes never require code changes.
"""

import os
from pathlib import Path
from typing import Optional

import soupsieve
import yaml
from pydantic import BaseModel, Field, field_validator


DEFAULT_SECTIONS = ["dresses", "tops", "shoes", "jeans"]


def _check_selector(selector: str) -> str:
    """Strip a CSS selector and make sure soupsieve can compile it."""
    selector = selector.strip()
    if not selector:
        raise ValueError("Selector must not be empty")
    try:
        soupsieve.compile(selector)
    except soupsieve.SelectorSyntaxError as e:
        raise ValueError(f"Invalid CSS selector {selector!r}: {e}") from e
    return selector


class SelectorConfig(BaseModel):
    """CSS selectors describing the catalog markup."""

    pagination: str = Field(
        default="nav[aria-label=Pagination], ul.pagination",
        description="Pagination navigation region"
    )
    page_link: str = Field(
        default='a[aria-label^="Go to page"], a.page-link',
        description="Page links inside the pagination region"
    )
    product_card: str = Field(
        default="div#products-listing-section li article",
        description="One element per listed product"
    )
    product_name: list[str] = Field(
        default_factory=lambda: ["h2", "h3", "h4"],
        description="Name selectors in priority order, the first that matches wins"
    )
    product_price: str = Field(default="p, span.price", description="Price-bearing elements inside a card")

    @field_validator('pagination', 'page_link', 'product_card', 'product_price')
    @classmethod
    def validate_selector(cls, v: str) -> str:
        """Reject empty or malformed selectors."""
        return _check_selector(v)

    @field_validator('product_name')
    @classmethod
    def validate_name_selectors(cls, v: list[str]) -> list[str]:
        """Require at least one name selector, each well formed."""
        if not v:
            raise ValueError("At least one name selector is required")
        return [_check_selector(selector) for selector in v]


class ScraperConfig(BaseModel):
    """Configuration for the paginated section scraper."""

    base_url_template: str = Field(
        default="https://www2.hm.com/en_gb/ladies/shop-by-product/{section}.html",
        description="Section URL template, {section} is replaced by the section id"
    )
    sections: list[str] = Field(default_factory=lambda: list(DEFAULT_SECTIONS), description="Sections to scrape")
    concurrency: int = Field(default=10, ge=1, le=100, description="Worker pool capacity")
    timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")
    user_agent: str = Field(
        default="Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Safari/537.36",
        description="User-Agent header sent with every request"
    )
    html_parser: str = Field(default="lxml", description="BeautifulSoup tree builder")
    selectors: SelectorConfig = Field(default_factory=SelectorConfig)

    @field_validator('base_url_template')
    @classmethod
    def validate_base_url_template(cls, v: str) -> str:
        """Ensure the template is an http(s) URL with a section placeholder."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError("base_url_template must start with http:// or https://")
        if '{section}' not in v:
            raise ValueError("base_url_template must contain a {section} placeholder")
        return v

    @field_validator('sections')
    @classmethod
    def validate_sections(cls, v: list[str]) -> list[str]:
        """Ensure at least one non-blank section is configured."""
        cleaned = [s.strip() for s in v if s and s.strip()]
        if not cleaned:
            raise ValueError("At least one section is required")
        return cleaned

    @field_validator('html_parser')
    @classmethod
    def validate_html_parser(cls, v: str) -> str:
        """Validate the BeautifulSoup tree builder name."""
        valid_parsers = ["lxml", "html.parser"]
        if v not in valid_parsers:
            raise ValueError(f"Invalid HTML parser. Choose from: {valid_parsers}")
        return v

    def section_url(self, section_id: str) -> str:
        """Build the base URL of a section."""
        return self.base_url_template.format(section=section_id)


class ReportConfig(BaseModel):
    """Configuration for the console report and the top-N chart."""

    top_n: int = Field(default=5, ge=1, description="Number of most expensive products to rank")
    render_chart: bool = Field(default=True, description="Render the top-N chart after scraping")
    chart_path: str = Field(default="top_5_expensive_products_chart.png", description="Chart output file")
    chart_width: int = Field(default=800, ge=200, description="Chart width in pixels")
    chart_height: int = Field(default=600, ge=150, description="Chart height in pixels")


class AppConfig(BaseModel):
    """Root configuration model containing all sub-configurations."""

    scraper: ScraperConfig = Field(default_factory=ScraperConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level. Choose from: {valid_levels}")
        return v_upper

    @classmethod
    def from_yaml(cls, path: Path | str) -> 'AppConfig':
        """Load and validate a configuration file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            yaml.YAMLError: If the file is not valid YAML
            pydantic.ValidationError: If a value is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            config_dict = yaml.safe_load(f) or {}

        return cls.model_validate(config_dict)


# Singleton pattern for configuration
_config: Optional[AppConfig] = None


def load_config(config_path: Optional[Path | str] = None) -> AppConfig:
    """Load and validate configuration.

    Lookup order: explicit path, HARVESTER_CONFIG environment variable,
    config/config.yaml under the working directory, built-in defaults.

    Args:
        config_path: Path to configuration file

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If an explicitly requested config file doesn't exist
        ValueError: If configuration is invalid
    """
    if config_path is None:
        env_config_path = os.environ.get('HARVESTER_CONFIG')
        if env_config_path:
            return AppConfig.from_yaml(env_config_path)

        default_path = Path.cwd() / "config" / "config.yaml"
        if default_path.exists():
            return AppConfig.from_yaml(default_path)

        return AppConfig()

    return AppConfig.from_yaml(config_path)


def get_config(config_path: Optional[Path | str] = None, reload: bool = False) -> AppConfig:
    """Get configuration instance (singleton pattern).

    Args:
        config_path: Path to configuration file (only used on first call or if reload=True)
        reload: Force reload of configuration

    Returns:
        Cached or newly loaded AppConfig instance
    """
    global _config

    if _config is None or reload:
        _config = load_config(config_path)

    return _config


def reset_config() -> None:
    """Reset cached configuration (useful for testing)."""
    global _config
    _config = None
