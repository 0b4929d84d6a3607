"""Custom exceptions for the catalog scraper module."""

from typing import Optional, Union


class ScraperError(Exception):
    """Base exception for scraper-related errors."""
    pass


class FetchError(ScraperError):
    """Failed to retrieve or parse a page.

    Attributes:
        url: The URL that was requested.
        cause: Underlying exception or a description of the bad response.
    """

    def __init__(self, url: str, cause: Optional[Union[BaseException, str]] = None):
        self.url = url
        self.cause = cause
        message = f"Failed to fetch {url}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ParsingError(ScraperError):
    """Failed to extract data from a parsed page."""
    pass


class PaginationParseError(ParsingError):
    """Page-number text in a pagination link is missing or not numeric."""
    pass


class PriceParseError(ParsingError):
    """Price text could not be converted to a number."""
    pass


class PoolClosedError(ScraperError):
    """Work was submitted to a worker pool that has been shut down."""
    pass
