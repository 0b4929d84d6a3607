"""HTTP document fetcher for catalog pages.

This module retrieves one URL with aiohttp and parses the body into a
BeautifulSoup tree. It contains no catalog-specific logic.
"""

import asyncio
from typing import Optional

import aiohttp
from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from harvester.utils import get_logger

from .exceptions import FetchError

logger = get_logger(__name__)


class DocumentFetcher:
    """Fetch and parse HTML documents over a shared aiohttp session."""

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: Optional[str] = None,
        html_parser: str = "lxml",
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize the fetcher.

        Args:
            timeout: Total per-request timeout in seconds
            user_agent: User-Agent header value
            html_parser: BeautifulSoup tree builder
            session: Existing session to reuse (not closed by this fetcher)
        """
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.html_parser = html_parser
        self.headers = {'User-Agent': user_agent} if user_agent else {}

        self._session = session
        self._owns_session = session is None

    @classmethod
    def from_config(cls, scraper_config) -> 'DocumentFetcher':
        """Create a fetcher from a ScraperConfig."""
        return cls(
            timeout=scraper_config.timeout,
            user_agent=scraper_config.user_agent,
            html_parser=scraper_config.html_parser,
        )

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers=self.headers, timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def fetch(self, url: str) -> BeautifulSoup:
        """Retrieve a URL and parse it.

        Args:
            url: Page URL

        Returns:
            Parsed document

        Raises:
            FetchError: On network errors, timeouts, non-2xx status or a body
                the parser rejects
        """
        session = self._get_session()
        logger.debug(f"GET {url}")

        try:
            async with session.get(url) as response:
                if not 200 <= response.status < 300:
                    raise FetchError(url, f"HTTP {response.status}")
                # BeautifulSoup decodes, falling back to detection without a charset
                body = await response.read()
                charset = response.charset
        except FetchError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FetchError(url, e) from e

        try:
            return BeautifulSoup(body, self.html_parser, from_encoding=charset)
        except ParserRejectedMarkup as e:
            raise FetchError(url, e) from e

    async def close(self) -> None:
        """Close the underlying session if this fetcher created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> 'DocumentFetcher':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
