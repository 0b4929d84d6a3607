"""Helper utilities for scraping operations."""

import math
from typing import Optional
from urllib.parse import parse_qs, urlparse

from .exceptions import PaginationParseError, PriceParseError


def parse_price(price_str: str) -> float:
    """Parse price text strictly.

    Keeps digits and the first decimal point; every later decimal point and
    every other character (currency symbols, letters, whitespace, commas)
    is dropped. "1.2.3" becomes 1.2, "£1,299.00" becomes 1299.0.

    Args:
        price_str: Price text from a product card

    Returns:
        Price as float

    Raises:
        PriceParseError: If no number remains after cleaning
    """
    chars = []
    seen_dot = False
    for char in price_str:
        if char.isdigit() and char.isascii():
            chars.append(char)
        elif char == '.' and not seen_dot:
            chars.append(char)
            seen_dot = True

    cleaned = ''.join(chars)
    try:
        value = float(cleaned)
    except ValueError as e:
        raise PriceParseError(f"No numeric value found in price string: {price_str!r}") from e

    if not math.isfinite(value):
        raise PriceParseError(f"Price is not finite: {price_str!r}")
    return value


def normalize_price(price_str: Optional[str]) -> float:
    """Convert free-form price text to a number, 0.0 when it has none.

    Never raises.
    """
    if not price_str:
        return 0.0
    try:
        return parse_price(price_str)
    except PriceParseError:
        return 0.0


def parse_page_number(href: str) -> int:
    """Extract the ``page=<n>`` query value from a pagination link.

    Args:
        href: Link target, absolute or relative

    Returns:
        Page number

    Raises:
        PaginationParseError: If the parameter is missing or not a plain decimal number
    """
    values = parse_qs(urlparse(href).query).get('page')
    if not values:
        raise PaginationParseError(f"No page parameter in link: {href!r}")

    raw = values[-1].strip()
    # int() would also take signs, underscores and non-ASCII digits
    if not (raw.isascii() and raw.isdigit()):
        raise PaginationParseError(f"Page parameter is not a number: {raw!r}")
    return int(raw)


def page_url(base_url: str, page_index: int) -> str:
    """Build the URL of a page within a section.

    Page index 0 is the section's base URL. Site page numbers are 1-based,
    so index ``i`` (i >= 1) lives at ``<base>?page=<i + 1>``.
    """
    if page_index < 0:
        raise ValueError(f"Page index must be non-negative, got {page_index}")
    if page_index == 0:
        return base_url
    separator = '&' if '?' in base_url else '?'
    return f"{base_url}{separator}page={page_index + 1}"
