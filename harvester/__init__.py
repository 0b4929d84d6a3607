"""Catalog Harvester.

Concurrent scraper that collects product names and prices from the
paginated category sections of a retail catalog and ranks them by price.
"""

__version__ = "0.1.0"
