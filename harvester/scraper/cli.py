"""Command-line interface for the catalog harvester.

Usage:
    python -m harvester.scraper.cli --sections dresses tops --concurrency 10
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

import yaml
from pydantic import ValidationError

from harvester.utils import get_config, get_logger, set_package_log_level
from harvester.utils.config import ReportConfig, ScraperConfig

from .chart import render_top_products_chart
from .pipeline import PipelineRunner
from .report import print_report, top_n_by_price

logger = get_logger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Harvest product names and prices from paginated catalog sections",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Scrape the configured sections with default settings
  python -m harvester.scraper.cli

  # Scrape two sections with 5 concurrent page fetches and debug logging
  python -m harvester.scraper.cli --sections dresses jeans --concurrency 5 --log-level DEBUG

  # Rank the top 10 and write the chart elsewhere
  python -m harvester.scraper.cli --top-n 10 --chart output/top10.png
        """
    )

    parser.add_argument(
        '--sections',
        nargs='+',
        default=None,
        help='Section identifiers to scrape (default: from config)'
    )

    parser.add_argument(
        '--concurrency',
        type=int,
        default=None,
        help='Maximum concurrent page fetches (overrides config)'
    )

    parser.add_argument(
        '--top-n',
        type=int,
        default=None,
        help='Number of most expensive products to rank (overrides config)'
    )

    chart_group = parser.add_mutually_exclusive_group()
    chart_group.add_argument(
        '--chart',
        type=Path,
        default=None,
        help='Output path for the top-N chart (overrides config)'
    )
    chart_group.add_argument(
        '--no-chart',
        action='store_true',
        help='Skip rendering the top-N chart'
    )

    parser.add_argument(
        '--config',
        type=Path,
        default=None,
        help='Path to configuration file (default: auto-detect)'
    )

    parser.add_argument(
        '--log-level',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=None,
        help='Override log level'
    )

    return parser.parse_args(argv)


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 whenever the pipeline completes, 1 for configuration errors)
    """
    args = parse_args(argv)

    try:
        config = get_config(args.config, reload=args.config is not None)

        updates = {}
        if args.sections:
            updates['sections'] = args.sections
        if args.concurrency is not None:
            updates['concurrency'] = args.concurrency
        scraper_config = ScraperConfig.model_validate({**config.scraper.model_dump(), **updates})

        report_updates = {}
        if args.top_n is not None:
            report_updates['top_n'] = args.top_n
        if args.chart is not None:
            report_updates['chart_path'] = str(args.chart)
        if args.no_chart:
            report_updates['render_chart'] = False
        report_config = ReportConfig.model_validate({**config.report.model_dump(), **report_updates})
    except (FileNotFoundError, yaml.YAMLError, ValidationError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    set_package_log_level(args.log_level or config.log_level)

    logger.info("=" * 60)
    logger.info("Catalog Harvester")
    logger.info("=" * 60)
    logger.info(f"Sections: {', '.join(scraper_config.sections)}")
    logger.info(f"Concurrency: {scraper_config.concurrency}")
    logger.info(f"Top N: {report_config.top_n}")
    logger.info("=" * 60)

    runner = PipelineRunner(config=scraper_config, show_progress=True)
    result = await runner.run(scraper_config.sections)

    print()
    print_report(result, report_config.top_n)

    if report_config.render_chart:
        top_products = top_n_by_price(result.products, report_config.top_n)
        try:
            chart_path = render_top_products_chart(
                top_products,
                report_config.chart_path,
                width=report_config.chart_width,
                height=report_config.chart_height,
                title=f"Top {report_config.top_n} Most Expensive Products",
            )
            print(f"\nChart saved to {chart_path}")
        except OSError as e:
            logger.error(f"Could not save chart to {report_config.chart_path}: {e}")

    return 0


def run() -> None:
    """Console script entry point."""
    try:
        exit_code = asyncio.run(main())
    except KeyboardInterrupt:
        logger.warning("Scraping interrupted by user")
        exit_code = 1
    sys.exit(exit_code)


if __name__ == '__main__':
    run()
