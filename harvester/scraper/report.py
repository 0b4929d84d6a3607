"""Statistics, ranking and console summary for scraped sections."""

from typing import Iterable

from .models import PipelineResult, ProductRecord, SectionResult, SectionStats


def section_stats(result: SectionResult) -> SectionStats:
    """Compute min/avg/max price for a section; 0.0 for an empty section."""
    prices = [product.price for product in result.products]
    if not prices:
        return SectionStats(
            section_id=result.section_id,
            product_count=0,
            elapsed_millis=result.elapsed_millis,
        )

    return SectionStats(
        section_id=result.section_id,
        product_count=len(prices),
        elapsed_millis=result.elapsed_millis,
        min_price=min(prices),
        avg_price=sum(prices) / len(prices),
        max_price=max(prices),
    )


def top_n_by_price(products: Iterable[ProductRecord], n: int) -> list[ProductRecord]:
    """Return the n most expensive products.

    The sort is stable: products with equal prices keep their encounter order.
    """
    if n <= 0:
        return []
    return sorted(products, key=lambda product: product.price, reverse=True)[:n]


def format_report(result: PipelineResult, top_n: int = 5) -> str:
    """Render the run summary as plain text."""
    lines = []

    for section in result.sections:
        stats = section_stats(section)
        lines.append(
            f"Category: {stats.section_id}, Products extracted: {stats.product_count}, "
            f"Time: {stats.elapsed_millis} ms"
        )
        if section.pages_failed:
            lines.append(f"  Pages failed: {section.pages_failed}")
        lines.append(f"Statistical analysis for category {stats.section_id}:")
        lines.append(f"  Average price: {stats.avg_price:.2f}")
        lines.append(f"  Minimum price: {stats.min_price:.2f}")
        lines.append(f"  Maximum price: {stats.max_price:.2f}")
        lines.append("")

    top_products = top_n_by_price(result.products, top_n)
    lines.append(f"Top {top_n} most expensive products:")
    if top_products:
        for rank, product in enumerate(top_products, 1):
            lines.append(f"  {rank}. {product.name or '(unnamed)'} - {product.price:.2f}")
    else:
        lines.append("  (no products)")

    lines.append("")
    lines.append(f"Total products: {result.total_products}")
    lines.append(f"Total execution time: {result.elapsed_millis} milliseconds")
    return "\n".join(lines)


def print_report(result: PipelineResult, top_n: int = 5) -> None:
    """Print the run summary to stdout."""
    print(format_report(result, top_n))
