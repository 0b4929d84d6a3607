"""Bar chart rendering for the most expensive products.

Draws a simple vertical bar chart with Pillow and saves it as PNG.
"""

from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from harvester.utils import get_logger

from .models import ProductRecord

logger = get_logger(__name__)

BACKGROUND = (255, 255, 255)
AXIS_COLOR = (60, 60, 60)
TEXT_COLOR = (20, 20, 20)
BAR_COLORS = [
    (31, 119, 180),
    (255, 127, 14),
    (44, 160, 44),
    (214, 39, 40),
    (148, 103, 189),
    (140, 86, 75),
    (227, 119, 194),
    (127, 127, 127),
]

MARGIN_LEFT = 70
MARGIN_RIGHT = 30
MARGIN_TOP = 60
MARGIN_BOTTOM = 90
MAX_LABEL_CHARS = 18


def _truncate(label: str, limit: int = MAX_LABEL_CHARS) -> str:
    label = label or "(unnamed)"
    return label if len(label) <= limit else label[:limit - 3] + "..."


def _centered_text(draw: ImageDraw.ImageDraw, center_x: float, y: float, text: str, font) -> None:
    # The bitmap fallback font only covers latin-1
    text = text.encode("latin-1", "replace").decode("latin-1")
    width = draw.textlength(text, font=font)
    draw.text((center_x - width / 2, y), text, fill=TEXT_COLOR, font=font)


def render_top_products_chart(
    products: list[ProductRecord],
    path: Path | str,
    width: int = 800,
    height: int = 600,
    title: str = "Top 5 Most Expensive Products",
) -> Path:
    """Render products as a vertical bar chart of their prices.

    Args:
        products: Products to plot, in display order
        path: Output PNG path (parent directories are created)
        width: Image width in pixels
        height: Image height in pixels
        title: Chart title

    Returns:
        Path of the written image
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    image = Image.new("RGB", (width, height), BACKGROUND)
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default()

    _centered_text(draw, width / 2, 20, title, font)

    plot_left = MARGIN_LEFT
    plot_right = width - MARGIN_RIGHT
    plot_top = MARGIN_TOP
    plot_bottom = height - MARGIN_BOTTOM

    # Axes
    draw.line([(plot_left, plot_top), (plot_left, plot_bottom)], fill=AXIS_COLOR, width=2)
    draw.line([(plot_left, plot_bottom), (plot_right, plot_bottom)], fill=AXIS_COLOR, width=2)
    draw.text((10, plot_top - 20), "Price", fill=TEXT_COLOR, font=font)
    _centered_text(draw, (plot_left + plot_right) / 2, height - 30, "Product Name", font)

    if not products:
        _centered_text(draw, (plot_left + plot_right) / 2, (plot_top + plot_bottom) / 2, "No products", font)
        image.save(path, format="PNG")
        logger.info(f"Saved empty chart to {path}")
        return path

    max_price = max(product.price for product in products) or 1.0
    plot_height = plot_bottom - plot_top
    slot_width = (plot_right - plot_left) / len(products)
    bar_width = slot_width * 0.6

    # Gridline labels at 0, 50% and 100% of the highest price
    for fraction in (0.0, 0.5, 1.0):
        y = plot_bottom - fraction * plot_height
        draw.line([(plot_left - 5, y), (plot_left, y)], fill=AXIS_COLOR, width=1)
        label = f"{max_price * fraction:.0f}"
        label_width = draw.textlength(label, font=font)
        draw.text((plot_left - 8 - label_width, y - 6), label, fill=TEXT_COLOR, font=font)

    for index, product in enumerate(products):
        center_x = plot_left + slot_width * (index + 0.5)
        bar_top = plot_bottom - (product.price / max_price) * plot_height
        color = BAR_COLORS[index % len(BAR_COLORS)]

        draw.rectangle(
            [(center_x - bar_width / 2, bar_top), (center_x + bar_width / 2, plot_bottom - 1)],
            fill=color,
        )
        _centered_text(draw, center_x, bar_top - 16, f"{product.price:.2f}", font)
        _centered_text(draw, center_x, plot_bottom + 10, _truncate(product.name), font)

    image.save(path, format="PNG")
    logger.info(f"Saved chart of {len(products)} products to {path}")
    return path
