"""
Placeholder graphic shown in place of images that fail to load.
Rendered once with Pillow and shipped to the page as a data URI (allowed by the CSP img-src).
"""
import base64
import io
import logging
from functools import lru_cache
from typing import Tuple

from PIL import Image, ImageDraw

logger = logging.getLogger(__name__)

DEFAULT_SIZE = (600, 400)
DEFAULT_BACKGROUND = (255, 0, 0)
DEFAULT_FOREGROUND = (255, 255, 255)


def render_placeholder(
    size: Tuple[int, int] = DEFAULT_SIZE,
    text: str = "Error",
    background: Tuple[int, int, int] = DEFAULT_BACKGROUND,
    foreground: Tuple[int, int, int] = DEFAULT_FOREGROUND,
) -> bytes:
    """
    Render a solid placeholder PNG with centered text.

    Args:
        size: Width and height in pixels
        text: Label drawn in the middle of the image
        background: RGB fill colour
        foreground: RGB text colour

    Returns:
        bytes: PNG image bytes
    """
    image = Image.new("RGB", size, background)
    draw = ImageDraw.Draw(image)

    left, top, right, bottom = draw.textbbox((0, 0), text)
    x = (size[0] - (right - left)) // 2
    y = (size[1] - (bottom - top)) // 2
    draw.text((x, y), text, fill=foreground)

    buffer = io.BytesIO()
    image.save(buffer, format="PNG", optimize=True)
    return buffer.getvalue()


@lru_cache(maxsize=4)
def placeholder_data_uri(text: str = "Error") -> str:
    """Placeholder PNG encoded as a `data:image/png;base64,...` URI."""
    png = render_placeholder(text=text)
    logger.debug(f"Rendered placeholder '{text}' ({len(png):,} bytes)")
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")

