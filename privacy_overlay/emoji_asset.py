"""
Overlay asset generation for the privacy overlay pipeline.

Draws the emoji raster shared by every overlay track: a filled circle
inscribed in a transparent square with a single centered glyph on top.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .config import Config, DEFAULT_GLYPH
from .errors import InvalidAssetSizeError, MissingGlyphError

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int, int]

# Plane 15 private use; no font ships a glyph for it, so it renders as .notdef
UNMAPPED_CODEPOINT = "\U000F0000"


def _load_font(font_path: Optional[Path], font_size: int):
    if font_path is not None:
        return ImageFont.truetype(str(font_path), font_size)
    return ImageFont.load_default(size=font_size)


def _render_char(font, char: str):
    left, top, right, bottom = font.getbbox(char)
    canvas = Image.new("L", (max(1, right - left), max(1, bottom - top)))
    ImageDraw.Draw(canvas).text((-left, -top), char, font=font, fill=255)
    return canvas.size, canvas.tobytes()


def has_glyph(font, glyph: str) -> bool:
    """True if every visible character of glyph renders as something other than .notdef."""
    missing = _render_char(font, UNMAPPED_CODEPOINT)
    return all(_render_char(font, char) != missing for char in glyph if not char.isspace())


def generate_emoji_bitmap(
    size: int,
    glyph: str = DEFAULT_GLYPH,
    font_path: Optional[Path] = None,
    glyph_scale: float = 0.7,
    backdrop_color: Color = (255, 255, 255, 255),
    glyph_color: Color = (0, 0, 0, 255),
) -> Image.Image:
    """
    Generate the overlay emoji raster.

    The glyph is centered on its rendered bounding box rather than the
    font's nominal box, so glyphs with uneven ascent/descent stay centered.

    Args:
        size: Width and height of the square raster in pixels
        glyph: Symbol drawn over the backdrop
        font_path: TrueType font to draw the glyph with, None for Pillow's default
        glyph_scale: Glyph font size relative to size
        backdrop_color: RGBA fill of the inscribed circle
        glyph_color: RGBA color of the glyph

    Returns:
        RGBA image of size x size pixels, transparent outside the circle

    Raises:
        InvalidAssetSizeError: size is not a positive integer
        MissingGlyphError: the font cannot draw glyph
    """
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise InvalidAssetSizeError(f"Emoji size must be a positive integer, got {size!r}")

    bitmap = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(bitmap)

    draw.ellipse((0, 0, size - 1, size - 1), fill=backdrop_color)

    font = _load_font(font_path, max(1, round(size * glyph_scale)))
    if not has_glyph(font, glyph):
        raise MissingGlyphError(f"Font {font.getname()[0]} has no glyph for {glyph!r}")

    left, top, right, bottom = draw.textbbox((0, 0), glyph, font=font)
    x = (size - (right - left)) / 2 - left
    y = (size - (bottom - top)) / 2 - top
    draw.text((x, y), glyph, font=font, fill=glyph_color)

    return bitmap


class EmojiAssetGenerator:
    """Generates the overlay asset from configuration."""

    def __init__(self, config: Config):
        self.config = config

    def generate(self, size: Optional[int] = None) -> Image.Image:
        """Generate the emoji raster, defaulting to the configured size."""
        size = self.config.emoji_size if size is None else size
        bitmap = generate_emoji_bitmap(
            size,
            glyph=self.config.glyph,
            font_path=self.config.font_path,
            glyph_scale=self.config.glyph_scale,
            backdrop_color=self.config.backdrop_color,
            glyph_color=self.config.glyph_color,
        )
        logger.debug(f"Generated emoji bitmap: {bitmap.width}x{bitmap.height}")
        return bitmap
