"""Text rendering utilities - fonts and standalone labels."""

import logging
import math

from PIL import Image, ImageDraw, ImageFont

from shared.constants import ATTRIBUTION_FONT_PATH, ATTRIBUTION_TEXT_COLOR

logger = logging.getLogger(__name__)

_SYSTEM_FONTS = (
    # Windows
    'arial.ttf',
    'segoeui.ttf',
    'tahoma.ttf',
    # Linux (абсолютные пути — truetype() не ищет по системным каталогам)
    '/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf',
    '/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf',
    '/usr/share/fonts/truetype/freefont/FreeSans.ttf',
    '/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf',
    # macOS
    '/System/Library/Fonts/Helvetica.ttc',
    '/Library/Fonts/Arial.ttf',
)


def load_label_font(font_size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """
    Подгружает шрифт для подписи.

    Порядок:
      1) ATTRIBUTION_FONT_PATH (если задан).
      2) Системные шрифты (Windows, Linux, macOS).
      3) Резерв: встроенный шрифт PIL нужного размера.
    """
    if ATTRIBUTION_FONT_PATH:
        try:
            return ImageFont.truetype(ATTRIBUTION_FONT_PATH, font_size)
        except OSError:
            logger.debug('Failed to load label font from %s', ATTRIBUTION_FONT_PATH)
    for name in _SYSTEM_FONTS:
        try:
            return ImageFont.truetype(name, font_size)
        except OSError:
            logger.debug('Шрифт %s не найден, пробуем следующий', name)
            continue
    logger.warning(
        'No scalable font found, falling back to the PIL default font (%d px)',
        font_size,
    )
    return ImageFont.load_default(size=font_size)


def render_label(
    text: str,
    font_size: int,
    *,
    fill: tuple[int, int, int] = ATTRIBUTION_TEXT_COLOR,
) -> Image.Image:
    """Render ``text`` onto a transparent RGBA image sized to its bounds."""
    font = load_label_font(font_size)
    probe = ImageDraw.Draw(Image.new('RGBA', (1, 1)))
    bbox = probe.textbbox((0, 0), text, font=font)
    width = max(1, math.ceil(bbox[2]))
    height = max(1, math.ceil(bbox[3]))
    label = Image.new('RGBA', (width, height), (0, 0, 0, 0))
    ImageDraw.Draw(label).text((0, 0), text, font=font, fill=(*fill, 255))
    return label
