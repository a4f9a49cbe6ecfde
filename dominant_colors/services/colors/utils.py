"""
Color utilities derived from extraction results.

Distance, perceived brightness, light/dark classification and hex
conversions. None of these take part in clustering itself except
``color_distance``, which is the metric the engine uses.
"""

import math
import re
from typing import Sequence, Tuple

RGB = Tuple[int, int, int]

HEX_DIGITS = re.compile(r"[0-9A-Fa-f]{6}(?:[0-9A-Fa-f]{2})?")

BLACK: RGB = (0, 0, 0)
WHITE: RGB = (255, 255, 255)

# Brightness above which a color counts as light
LIGHT_THRESHOLD = 128


def color_distance(color1: Sequence[int], color2: Sequence[int]) -> float:
    """Euclidean distance between two colors in RGB space."""
    dr = int(color1[0]) - int(color2[0])
    dg = int(color1[1]) - int(color2[1])
    db = int(color1[2]) - int(color2[2])
    return math.sqrt(dr * dr + dg * dg + db * db)


def calculate_brightness(color: Sequence[int]) -> float:
    """
    Perceptual brightness of a color.

    Uses sqrt(0.299 * R² + 0.587 * G² + 0.114 * B²), giving a value
    between 0 (black) and 255 (white).
    """
    r, g, b = (int(c) for c in color[:3])
    return math.sqrt(0.299 * r * r + 0.587 * g * g + 0.114 * b * b)


def is_light_color(color: Sequence[int]) -> bool:
    """True if the color is light enough to carry dark text."""
    return calculate_brightness(color) > LIGHT_THRESHOLD


def is_dark_color(color: Sequence[int]) -> bool:
    """True if the color is dark enough to carry light text."""
    return not is_light_color(color)


def get_contrasting_text_color(background: Sequence[int]) -> RGB:
    """Black for light backgrounds, white for dark ones."""
    return BLACK if is_light_color(background) else WHITE


def rgb_to_hex(rgb: Sequence[int], include_hash: bool = True) -> str:
    """Convert an RGB triple (tuple, list or uint8 array) to ``#RRGGBB``."""
    r, g, b = [int(x) for x in rgb[:3]]
    hex_value = f"{r:02X}{g:02X}{b:02X}"
    return f"#{hex_value}" if include_hash else hex_value


def hex_to_rgb(hex_color: str) -> RGB:
    """
    Convert a hex string to an RGB tuple.

    Accepts ``#RRGGBB``, ``RRGGBB``, ``#AARRGGBB`` and ``AARRGGBB``. In the
    eight digit form the leading byte is alpha and is discarded.

    Raises:
        ValueError: If the string is not a valid hex color
    """
    hex_clean = hex_color.replace("#", "")
    if not HEX_DIGITS.fullmatch(hex_clean):
        raise ValueError(f"Invalid hex color format: {hex_color}")
    if len(hex_clean) == 8:
        hex_clean = hex_clean[2:]

    return tuple(int(hex_clean[i:i + 2], 16) for i in (0, 2, 4))
