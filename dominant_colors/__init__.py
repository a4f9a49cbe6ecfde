"""
Dominant Colors

Extracts a small, dominance-ranked palette from an image by K-means
clustering its pixels in RGB space.

Usage:
    from dominant_colors import extract, extract_detailed

    colors = extract(image, count=5, max_iterations=15)
    clusters = extract_detailed(image, count=5, rng=np.random.default_rng(7))
"""

from dominant_colors.services.colors.errors import ExtractionError, InvalidArgumentError
from dominant_colors.services.colors.extraction import extract, extract_detailed, extract_from_bytes
from dominant_colors.services.colors.models import ClusterResult
from dominant_colors.services.colors.utils import (
    calculate_brightness,
    color_distance,
    get_contrasting_text_color,
    hex_to_rgb,
    is_dark_color,
    is_light_color,
    rgb_to_hex,
)

__version__ = "1.0.0"

__all__ = [
    "ClusterResult",
    "ExtractionError",
    "InvalidArgumentError",
    "calculate_brightness",
    "color_distance",
    "extract",
    "extract_detailed",
    "extract_from_bytes",
    "get_contrasting_text_color",
    "hex_to_rgb",
    "is_dark_color",
    "is_light_color",
    "rgb_to_hex",
]
