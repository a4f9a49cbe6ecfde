"""
Swatch Rendering Module

Renders extracted palettes as small PNG strips for quick visual QA.
"""

import base64
from typing import List

import cv2
import numpy as np
from loguru import logger

from .models import ClusterResult
from .utils import get_contrasting_text_color


def _chip_widths(clusters: List[ClusterResult], chip_size: int, proportional: bool) -> List[int]:
    """Width of each chip; proportional strips share k * chip_size by percentage."""
    if not proportional:
        return [chip_size] * len(clusters)

    total_width = chip_size * len(clusters)
    total_pct = sum(c.percentage for c in clusters) or 1.0
    widths = [max(1, int(round(total_width * c.percentage / total_pct))) for c in clusters]
    # Absorb rounding drift in the dominant chip
    widths[0] += total_width - sum(widths)
    return widths


def render_swatch_strip(clusters: List[ClusterResult],
                        chip_size: int = 40,
                        proportional: bool = False,
                        show_percentages: bool = False,
                        font_scale: float = 0.35) -> str:
    """
    Render a horizontal strip of color chips in dominance order.

    Args:
        clusters: Extraction results, most dominant first
        chip_size: Chip height, and chip width for equal-width strips
        proportional: Size chip widths by cluster percentage
        show_percentages: Overlay each chip's percentage in a contrasting color
        font_scale: Font scale for percentage labels

    Returns:
        Base64-encoded PNG image string
    """
    validate_swatch_params(clusters, chip_size)

    widths = _chip_widths(clusters, chip_size, proportional)
    img_height = chip_size
    img_width = sum(widths)
    logger.debug(f"Rendering swatch strip with {len(clusters)} colors, {img_width}x{img_height}")

    # OpenCV works in BGR
    img = np.zeros((img_height, img_width, 3), dtype=np.uint8)

    x_start = 0
    for cluster, width in zip(clusters, widths):
        r, g, b = cluster.color
        x_end = x_start + width
        img[:, x_start:x_end, :] = (b, g, r)

        if show_percentages:
            label = f"{cluster.percentage:.0f}%"
            tr, tg, tb = get_contrasting_text_color(cluster.color)
            text_size = cv2.getTextSize(label, cv2.FONT_HERSHEY_SIMPLEX, font_scale, 1)[0]
            text_x = x_start + max(0, (width - text_size[0]) // 2)
            text_y = (img_height + text_size[1]) // 2
            cv2.putText(img, label, (text_x, text_y),
                        cv2.FONT_HERSHEY_SIMPLEX, font_scale, (tb, tg, tr), 1)

        x_start = x_end

    success, buffer = cv2.imencode('.png', img)
    if not success:
        raise RuntimeError("Failed to encode swatch strip as PNG")

    b64_string = base64.b64encode(buffer.tobytes()).decode('ascii')
    logger.debug(f"Encoded swatch strip: {img_width}x{img_height} -> {len(b64_string)} chars")
    return b64_string


def validate_swatch_params(clusters: List[ClusterResult], chip_size: int) -> None:
    """Validate swatch rendering parameters."""
    if not clusters:
        raise ValueError("clusters cannot be empty")

    if chip_size <= 0:
        raise ValueError("chip_size must be positive")
