"""
Dominant color extraction service.

Public entry points for palette extraction: parameter validation, resizing
through the imaging collaborator, then K-means clustering and ranking.
"""

import time
from typing import List, Optional, Tuple

import numpy as np
from loguru import logger

from dominant_colors.services.imaging import ImageLike, decode_image, resize_to_width, to_rgb_array
from .errors import InvalidArgumentError
from .kmeans import build_cluster_results, run_kmeans, sample_pixels
from .models import ClusterResult

DEFAULT_COLOR_COUNT = 3
DEFAULT_MAX_ITERATIONS = 10
DEFAULT_RESIZE_WIDTH = 100


def validate_options(count: int, max_iterations: int, resize_width: int) -> None:
    """Reject non-positive clustering options."""
    if count <= 0:
        raise InvalidArgumentError("Color count must be greater than 0")
    if max_iterations <= 0:
        raise InvalidArgumentError("Max iterations must be greater than 0")
    if resize_width <= 0:
        raise InvalidArgumentError("Resize width must be greater than 0")


def validate_parameters(image_rgb: np.ndarray, count: int, max_iterations: int,
                        resize_width: int) -> None:
    """
    Check extraction parameters before any work is done.

    Raises:
        InvalidArgumentError: For non-positive count, max_iterations or
            resize_width, or an image with zero width or height
    """
    validate_options(count, max_iterations, resize_width)

    height, width = image_rgb.shape[:2]
    if width == 0 or height == 0:
        raise InvalidArgumentError("Image dimensions cannot be zero")


def extract_detailed(
    image: ImageLike,
    count: int = DEFAULT_COLOR_COUNT,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    resize_width: int = DEFAULT_RESIZE_WIDTH,
    rng: Optional[np.random.Generator] = None,
) -> List[ClusterResult]:
    """
    Extract dominant colors with per-cluster pixel counts and percentages.

    Args:
        image: (H, W, 3|4) uint8 RGB(A) array or PIL image
        count: Number of clusters to look for
        max_iterations: Upper bound on K-means iterations
        resize_width: Width the image is resampled to before clustering
        rng: Random source for K-means++ seeding; a fresh unseeded
            generator is used when omitted

    Returns:
        ClusterResults sorted by pixel_count descending. There may be fewer
        than ``count`` entries when clusters end up empty, e.g. when the
        image has fewer distinct colors than requested.

    Raises:
        InvalidArgumentError: If any parameter or the image is invalid
    """
    image_rgb = to_rgb_array(image)
    validate_parameters(image_rgb, count, max_iterations, resize_width)

    if rng is None:
        rng = np.random.default_rng()

    start_time = time.time()
    resized = resize_to_width(image_rgb, resize_width)
    samples = sample_pixels(resized)

    run = run_kmeans(samples, count, max_iterations, rng)
    results = build_cluster_results(run, samples.shape[0])

    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        f"Extracted {len(results)}/{count} colors from {samples.shape[0]} samples "
        f"in {run.iterations} iteration(s), {run.state.name.lower()}, {duration_ms:.1f}ms"
    )
    return results


def extract(
    image: ImageLike,
    count: int = DEFAULT_COLOR_COUNT,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    resize_width: int = DEFAULT_RESIZE_WIDTH,
    rng: Optional[np.random.Generator] = None,
) -> List[Tuple[int, int, int]]:
    """Extract dominant colors as (r, g, b) tuples, most dominant first."""
    clusters = extract_detailed(
        image,
        count=count,
        max_iterations=max_iterations,
        resize_width=resize_width,
        rng=rng,
    )
    return [cluster.color for cluster in clusters]


def extract_from_bytes(
    data: bytes,
    count: int = DEFAULT_COLOR_COUNT,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    resize_width: int = DEFAULT_RESIZE_WIDTH,
    rng: Optional[np.random.Generator] = None,
) -> List[ClusterResult]:
    """
    Decode an encoded image and extract its dominant colors.

    Raises:
        ExtractionError: If the buffer cannot be decoded
        InvalidArgumentError: If any parameter is invalid
    """
    validate_options(count, max_iterations, resize_width)
    image_rgb = decode_image(data)
    return extract_detailed(
        image_rgb,
        count=count,
        max_iterations=max_iterations,
        resize_width=resize_width,
        rng=rng,
    )
