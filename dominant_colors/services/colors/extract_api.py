"""
Color Extraction API Orchestrator

Coordinates an HTTP extraction request: upload validation, decoding,
clustering on a worker thread under a timeout, swatch rendering, metrics
and structured logging.
"""

import asyncio
import time
from typing import Any, Dict, Optional

import numpy as np
from fastapi import HTTPException, UploadFile

from dominant_colors.config import config
from dominant_colors.schemas import ColorArtifacts, ColorDebug, ColorExtractResponse, ClusterEntry
from dominant_colors.services.colors.errors import ExtractionError, InvalidArgumentError
from dominant_colors.services.colors.extraction import extract_detailed
from dominant_colors.services.colors.swatches import render_swatch_strip
from dominant_colors.services.imaging import (
    decode_image, get_image_dimensions, read_upload, resized_dimensions
)
from dominant_colors.utils.ids import generate_request_id
from dominant_colors.utils.logging import get_logger
from dominant_colors.utils.metrics import get_metrics

logger = get_logger()


async def handle_extract(file: UploadFile, params: Dict[str, Any]) -> ColorExtractResponse:
    """
    Run dominant color extraction for an uploaded image.

    Args:
        file: Uploaded image file
        params: Extraction parameters: count, max_iterations, resize_width,
            seed, include_swatch

    Returns:
        ColorExtractResponse with ranked clusters

    Raises:
        HTTPException: 400 for undecodable images, invalid arguments or
            images that resample to more than config.MAX_SAMPLES pixels,
            415 for unsupported formats, 504 when extraction times out
    """
    request_id = generate_request_id("color")
    start_time = time.time()
    metrics = get_metrics()

    count = params.get('count', config.DEFAULT_COUNT)
    max_iterations = params.get('max_iterations', config.DEFAULT_MAX_ITERATIONS)
    resize_width = params.get('resize_width', config.DEFAULT_RESIZE_WIDTH)
    seed: Optional[int] = params.get('seed')
    include_swatch = params.get('include_swatch', True)

    logger.info("Starting color extraction", extra={"request_id": request_id})

    try:
        file_bytes = await read_upload(file)

        decode_start = time.time()
        image_rgb = decode_image(file_bytes)
        decode_time = time.time() - decode_start
        width, height = get_image_dimensions(image_rgb)

        logger.info("Image decoded",
                    extra={"request_id": request_id, "dims": f"{width}x{height}",
                           "ms_decode": decode_time * 1000})

        sample_width, sample_height = resized_dimensions(width, height, resize_width)
        if sample_width * sample_height > config.MAX_SAMPLES:
            raise HTTPException(
                status_code=400,
                detail=(f"Image resamples to {sample_width}x{sample_height} pixels at width "
                        f"{resize_width}; limit is {config.MAX_SAMPLES} pixels")
            )

        # Clustering is CPU bound; keep it off the event loop
        cluster_start = time.time()
        rng = np.random.default_rng(seed)
        async with asyncio.timeout(config.TIMEOUT_EXTRACTION / 1000):
            clusters = await asyncio.to_thread(
                extract_detailed,
                image_rgb,
                count=count,
                max_iterations=max_iterations,
                resize_width=resize_width,
                rng=rng,
            )
        cluster_time = time.time() - cluster_start

    except HTTPException as e:
        _record_failure(request_id, start_time, type(e).__name__)
        raise
    except (InvalidArgumentError, ExtractionError) as e:
        _record_failure(request_id, start_time, type(e).__name__)
        raise HTTPException(status_code=400, detail=str(e))
    except TimeoutError:
        _record_failure(request_id, start_time, "timeout")
        raise HTTPException(
            status_code=504,
            detail=f"Color extraction timed out after {config.TIMEOUT_EXTRACTION}ms"
        )

    sampled_pixels = sum(c.pixel_count for c in clusters)

    artifacts = None
    if include_swatch:
        try:
            swatch_b64 = render_swatch_strip(clusters, chip_size=config.SWATCH_CHIP_SIZE)
            artifacts = ColorArtifacts(swatch_png_b64=swatch_b64)
        except (ValueError, RuntimeError) as e:
            logger.warning(f"Swatch generation failed: {str(e)}",
                           extra={"request_id": request_id})

    response = ColorExtractResponse(
        request_id=request_id,
        width=width,
        height=height,
        count=count,
        sampled_pixels=sampled_pixels,
        clusters=[
            ClusterEntry(
                hex=c.hex,
                rgb=list(c.color),
                pixel_count=c.pixel_count,
                percentage=c.percentage,
            )
            for c in clusters
        ],
        colors=[c.hex for c in clusters],
        debug=ColorDebug(max_iterations=max_iterations, resize_width=resize_width, seed=seed),
        artifacts=artifacts,
    )

    total_time = time.time() - start_time
    logger.info("Color extraction completed successfully",
                extra={
                    "request_id": request_id,
                    "dims": f"{width}x{height}",
                    "count": count,
                    "returned": len(clusters),
                    "sampled_pixels": sampled_pixels,
                    "colors": response.colors,
                    "ms_kmeans": cluster_time * 1000,
                    "ms_total": total_time * 1000,
                    "result": "ok"
                })

    if config.METRICS_ENABLED:
        metrics.increment_counter("color_extract_requests_total")
        metrics.record_timing("color_extract", total_time * 1000)
        metrics.record_timing("kmeans", cluster_time * 1000)
        metrics.record_cluster_count(count, len(clusters))

    return response


def _record_failure(request_id: str, start_time: float, error_type: str) -> None:
    """Log and count a failed extraction."""
    error_time = time.time() - start_time
    logger.error("Color extraction failed",
                 extra={
                     "request_id": request_id,
                     "ms_total": error_time * 1000,
                     "result": "error",
                     "error_type": error_type
                 })
    if config.METRICS_ENABLED:
        get_metrics().increment_failure_count(error_type.lower())
