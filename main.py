from typing import Optional

from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from dominant_colors import __version__
from dominant_colors.config import config
from dominant_colors.schemas import ColorExtractResponse, ErrorResponse, HealthResponse, MetricsResponse
from dominant_colors.services.colors.extract_api import handle_extract
from dominant_colors.utils.metrics import get_metrics

app = FastAPI(
    title="Dominant Colors",
    description="K-means dominant color extraction for images",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.get("/healthz", response_model=HealthResponse)
def health_check():
    """Service health check."""
    return HealthResponse(ok=True, version=f"v{__version__}", service="dominant-colors")


@app.get("/")
def root():
    """Root endpoint with API information."""
    return {
        "message": "Dominant Colors API",
        "version": __version__,
        "endpoints": {
            "health": "/healthz",
            "extract": "/colors/extract",
            "metrics": "/metrics"
        }
    }


@app.post(
    "/colors/extract",
    response_model=ColorExtractResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Undecodable, invalid or oversized image"},
        415: {"model": ErrorResponse, "description": "Unsupported media type"},
        504: {"model": ErrorResponse, "description": "Extraction timed out"},
    },
)
async def extract_colors(
    file: UploadFile = File(...),
    count: int = Query(config.DEFAULT_COUNT, ge=1, le=config.MAX_COUNT,
                       description="Number of color clusters"),
    max_iterations: int = Query(config.DEFAULT_MAX_ITERATIONS, ge=1, le=config.MAX_ITERATIONS,
                                description="Maximum K-means iterations"),
    resize_width: int = Query(config.DEFAULT_RESIZE_WIDTH, ge=1, le=config.MAX_RESIZE_WIDTH,
                              description="Width to resample the image to before clustering"),
    seed: Optional[int] = Query(None, ge=0, description="Seed for reproducible K-means++ initialization"),
    include_swatch: bool = Query(True, description="Include a palette swatch PNG in the response")
):
    """
    Extract dominant colors from an uploaded image.

    - **file**: JPG, PNG, WebP, GIF or BMP image
    - **count**: Number of clusters to look for; fewer may be returned when
      the image has fewer distinct colors
    - **max_iterations**: Upper bound on assign/update rounds
    - **resize_width**: Smaller widths are faster with little effect on
      dominant colors for natural images
    - **seed**: Fix the random seeding for repeatable output

    Returns clusters ordered by pixel count, most dominant first.
    """
    params = {
        'count': count,
        'max_iterations': max_iterations,
        'resize_width': resize_width,
        'seed': seed,
        'include_swatch': include_swatch
    }
    return await handle_extract(file=file, params=params)


@app.get("/metrics", response_model=MetricsResponse,
         responses={404: {"model": ErrorResponse, "description": "Metrics disabled"}})
def metrics_summary():
    """Get in-process extraction metrics."""
    if not config.METRICS_ENABLED:
        raise HTTPException(status_code=404, detail="Metrics are disabled")
    return get_metrics().get_summary()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
