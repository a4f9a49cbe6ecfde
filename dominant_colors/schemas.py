"""
Dominant Colors API Schemas
Pydantic models for color extraction request/response validation.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("dominant-colors", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")


class ClusterEntry(BaseModel):
    """Single extracted color with its share of the sampled pixels."""
    hex: str = Field(
        ...,
        pattern=r"^#[0-9A-Fa-f]{6}$",
        description="Hex color code in format #RRGGBB"
    )
    rgb: List[int] = Field(
        ...,
        min_length=3,
        max_length=3,
        description="Centroid color as [r, g, b], each 0-255"
    )
    pixel_count: int = Field(
        ...,
        ge=1,
        description="Number of sampled pixels assigned to this cluster"
    )
    percentage: float = Field(
        ...,
        ge=0.0,
        le=100.0,
        description="Share of sampled pixels in this cluster (0-100)"
    )


class ColorArtifacts(BaseModel):
    """Color extraction output artifacts."""
    swatch_png_b64: Optional[str] = Field(
        None,
        description="Base64-encoded PNG showing the palette as a strip of chips"
    )


class ColorDebug(BaseModel):
    """Parameters and run details for the extraction."""
    max_iterations: int = Field(..., description="Iteration bound requested")
    resize_width: int = Field(..., description="Width the image was resampled to")
    seed: Optional[int] = Field(None, description="Seed used for K-means++ initialization")


class ColorExtractResponse(BaseModel):
    """Main color extraction response."""
    request_id: str = Field(..., description="Request identifier for tracing")
    width: int = Field(..., description="Decoded image width in pixels")
    height: int = Field(..., description="Decoded image height in pixels")
    count: int = Field(..., description="Number of color clusters requested")
    sampled_pixels: int = Field(
        ...,
        description="Number of pixels clustered after resizing"
    )
    clusters: List[ClusterEntry] = Field(
        ...,
        description="Clusters ordered by dominance (most to least dominant)"
    )
    colors: List[str] = Field(
        ...,
        description="Hex colors only, in the same order as clusters"
    )
    debug: ColorDebug = Field(..., description="Debug information and parameters")
    artifacts: Optional[ColorArtifacts] = Field(
        None,
        description="Optional artifacts like swatch images"
    )


class MetricsResponse(BaseModel):
    """In-process metrics summary."""
    uptime_seconds: float
    counters: Dict[str, int]
    timing_stats: Dict[str, Dict[str, float]]
    cluster_count_stats: Dict[str, Any]
