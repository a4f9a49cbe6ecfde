"""
Dominant Colors Configuration
Manages environment variables and defaults for the extraction service.
"""
import os


class Config:
    """Configuration class for the dominant colors service."""

    # Upload limits
    MAX_FILE_MB: int = int(os.environ.get("DOMINANT_COLORS_MAX_FILE_MB", "10"))

    # Clustering defaults
    DEFAULT_COUNT: int = int(os.environ.get("DOMINANT_COLORS_DEFAULT_COUNT", "3"))
    DEFAULT_MAX_ITERATIONS: int = int(os.environ.get("DOMINANT_COLORS_DEFAULT_MAX_ITERATIONS", "10"))
    DEFAULT_RESIZE_WIDTH: int = int(os.environ.get("DOMINANT_COLORS_DEFAULT_RESIZE_WIDTH", "100"))

    # Query bounds for the HTTP surface
    MAX_COUNT: int = 32
    MAX_ITERATIONS: int = 100
    MAX_RESIZE_WIDTH: int = 1024

    # Upper bound on pixels clustered per request, after resampling
    MAX_SAMPLES: int = int(os.environ.get("DOMINANT_COLORS_MAX_SAMPLES", "4000000"))

    # Logging
    LOG_LEVEL: str = os.environ.get("DOMINANT_COLORS_LOG_LEVEL", "INFO")

    # Timeouts (milliseconds)
    TIMEOUT_EXTRACTION: int = int(os.environ.get("DOMINANT_COLORS_TIMEOUT_EXTRACTION", "5000"))

    # Observability
    METRICS_ENABLED: bool = bool(int(os.environ.get("DOMINANT_COLORS_METRICS_ENABLED", "1")))

    # Swatch rendering
    SWATCH_CHIP_SIZE: int = 40

    # Supported image formats
    SUPPORTED_MIME_TYPES = ["image/jpeg", "image/png", "image/webp", "image/gif", "image/bmp"]
    SUPPORTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif", ".bmp"}


# Global config instance
config = Config()
