"""
Dominant Colors Imaging Utilities
Handles image decoding, normalization to RGB arrays, resampling and upload checks.
"""
import io
from typing import Tuple, Union

import cv2
import numpy as np
from fastapi import HTTPException, UploadFile
from PIL import Image, UnidentifiedImageError

from dominant_colors.config import config
from dominant_colors.services.colors.errors import ExtractionError, InvalidArgumentError

ImageLike = Union[np.ndarray, Image.Image]


def decode_image(data: bytes) -> np.ndarray:
    """
    Decode an encoded image buffer to an RGB array.

    Args:
        data: Encoded image bytes (PNG, JPEG, WebP, ...)

    Returns:
        (H, W, 3) uint8 RGB array; any alpha channel is dropped

    Raises:
        ExtractionError: If the bytes cannot be decoded
    """
    if not data:
        raise ExtractionError("Failed to decode image: empty buffer")

    try:
        pil_image = Image.open(io.BytesIO(data))
        pil_image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ExtractionError(f"Failed to decode image: {str(e)}") from e

    return to_rgb_array(pil_image)


def to_rgb_array(image: ImageLike) -> np.ndarray:
    """
    Normalize a PIL image or numpy array to an (H, W, 3) uint8 RGB array.

    Raises:
        InvalidArgumentError: If an array is not uint8 or does not have an
            RGB(A) shape
    """
    if isinstance(image, Image.Image):
        if image.mode != 'RGB':
            image = image.convert('RGB')
        return np.asarray(image, dtype=np.uint8)

    array = np.asarray(image)
    if array.dtype != np.uint8:
        raise InvalidArgumentError(f"Expected a uint8 image, got dtype {array.dtype}")
    if array.ndim != 3 or array.shape[2] not in (3, 4):
        raise InvalidArgumentError(f"Expected an (H, W, 3) RGB image, got shape {array.shape}")

    return np.ascontiguousarray(array[:, :, :3])


def resize_to_width(img_rgb: np.ndarray, width: int) -> np.ndarray:
    """
    Resample an image to the given width, preserving aspect ratio.

    Uses pixel-area averaging (INTER_AREA). Images already at the target
    width are returned unchanged.

    Args:
        img_rgb: Input image in RGB format
        width: Target width in pixels

    Returns:
        Resized image in RGB format
    """
    height, current_width = img_rgb.shape[:2]
    if current_width == width:
        return img_rgb

    _, new_height = resized_dimensions(current_width, height, width)
    return cv2.resize(img_rgb, (width, new_height), interpolation=cv2.INTER_AREA)


def resized_dimensions(width: int, height: int, target_width: int) -> Tuple[int, int]:
    """
    Dimensions resize_to_width would produce, without resampling.

    Returns:
        Tuple of (width, height)
    """
    if width == target_width:
        return width, height
    return target_width, max(1, int(round(height * target_width / width)))


def get_image_dimensions(img: np.ndarray) -> Tuple[int, int]:
    """
    Get image width and height.

    Returns:
        Tuple of (width, height)
    """
    height, width = img.shape[:2]
    return width, height


def validate_file_upload(file: UploadFile) -> None:
    """
    Validate uploaded file metadata before reading it.

    Raises:
        HTTPException: 400 for oversized files, 415 for unsupported formats
    """
    if file.size and file.size > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    if file.content_type not in config.SUPPORTED_MIME_TYPES:
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported media type. Supported: {', '.join(config.SUPPORTED_MIME_TYPES)}"
        )

    if file.filename and '.' in file.filename:
        ext = "." + file.filename.lower().rsplit('.', 1)[-1]
        if ext not in config.SUPPORTED_EXTENSIONS:
            raise HTTPException(
                status_code=415,
                detail=f"Unsupported file extension. Supported: {', '.join(sorted(config.SUPPORTED_EXTENSIONS))}"
            )


async def read_upload(file: UploadFile) -> bytes:
    """
    Read an uploaded image after validating its metadata and size.

    Raises:
        HTTPException: 400 for unreadable or oversized files, 415 for unsupported formats
    """
    validate_file_upload(file)

    try:
        file_bytes = await file.read()
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Failed to read file: {str(e)}")

    if len(file_bytes) > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    return file_bytes
