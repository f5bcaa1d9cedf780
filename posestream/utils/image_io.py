"""JPEG encode/decode, delegated to OpenCV."""

import logging
from typing import Optional

import cv2
import numpy as np

logger = logging.getLogger(__name__)

JPEG_QUALITY = 85


def decode_image(data: bytes) -> Optional[np.ndarray]:
    """
    Decode encoded image bytes to a BGR array.

    Returns:
        HxWx3 uint8 array, or None if the bytes cannot be decoded
    """
    if not data:
        return None
    buffer = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if image is None:
        logger.warning(f"Could not decode image ({len(data)} bytes)")
    return image


def encode_jpeg(image: np.ndarray, quality: int = JPEG_QUALITY) -> bytes:
    """
    Encode a BGR array as JPEG.

    Raises:
        ValueError: if OpenCV cannot encode the image
    """
    try:
        ok, buffer = cv2.imencode(".jpg", image, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
    except cv2.error as e:
        raise ValueError(f"JPEG encoding failed: {e}") from e
    if not ok:
        raise ValueError("JPEG encoding failed")
    return buffer.tobytes()
