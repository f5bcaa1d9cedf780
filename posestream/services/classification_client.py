"""Client for the remote pose classification service."""

import logging
import os
from typing import Optional

import numpy as np
import requests

from posestream.errors import TransportError
from posestream.models.pose_data import ClassificationResult
from posestream.utils.image_io import JPEG_QUALITY, encode_jpeg

logger = logging.getLogger(__name__)

CLASSIFY_ENDPOINT = "classify-pose"


class RemoteClassificationClient:
    """
    Uploads a still as multipart field `image` and decodes the JSON reply:

        {"pose": str, "confidence": float,
         "alternatives": [{"pose": str, "confidence": float}] | null}

    Any transport, HTTP or decoding problem is raised as TransportError, so
    callers can tell it apart from a valid low-confidence classification.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None
    ):
        base_url = base_url or os.getenv("POSE_CLASSIFIER_URL", "http://localhost:8000/api/v1")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{CLASSIFY_ENDPOINT}"

    def classify_image(self, image: np.ndarray, quality: int = JPEG_QUALITY) -> ClassificationResult:
        try:
            jpeg = encode_jpeg(image, quality)
        except ValueError as e:
            raise TransportError(f"Could not encode image: {e}") from e
        return self.classify_jpeg(jpeg)

    def classify_jpeg(self, jpeg: bytes) -> ClassificationResult:
        files = {"image": ("image.jpg", jpeg, "image/jpeg")}
        try:
            response = self.session.post(self.endpoint, files=files, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.error(f"Classification request rejected: {e}")
            raise TransportError(f"Classification request failed: {e}", status_code=status_code) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Could not reach classification service at {self.endpoint}: {e}")
            raise TransportError(f"Network error: {e}") from e

        try:
            result = ClassificationResult.from_dict(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise TransportError(f"Invalid classification response: {e}", status_code=response.status_code) from e

        logger.info(f"Remote classification: {result.label} ({result.confidence:.2f})")
        return result
