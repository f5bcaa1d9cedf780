"""
Privacy-preserving rendering of still images.

The body region (derived from shoulders and hips) keeps the original pixels,
everything else is gaussian-blurred, and the skeleton is drawn on top.
"""

import logging
import math
from typing import Optional, Sequence, Tuple

import cv2
import numpy as np

from posestream.errors import CompositingError
from posestream.models.config import Configuration
from posestream.models.keypoint_schema import TORSO_JOINTS
from posestream.models.pose_data import BodyRegion, FaceRectangle, PoseKeypointMap
from posestream.utils.image_io import decode_image

from .overlay_drawing import COMPOSITE_STYLE, SkeletonStyle, draw_pose

logger = logging.getLogger(__name__)

BODY_REGION_EXPANSION = 1.5

MASK_BLURRED = 255  # white: take the blurred pixel
MASK_ORIGINAL = 0  # black: keep the original pixel


class RegionMaskCompositor:
    """
    Stateless compositor. Every method is a pure function of its inputs.

    Steps, in order:
    1. body_region  - torso bounding box in pixels, expanded 1.5x about its center
    2. blur         - gaussian blur of the whole image
    3. build_mask   - white everywhere, black in the body region, white again
                      over faces when preserve_faces is set
    4. blend        - per-pixel select blurred (white) or original (black)
    5. draw_overlay - skeleton connections and joints
    6. resize       - uniform downscale to max_output_dimension

    Note that with preserve_faces enabled the face rectangles are re-filled
    white, so faces inside the body region end up blurred.
    """

    def __init__(self, style: SkeletonStyle = COMPOSITE_STYLE):
        self.style = style

    # Step 1

    @staticmethod
    def body_region(
        pose: PoseKeypointMap,
        image_width: float,
        image_height: float,
        threshold: float
    ) -> BodyRegion:
        """
        Bounding box of the confident torso joints in pixel space.

        With no qualifying joint the bounds stay at +/-infinity and the
        returned region reports is_empty.
        """
        min_x, max_x = math.inf, -math.inf
        min_y, max_y = math.inf, -math.inf

        for joint in TORSO_JOINTS:
            point = pose.get(joint)
            if point is None or not point.is_confident(threshold):
                continue
            x = point.x * image_width
            y = (1.0 - point.y) * image_height
            min_x, max_x = min(min_x, x), max(max_x, x)
            min_y, max_y = min(min_y, y), max(max_y, y)

        width = (max_x - min_x) * BODY_REGION_EXPANSION
        height = (max_y - min_y) * BODY_REGION_EXPANSION
        center_x = (min_x + max_x) / 2
        center_y = (min_y + max_y) / 2

        return BodyRegion(
            x=center_x - width / 2,
            y=center_y - height / 2,
            width=width,
            height=height,
        )

    # Step 2

    @staticmethod
    def blur(image: np.ndarray, radius: float) -> np.ndarray:
        """Gaussian-blur the whole image; returns the original on failure."""
        if radius <= 0:
            return image.copy()
        try:
            return cv2.GaussianBlur(image, (0, 0), sigmaX=float(radius), sigmaY=float(radius))
        except cv2.error as e:
            logger.warning(f"Blur failed, keeping original image: {e}")
            return image

    # Step 3

    @staticmethod
    def build_mask(
        shape: Tuple[int, int],
        region: BodyRegion,
        face_rects: Sequence[FaceRectangle],
        preserve_faces: bool
    ) -> np.ndarray:
        """
        Single-channel selector mask, same height/width as the image.

        Args:
            shape: (height, width) of the image
            region: Body region in pixels
            face_rects: Normalized face rectangles
            preserve_faces: Re-fill face rectangles white when set
        """
        height, width = shape
        mask = np.full((height, width), MASK_BLURRED, dtype=np.uint8)

        if not region.is_empty:
            _fill_rect(mask, (region.x, region.y, region.width, region.height), MASK_ORIGINAL)

        if preserve_faces:
            for face in face_rects:
                _fill_rect(mask, face.to_pixel_rect(width, height), MASK_BLURRED)

        return mask

    # Step 4

    @staticmethod
    def blend(blurred: np.ndarray, original: np.ndarray, mask: np.ndarray) -> np.ndarray:
        """Select blurred pixels where the mask is white; returns the original on failure."""
        try:
            if blurred.shape != original.shape or mask.shape != original.shape[:2]:
                raise CompositingError(
                    f"Shape mismatch: blurred {blurred.shape}, original {original.shape}, mask {mask.shape}"
                )
            selector = mask > 127
            if original.ndim == 3:
                selector = selector[:, :, np.newaxis]
            return np.where(selector, blurred, original).astype(original.dtype)
        except CompositingError as e:
            logger.warning(f"Blend failed, keeping original image: {e}")
            return original

    # Step 5

    def draw_overlay(self, image: np.ndarray, pose: PoseKeypointMap, threshold: float) -> np.ndarray:
        return draw_pose(image, pose, self.style, threshold)

    # Step 6

    @staticmethod
    def resize(image: np.ndarray, max_dimension: float) -> np.ndarray:
        """
        Uniformly downscale so the larger side equals max_dimension.
        Images already within bounds are returned unchanged.
        """
        height, width = image.shape[:2]
        ratio = min(max_dimension / width, max_dimension / height)
        if ratio >= 1:
            return image

        new_size = (max(1, int(round(width * ratio))), max(1, int(round(height * ratio))))
        return cv2.resize(image, new_size, interpolation=cv2.INTER_AREA)

    # Pipeline

    def composite(
        self,
        image: Optional[np.ndarray],
        pose: PoseKeypointMap,
        face_rects: Sequence[FaceRectangle],
        config: Configuration
    ) -> Optional[np.ndarray]:
        """
        Run steps 1-5 on a BGR image.

        Returns:
            Masked, annotated image, or None if the image cannot be processed
        """
        if image is None or image.size == 0:
            logger.warning("Compositing skipped: empty source image")
            return None

        try:
            if image.ndim == 2:
                image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)

            height, width = image.shape[:2]
            region = self.body_region(pose, width, height, config.confidence_threshold)
            if region.is_empty:
                logger.debug("No confident torso joints; whole image will be blurred")

            blurred = self.blur(image, config.blur_radius)
            mask = self.build_mask((height, width), region, face_rects, config.preserve_faces)
            blended = self.blend(blurred, image, mask)
            return self.draw_overlay(blended, pose, config.confidence_threshold)
        except (cv2.error, ValueError, OverflowError) as e:
            logger.error(f"Compositing failed: {e}", exc_info=True)
            return None

    def composite_and_resize(
        self,
        image: Optional[np.ndarray],
        pose: PoseKeypointMap,
        face_rects: Sequence[FaceRectangle],
        config: Configuration
    ) -> Optional[np.ndarray]:
        """Composite, then downscale to config.max_output_dimension."""
        composited = self.composite(image, pose, face_rects, config)
        if composited is None:
            return None
        return self.resize(composited, config.max_output_dimension)

    def composite_bytes(
        self,
        data: bytes,
        pose: PoseKeypointMap,
        face_rects: Sequence[FaceRectangle],
        config: Configuration
    ) -> Optional[np.ndarray]:
        """Decode encoded image bytes, then composite and resize."""
        return self.composite_and_resize(decode_image(data), pose, face_rects, config)


def _fill_rect(mask: np.ndarray, rect: Tuple[float, float, float, float], value: int) -> None:
    """Fill a pixel rectangle, clipped to the mask bounds."""
    x, y, w, h = rect
    if not all(math.isfinite(v) for v in rect) or w <= 0 or h <= 0:
        return

    height, width = mask.shape[:2]
    x0 = max(0, int(math.floor(x)))
    y0 = max(0, int(math.floor(y)))
    x1 = min(width, int(math.ceil(x + w)))
    y1 = min(height, int(math.ceil(y + h)))
    if x1 <= x0 or y1 <= y0:
        return
    mask[y0:y1, x0:x1] = value
