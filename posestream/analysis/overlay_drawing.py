"""Draw skeleton connections and joints onto BGR images."""

from dataclasses import dataclass, field
import math
from typing import List, Tuple

import cv2
import numpy as np

from posestream.models.keypoint_schema import (
    BODY_CONNECTIONS,
    FULL_CONNECTIONS,
    HIGHLIGHT_JOINTS,
    Connection,
    JointName,
)
from posestream.models.pose_data import Keypoint, PoseKeypointMap

Color = Tuple[int, int, int]  # BGR

PINK: Color = (85, 45, 255)
ORANGE: Color = (0, 149, 255)
GREEN: Color = (89, 199, 52)
RED: Color = (48, 59, 255)


@dataclass(frozen=True)
class SkeletonStyle:
    connections: List[Connection]
    connection_color: Color
    connection_width: int
    joint_color: Color
    joint_radius: float  # scaled by (0.5 + 0.5 * confidence)
    highlight_joints: Tuple[JointName, ...] = field(default_factory=tuple)
    highlight_color: Color = RED
    highlight_scale: float = 1.5


# Composited stills
COMPOSITE_STYLE = SkeletonStyle(
    connections=BODY_CONNECTIONS,
    connection_color=PINK,
    connection_width=8,
    joint_color=ORANGE,
    joint_radius=12.0,
)

# Live overlay
LIVE_OVERLAY_STYLE = SkeletonStyle(
    connections=FULL_CONNECTIONS,
    connection_color=ORANGE,
    connection_width=4,
    joint_color=GREEN,
    joint_radius=6.0,
    highlight_joints=HIGHLIGHT_JOINTS,
    highlight_color=RED,
)


def to_pixel(keypoint: Keypoint, width: int, height: int) -> Tuple[int, int]:
    """Normalized bottom-left-origin location -> top-left-origin pixel."""
    return int(round(keypoint.x * width)), int(round((1.0 - keypoint.y) * height))


def joint_radius(style: SkeletonStyle, confidence: float) -> float:
    return style.joint_radius * (0.5 + 0.5 * confidence)


def is_drawable(point: Keypoint, threshold: float) -> bool:
    """Above threshold and located at a finite position."""
    return point.is_confident(threshold) and math.isfinite(point.x) and math.isfinite(point.y)


def draw_pose(
    image: np.ndarray,
    keypoints: PoseKeypointMap,
    style: SkeletonStyle,
    threshold: float,
    alpha: float = 1.0
) -> np.ndarray:
    """
    Draw connections then joints for every keypoint above threshold.
    Joints with non-finite coordinates are skipped.

    Args:
        image: BGR image; not modified
        keypoints: Joint map to draw
        style: Colors, widths and topology
        threshold: Minimum confidence for a joint to be drawn
        alpha: Opacity of the drawing over the image (0..1)

    Returns:
        New image with the skeleton drawn
    """
    output = image.copy()
    if alpha <= 0 or not keypoints:
        return output

    height, width = image.shape[:2]
    layer = output

    for start_joint, end_joint in style.connections:
        start = keypoints.get(start_joint)
        end = keypoints.get(end_joint)
        if start is None or end is None:
            continue
        if not (is_drawable(start, threshold) and is_drawable(end, threshold)):
            continue
        cv2.line(
            layer,
            to_pixel(start, width, height),
            to_pixel(end, width, height),
            style.connection_color,
            style.connection_width,
            lineType=cv2.LINE_AA,
        )

    for joint, point in keypoints.items():
        if not is_drawable(point, threshold):
            continue
        center = to_pixel(point, width, height)
        radius = joint_radius(style, point.confidence)

        if joint in style.highlight_joints:
            ring = max(1, int(round(radius * style.highlight_scale)))
            cv2.circle(layer, center, ring, style.highlight_color, -1, lineType=cv2.LINE_AA)

        cv2.circle(layer, center, max(1, int(round(radius))), style.joint_color, -1, lineType=cv2.LINE_AA)

    if alpha >= 1:
        return layer
    return cv2.addWeighted(layer, float(alpha), image, 1.0 - float(alpha), 0.0)
