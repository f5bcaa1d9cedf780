"""
Core data structures for pose classification and masking.
Provides a consistent interface regardless of the underlying detector.

Coordinates are normalized to [0, 1] with the origin at the bottom-left
of the image, so a smaller y is lower in the frame.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
import math

from .keypoint_schema import JointName


@dataclass(frozen=True)
class Keypoint:
    """A single detected joint in normalized image space."""
    joint: JointName
    x: float
    y: float
    confidence: float  # [0..1] by detector contract, not clamped here

    def is_confident(self, threshold: float) -> bool:
        return self.confidence > threshold

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "confidence": self.confidence}

    @classmethod
    def from_dict(cls, joint: JointName, data: Dict[str, Any]) -> "Keypoint":
        return cls(
            joint=joint,
            x=float(data["x"]),
            y=float(data["y"]),
            confidence=float(data.get("confidence", 0.0)),
        )


# At most one Keypoint per joint per observation; may be partial
PoseKeypointMap = Dict[JointName, Keypoint]


def confident_joint(
    keypoints: PoseKeypointMap,
    joint: JointName,
    threshold: float
) -> Optional[Keypoint]:
    """Return the keypoint for `joint` if present and above threshold."""
    point = keypoints.get(joint)
    if point is None or not point.is_confident(threshold):
        return None
    return point


@dataclass(frozen=True)
class FaceRectangle:
    """Face bounding box, normalized, bottom-left origin (same as Keypoint)."""
    x: float
    y: float
    width: float
    height: float

    def to_pixel_rect(self, image_width: float, image_height: float) -> Tuple[float, float, float, float]:
        """
        Convert to a top-left-origin pixel rectangle.

        Returns:
            (x, y, width, height) in pixels
        """
        return (
            self.x * image_width,
            (1.0 - self.y - self.height) * image_height,
            self.width * image_width,
            self.height * image_height,
        )

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FaceRectangle":
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            height=float(data["height"]),
        )


@dataclass(frozen=True)
class BodyRegion:
    """
    Axis-aligned rectangle in pixel space (top-left origin).

    Derived from torso joints, never detected. With no qualifying joints the
    bounds stay at +/-infinity and the region is empty.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        values = (self.x, self.y, self.width, self.height)
        if not all(math.isfinite(v) for v in values):
            return True
        return self.width <= 0 or self.height <= 0

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


class PoseLabel(str, Enum):
    """Closed pose taxonomy, in classifier priority order."""
    ONE_HAND_UP = "One Hand Up"
    T_POSE = "T-Pose"
    STANDING = "Standing"
    SITTING = "Sitting"
    WALKING = "Walking"
    RAISED_HANDS = "Raised Hands"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class AlternativePose:
    """Secondary candidate label with its confidence."""
    label: str
    confidence: float

    def to_dict(self) -> dict:
        return {"pose": self.label, "confidence": self.confidence}


@dataclass(frozen=True)
class ClassificationResult:
    """
    Outcome of one classification call.

    Alternatives are ordered by descending confidence when populated. The
    local heuristic classifier never populates them; the remote service may.
    """
    label: str
    confidence: float
    alternatives: Tuple[AlternativePose, ...] = field(default_factory=tuple)

    @property
    def is_unknown(self) -> bool:
        return self.label == PoseLabel.UNKNOWN.value

    def to_dict(self) -> dict:
        return {
            "pose": self.label,
            "confidence": self.confidence,
            "alternatives": [alt.to_dict() for alt in self.alternatives],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClassificationResult":
        """
        Decode the wire format:
        {"pose": str, "confidence": float, "alternatives": [{"pose", "confidence"}] | null}
        """
        alternatives: List[AlternativePose] = [
            AlternativePose(label=str(alt["pose"]), confidence=float(alt["confidence"]))
            for alt in (data.get("alternatives") or [])
        ]
        return cls(
            label=str(data["pose"]),
            confidence=float(data["confidence"]),
            alternatives=tuple(alternatives),
        )
