"""
Data models for pose classification and masking.
"""
from .pose_data import (
    AlternativePose,
    BodyRegion,
    ClassificationResult,
    FaceRectangle,
    Keypoint,
    PoseKeypointMap,
    PoseLabel,
)
from .keypoint_schema import (
    JointName,
    BODY_CONNECTIONS,
    FULL_CONNECTIONS,
    HIGHLIGHT_JOINTS,
)
from .config import Configuration, ConfigurationStore

__all__ = [
    "AlternativePose",
    "BodyRegion",
    "ClassificationResult",
    "FaceRectangle",
    "Keypoint",
    "PoseKeypointMap",
    "PoseLabel",
    "JointName",
    "BODY_CONNECTIONS",
    "FULL_CONNECTIONS",
    "HIGHLIGHT_JOINTS",
    "Configuration",
    "ConfigurationStore",
]
