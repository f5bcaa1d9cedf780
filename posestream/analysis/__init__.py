"""Pose classification, masking and pipeline orchestration."""
from .pose_classification import PoseClassifier
from .region_mask_compositor import RegionMaskCompositor
from .temporal_overlay import TemporalOverlayBuffer

__all__ = [
    "PoseClassifier",
    "RegionMaskCompositor",
    "TemporalOverlayBuffer",
]
