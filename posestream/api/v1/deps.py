"""
FastAPI dependencies. Components are attached to app.state by create_app().
"""
from typing import Optional

from fastapi import HTTPException, Request, status

from posestream.analysis.pose_classification import PoseClassifier
from posestream.analysis.pose_detection import PoseDetector
from posestream.analysis.region_mask_compositor import RegionMaskCompositor
from posestream.models.config import ConfigurationStore


def get_config_store(request: Request) -> ConfigurationStore:
    return request.app.state.config_store


def get_classifier(request: Request) -> PoseClassifier:
    return request.app.state.classifier


def get_compositor(request: Request) -> RegionMaskCompositor:
    return request.app.state.compositor


def get_detector(request: Request) -> PoseDetector:
    """Return the configured detector, or 503 when none is attached."""
    detector: Optional[PoseDetector] = getattr(request.app.state, "detector", None)
    if detector is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="No pose detector configured on this server"
        )
    return detector
