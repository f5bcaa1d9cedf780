"""Pydantic request and response models for the v1 API."""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class KeypointPayload(BaseModel):
    """One joint in normalized, bottom-left-origin coordinates."""

    x: float = Field(..., description="Normalized x in [0, 1]")
    y: float = Field(..., description="Normalized y in [0, 1], origin at the bottom")
    confidence: float = Field(0.0, description="Detector confidence in [0, 1]")


class ClassifyRequest(BaseModel):
    """Request body for POST /classify."""

    keypoints: Dict[str, KeypointPayload] = Field(default_factory=dict, description="Joint name -> keypoint")
    threshold: Optional[float] = Field(None, ge=0.0, le=1.0, description="Override the configured confidence threshold")


class AlternativePayload(BaseModel):
    pose: str
    confidence: float


class ClassificationResponse(BaseModel):
    """Wire format shared with the remote classification service."""

    pose: str
    confidence: float
    alternatives: Optional[List[AlternativePayload]] = None


class ConfigUpdate(BaseModel):
    """Request body for PUT /config. Omitted fields keep their current value."""

    capture_interval: Optional[float] = Field(None, ge=0.5, le=10.0, description="Seconds between still captures")
    processing_fps: Optional[int] = Field(None, ge=1, le=30, description="Live frames classified per second")
    blur_radius: Optional[float] = Field(None, ge=0.0, le=100.0, description="Gaussian blur radius in pixels")
    preserve_faces: Optional[bool] = Field(None, description="Re-mask detected faces")
    confidence_threshold: Optional[float] = Field(None, ge=0.0, le=1.0, description="Per-joint confidence threshold")
    max_output_dimension: Optional[float] = Field(None, gt=0, description="Longest side of rendered stills")
