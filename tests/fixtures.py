"""
Test fixtures for pose classification and masking tests.
Provides keypoint maps in the JSON form used by the API.

Includes both standard poses and edge cases:
- Standard: standing, sitting, T-pose, one hand up, raised hands, walking
- Edge cases: empty map, low confidence, hip-knee gap between thresholds
"""
from typing import Dict

from posestream.models.mappers import KeypointMapper
from posestream.models.pose_data import PoseKeypointMap

KeypointDict = Dict[str, Dict[str, float]]


def kp(x: float, y: float, confidence: float = 0.9) -> Dict[str, float]:
    return {"x": x, "y": y, "confidence": confidence}


# Hip-knee gap 0.15 on both sides
STANDING: KeypointDict = {
    "left_hip": kp(0.4, 0.5),
    "right_hip": kp(0.6, 0.5),
    "left_knee": kp(0.4, 0.65),
    "right_knee": kp(0.6, 0.65),
}

# Hip-knee gap 0.4 on both sides
SITTING: KeypointDict = {
    "left_hip": kp(0.4, 0.5),
    "right_hip": kp(0.6, 0.5),
    "left_knee": kp(0.4, 0.9),
    "right_knee": kp(0.6, 0.9),
}

# Hip-knee gap 0.25: neither standing nor sitting
LEGS_IN_GAP: KeypointDict = {
    "left_hip": kp(0.4, 0.5),
    "right_hip": kp(0.6, 0.5),
    "left_knee": kp(0.4, 0.75),
    "right_knee": kp(0.6, 0.75),
}

# Wrists level with shoulders, 0.25 outward
T_POSE: KeypointDict = {
    "left_shoulder": kp(0.4, 0.3),
    "right_shoulder": kp(0.6, 0.3),
    "left_wrist": kp(0.15, 0.32),
    "right_wrist": kp(0.85, 0.28),
}

# Only the left wrist is above the nose
ONE_HAND_UP: KeypointDict = {
    "nose": kp(0.5, 0.3),
    "left_wrist": kp(0.3, 0.2),
    "right_wrist": kp(0.7, 0.6),
}

# Both wrists above the nose
BOTH_HANDS_ABOVE_NOSE: KeypointDict = {
    "left_wrist": kp(0.3, 0.2),
    "right_wrist": kp(0.7, 0.2),
    "nose": kp(0.5, 0.3),
}

# Both wrists above their shoulders, arms not extended sideways
RAISED_HANDS: KeypointDict = {
    "left_shoulder": kp(0.4, 0.35),
    "right_shoulder": kp(0.6, 0.35),
    "left_wrist": kp(0.38, 0.1),
    "right_wrist": kp(0.62, 0.1),
}

# Ankles 0.15 apart vertically
WALKING: KeypointDict = {
    "left_ankle": kp(0.45, 0.9),
    "right_ankle": kp(0.55, 0.75),
}

# Torso for masking tests: box x 0.4..0.6, y 0.4..0.7 (normalized)
TORSO: KeypointDict = {
    "left_shoulder": kp(0.4, 0.7),
    "right_shoulder": kp(0.6, 0.7),
    "left_hip": kp(0.4, 0.4),
    "right_hip": kp(0.6, 0.4),
}


def create_pose(*parts: KeypointDict, confidence: float = None) -> PoseKeypointMap:
    """Merge keypoint dicts into a PoseKeypointMap, optionally overriding confidence."""
    merged: KeypointDict = {}
    for part in parts:
        merged.update(part)
    if confidence is not None:
        merged = {name: dict(values, confidence=confidence) for name, values in merged.items()}
    return KeypointMapper.from_dict(merged)
