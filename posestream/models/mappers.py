"""
Mappers to convert raw detector outputs and JSON payloads into PoseKeypointMap.
Each mapper handles a specific input format (MediaPipe, JSON, etc.)
"""
import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from .keypoint_schema import JointName
from .pose_data import FaceRectangle, Keypoint, PoseKeypointMap

logger = logging.getLogger(__name__)


class KeypointMapper:
    """
    Mapper for the JSON keypoint format used by the HTTP API and fixtures.

    Format:
        {"left_wrist": {"x": 0.3, "y": 0.2, "confidence": 0.9}, ...}
    """

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> PoseKeypointMap:
        """
        Convert a name -> {x, y, confidence} dictionary to a PoseKeypointMap.

        Unknown joint names are skipped rather than rejected.
        """
        keypoints: PoseKeypointMap = {}
        for name, values in data.items():
            joint = JointName.parse(name)
            if joint is None:
                logger.warning(f"Skipping unknown joint '{name}'")
                continue
            keypoints[joint] = Keypoint.from_dict(joint, values)
        return keypoints

    @staticmethod
    def to_dict(keypoints: PoseKeypointMap) -> Dict[str, Dict[str, float]]:
        return {joint.value: kp.to_dict() for joint, kp in keypoints.items()}

    @staticmethod
    def from_json(payload: str) -> PoseKeypointMap:
        data = json.loads(payload)
        if not isinstance(data, dict):
            raise ValueError("Keypoint JSON must be an object keyed by joint name")
        return KeypointMapper.from_dict(data)

    @staticmethod
    def faces_from_json(payload: Optional[str]) -> List[FaceRectangle]:
        if not payload:
            return []
        data = json.loads(payload)
        if not isinstance(data, list):
            raise ValueError("Face JSON must be a list of rectangles")
        return [FaceRectangle.from_dict(item) for item in data]


class MediaPipeMapper:
    """
    Mapper for MediaPipe Pose output.

    MediaPipe reports 33 landmarks with top-left-origin normalized
    coordinates and a `visibility` score. The neck and root joints are not
    part of its topology and are synthesized from the shoulder and hip pairs.
    """

    # MediaPipe PoseLandmark indices
    LANDMARK_INDICES: Dict[JointName, int] = {
        JointName.NOSE: 0,
        JointName.LEFT_EYE: 2,
        JointName.RIGHT_EYE: 5,
        JointName.LEFT_EAR: 7,
        JointName.RIGHT_EAR: 8,
        JointName.LEFT_SHOULDER: 11,
        JointName.RIGHT_SHOULDER: 12,
        JointName.LEFT_ELBOW: 13,
        JointName.RIGHT_ELBOW: 14,
        JointName.LEFT_WRIST: 15,
        JointName.RIGHT_WRIST: 16,
        JointName.LEFT_HIP: 23,
        JointName.RIGHT_HIP: 24,
        JointName.LEFT_KNEE: 25,
        JointName.RIGHT_KNEE: 26,
        JointName.LEFT_ANKLE: 27,
        JointName.RIGHT_ANKLE: 28,
    }

    @staticmethod
    def from_landmarks(landmarks: Sequence[Any]) -> PoseKeypointMap:
        """
        Convert a MediaPipe landmark list to a PoseKeypointMap.

        Args:
            landmarks: Sequence of objects with x, y and visibility attributes

        Returns:
            PoseKeypointMap in bottom-left-origin normalized coordinates
        """
        keypoints: PoseKeypointMap = {}
        for joint, idx in MediaPipeMapper.LANDMARK_INDICES.items():
            if idx >= len(landmarks):
                continue
            lm = landmarks[idx]
            keypoints[joint] = Keypoint(
                joint=joint,
                x=float(lm.x),
                y=1.0 - float(lm.y),
                confidence=float(getattr(lm, "visibility", 0.0) or 0.0),
            )

        MediaPipeMapper._add_midpoint(
            keypoints, JointName.NECK, JointName.LEFT_SHOULDER, JointName.RIGHT_SHOULDER
        )
        MediaPipeMapper._add_midpoint(
            keypoints, JointName.ROOT, JointName.LEFT_HIP, JointName.RIGHT_HIP
        )
        return keypoints

    @staticmethod
    def _add_midpoint(
        keypoints: PoseKeypointMap,
        joint: JointName,
        first: JointName,
        second: JointName
    ) -> None:
        a = keypoints.get(first)
        b = keypoints.get(second)
        if a is None or b is None:
            return
        keypoints[joint] = Keypoint(
            joint=joint,
            x=(a.x + b.x) / 2,
            y=(a.y + b.y) / 2,
            confidence=min(a.confidence, b.confidence),
        )

    @staticmethod
    def face_from_detection(bbox: Any) -> FaceRectangle:
        """
        Convert a MediaPipe relative bounding box (xmin, ymin, width, height,
        top-left origin) into a bottom-left-origin FaceRectangle.
        """
        return FaceRectangle(
            x=float(bbox.xmin),
            y=1.0 - float(bbox.ymin) - float(bbox.height),
            width=float(bbox.width),
            height=float(bbox.height),
        )
