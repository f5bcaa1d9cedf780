"""Classify a single pose observation with an ordered heuristic cascade."""

import logging
from typing import Callable, List, Optional, Tuple

from posestream.models.keypoint_schema import JointName
from posestream.models.pose_data import (
    ClassificationResult,
    PoseKeypointMap,
    PoseLabel,
    confident_joint,
)

logger = logging.getLogger(__name__)

# Normalized-unit thresholds
STANDING_MAX_HIP_KNEE_GAP = 0.2
SITTING_MIN_HIP_KNEE_GAP = 0.3
WALKING_MIN_ANKLE_GAP = 0.1
T_POSE_MAX_VERTICAL_OFFSET = 0.1
T_POSE_MIN_EXTENSION = 0.2

UNKNOWN_CONFIDENCE = 0.5


class PoseClassifier:
    """
    Heuristic pose classifier.

    Rules are evaluated top to bottom and the first match wins, so labels are
    mutually exclusive by priority rather than by geometry:

        One Hand Up > T-Pose > Standing > Sitting > Walking > Raised Hands > Unknown

    A rule whose joints are missing or below threshold simply does not match.
    Hip-knee gaps between 0.2 and 0.3 match neither Standing nor Sitting.

    Vertical comparisons treat a smaller y as "up" (wrist above nose, hip
    above knee).
    """

    def __init__(self, confidence_threshold: float = 0.3):
        self.confidence_threshold = confidence_threshold
        self._rules: List[Tuple[PoseLabel, float, Callable[[PoseKeypointMap, float], bool]]] = [
            (PoseLabel.ONE_HAND_UP, 0.8, self.is_one_hand_up),
            (PoseLabel.T_POSE, 0.85, self.is_t_pose),
            (PoseLabel.STANDING, 0.9, self.is_standing),
            (PoseLabel.SITTING, 0.85, self.is_sitting),
            (PoseLabel.WALKING, 0.8, self.is_walking),
            (PoseLabel.RAISED_HANDS, 0.75, self.is_raised_hands),
        ]

    def classify(
        self,
        keypoints: PoseKeypointMap,
        threshold: Optional[float] = None
    ) -> ClassificationResult:
        """
        Classify a keypoint map.

        Args:
            keypoints: Possibly partial joint map for one observation
            threshold: Per-joint confidence threshold; defaults to the
                classifier's configured threshold

        Returns:
            ClassificationResult with empty alternatives
        """
        if threshold is None:
            threshold = self.confidence_threshold

        for label, confidence, rule in self._rules:
            if rule(keypoints, threshold):
                logger.debug(f"Classified pose as {label.value}")
                return ClassificationResult(label=label.value, confidence=confidence)

        return ClassificationResult(label=PoseLabel.UNKNOWN.value, confidence=UNKNOWN_CONFIDENCE)

    # Rules

    @staticmethod
    def is_one_hand_up(keypoints: PoseKeypointMap, threshold: float) -> bool:
        left_wrist = confident_joint(keypoints, JointName.LEFT_WRIST, threshold)
        right_wrist = confident_joint(keypoints, JointName.RIGHT_WRIST, threshold)
        nose = confident_joint(keypoints, JointName.NOSE, threshold)
        if left_wrist is None or right_wrist is None or nose is None:
            return False

        left_up = left_wrist.y < nose.y
        right_up = right_wrist.y < nose.y
        return left_up != right_up

    @staticmethod
    def is_t_pose(keypoints: PoseKeypointMap, threshold: float) -> bool:
        arms = _arm_joints(keypoints, threshold)
        if arms is None:
            return False
        left_wrist, right_wrist, left_shoulder, right_shoulder = arms

        left_aligned = abs(left_wrist.y - left_shoulder.y) < T_POSE_MAX_VERTICAL_OFFSET
        right_aligned = abs(right_wrist.y - right_shoulder.y) < T_POSE_MAX_VERTICAL_OFFSET

        left_extended = (left_shoulder.x - left_wrist.x) > T_POSE_MIN_EXTENSION
        right_extended = (right_wrist.x - right_shoulder.x) > T_POSE_MIN_EXTENSION

        return left_aligned and right_aligned and left_extended and right_extended

    @staticmethod
    def is_standing(keypoints: PoseKeypointMap, threshold: float) -> bool:
        legs = _leg_joints(keypoints, threshold)
        if legs is None:
            return False
        left_hip, right_hip, left_knee, right_knee = legs

        return (abs(left_hip.y - left_knee.y) < STANDING_MAX_HIP_KNEE_GAP and
                abs(right_hip.y - right_knee.y) < STANDING_MAX_HIP_KNEE_GAP)

    @staticmethod
    def is_sitting(keypoints: PoseKeypointMap, threshold: float) -> bool:
        legs = _leg_joints(keypoints, threshold)
        if legs is None:
            return False
        left_hip, right_hip, left_knee, right_knee = legs

        # Smaller y is higher: hip above knee by more than the gap
        return ((left_knee.y - left_hip.y) > SITTING_MIN_HIP_KNEE_GAP and
                (right_knee.y - right_hip.y) > SITTING_MIN_HIP_KNEE_GAP)

    @staticmethod
    def is_walking(keypoints: PoseKeypointMap, threshold: float) -> bool:
        left_ankle = confident_joint(keypoints, JointName.LEFT_ANKLE, threshold)
        right_ankle = confident_joint(keypoints, JointName.RIGHT_ANKLE, threshold)
        if left_ankle is None or right_ankle is None:
            return False
        return abs(left_ankle.y - right_ankle.y) > WALKING_MIN_ANKLE_GAP

    @staticmethod
    def is_raised_hands(keypoints: PoseKeypointMap, threshold: float) -> bool:
        arms = _arm_joints(keypoints, threshold)
        if arms is None:
            return False
        left_wrist, right_wrist, left_shoulder, right_shoulder = arms
        return left_wrist.y < left_shoulder.y and right_wrist.y < right_shoulder.y


def _arm_joints(keypoints: PoseKeypointMap, threshold: float):
    """Both wrists and both shoulders, or None if any is missing."""
    joints = [
        confident_joint(keypoints, joint, threshold)
        for joint in (JointName.LEFT_WRIST, JointName.RIGHT_WRIST,
                      JointName.LEFT_SHOULDER, JointName.RIGHT_SHOULDER)
    ]
    return None if any(j is None for j in joints) else joints


def _leg_joints(keypoints: PoseKeypointMap, threshold: float):
    """Both hips and both knees, or None if any is missing."""
    joints = [
        confident_joint(keypoints, joint, threshold)
        for joint in (JointName.LEFT_HIP, JointName.RIGHT_HIP,
                      JointName.LEFT_KNEE, JointName.RIGHT_KNEE)
    ]
    return None if any(j is None for j in joints) else joints
