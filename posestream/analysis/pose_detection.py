"""
Pose and face detection adapters.

Detection is an external collaborator: implementations return at most one
keypoint map and zero or more face rectangles per image. A failed or empty
detection is reported as None / [] and never raised to the classifier.
"""

import logging
import threading
from typing import List, Optional, Protocol

import cv2
import numpy as np

from posestream.models.mappers import MediaPipeMapper
from posestream.models.pose_data import FaceRectangle, PoseKeypointMap

logger = logging.getLogger(__name__)


class PoseDetector(Protocol):
    """Interface the pipeline and API expect from a detector."""

    def detect_pose(self, image_bgr: np.ndarray) -> Optional[PoseKeypointMap]:
        ...

    def detect_faces(self, image_bgr: np.ndarray) -> List[FaceRectangle]:
        ...


class MediaPipeDetector:
    """
    MediaPipe Pose + Face Detection.

    Notes:
    - MediaPipe expects RGB input; frames from OpenCV are converted.
    - `visibility` is used as keypoint confidence.
    - One instance may be shared across request threads; calls into the
      MediaPipe graphs are serialized with a lock.
    """

    def __init__(
        self,
        static_image_mode: bool = False,
        model_complexity: int = 1,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
    ) -> None:
        try:
            import mediapipe as mp  # type: ignore
        except ImportError as e:
            raise RuntimeError(
                "MediaPipe is not installed. Install detector deps with: pip install posestream[detector]"
            ) from e

        self._mp = mp
        self._lock = threading.Lock()
        self._pose = mp.solutions.pose.Pose(
            static_image_mode=static_image_mode,
            model_complexity=int(model_complexity),
            enable_segmentation=False,
            min_detection_confidence=float(min_detection_confidence),
            min_tracking_confidence=float(min_tracking_confidence),
        )
        self._faces = mp.solutions.face_detection.FaceDetection(
            min_detection_confidence=float(min_detection_confidence),
        )
        logger.info(f"MediaPipe detector ready (complexity={model_complexity})")

    def detect_pose(self, image_bgr: np.ndarray) -> Optional[PoseKeypointMap]:
        try:
            rgb = cv2.cvtColor(image_bgr, cv2.COLOR_BGR2RGB)
            rgb.flags.writeable = False
            with self._lock:
                results = self._pose.process(rgb)
        except Exception as e:
            logger.warning(f"Pose detection failed: {e}")
            return None

        if not results or not getattr(results, "pose_landmarks", None):
            return None
        return MediaPipeMapper.from_landmarks(results.pose_landmarks.landmark)

    def detect_faces(self, image_bgr: np.ndarray) -> List[FaceRectangle]:
        try:
            rgb = cv2.cvtColor(image_bgr, cv2.COLOR_BGR2RGB)
            rgb.flags.writeable = False
            with self._lock:
                results = self._faces.process(rgb)
        except Exception as e:
            logger.warning(f"Face detection failed: {e}")
            return []

        faces: List[FaceRectangle] = []
        for detection in getattr(results, "detections", None) or []:
            bbox = detection.location_data.relative_bounding_box
            faces.append(MediaPipeMapper.face_from_detection(bbox))
        return faces

    def close(self) -> None:
        with self._lock:
            self._pose.close()
            self._faces.close()
