"""Shared test fixtures for posestream tests."""
import numpy as np
import pytest

from posestream.analysis.pose_classification import PoseClassifier
from posestream.analysis.region_mask_compositor import RegionMaskCompositor
from posestream.models.config import Configuration

from .fixtures import TORSO, create_pose


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeDetector:
    """Detector returning canned results and recording calls."""

    def __init__(self, pose=None, faces=None, error: Exception = None):
        self.pose = pose
        self.faces = faces or []
        self.error = error
        self.pose_calls = 0
        self.face_calls = 0

    def detect_pose(self, image_bgr):
        self.pose_calls += 1
        if self.error is not None:
            raise self.error
        return self.pose

    def detect_faces(self, image_bgr):
        self.face_calls += 1
        return list(self.faces)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def classifier():
    return PoseClassifier(confidence_threshold=0.3)


@pytest.fixture
def compositor():
    return RegionMaskCompositor()


@pytest.fixture
def config():
    return Configuration()


@pytest.fixture
def torso_pose():
    return create_pose(TORSO)


@pytest.fixture
def textured_image():
    """200x100 (WxH) BGR image with a high-frequency checkerboard."""
    yy, xx = np.mgrid[0:100, 0:200]
    board = (((xx // 4) + (yy // 4)) % 2 * 255).astype(np.uint8)
    return np.dstack([board, board, board])


@pytest.fixture
def fake_detector(torso_pose):
    return FakeDetector(pose=torso_pose)
