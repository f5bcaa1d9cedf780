"""
Unit tests for mappers.

Tests conversion of JSON payloads and MediaPipe landmark output into
PoseKeypointMap and FaceRectangle values.
"""
import json
import unittest
from types import SimpleNamespace

from posestream.models.keypoint_schema import JointName
from posestream.models.mappers import KeypointMapper, MediaPipeMapper

try:
    from .fixtures import STANDING, kp
except ImportError:
    from fixtures import STANDING, kp


def create_landmarks(count: int = 33, visibility: float = 0.9):
    """Landmarks in MediaPipe's top-left-origin space, y increasing with index."""
    return [
        SimpleNamespace(x=0.01 * i, y=0.02 * i, visibility=visibility)
        for i in range(count)
    ]


class TestKeypointMapper(unittest.TestCase):
    """Test KeypointMapper for the JSON keypoint format."""

    def test_from_dict(self):
        """Test that each named joint becomes a Keypoint."""
        keypoints = KeypointMapper.from_dict(STANDING)

        self.assertEqual(len(keypoints), 4)
        hip = keypoints[JointName.LEFT_HIP]
        self.assertEqual(hip.joint, JointName.LEFT_HIP)
        self.assertAlmostEqual(hip.x, 0.4)
        self.assertAlmostEqual(hip.y, 0.5)
        self.assertAlmostEqual(hip.confidence, 0.9)

    def test_unknown_joints_skipped(self):
        """Test that names outside the schema are ignored."""
        keypoints = KeypointMapper.from_dict({"tail": kp(0.1, 0.1), "nose": kp(0.5, 0.5)})

        self.assertEqual(list(keypoints), [JointName.NOSE])

    def test_member_names_accepted(self):
        """Test that enum member names parse as well as values."""
        keypoints = KeypointMapper.from_dict({"LEFT_WRIST": kp(0.2, 0.2)})

        self.assertIn(JointName.LEFT_WRIST, keypoints)

    def test_missing_confidence_defaults_to_zero(self):
        keypoints = KeypointMapper.from_dict({"nose": {"x": 0.5, "y": 0.5}})

        self.assertEqual(keypoints[JointName.NOSE].confidence, 0.0)

    def test_to_dict_uses_joint_values(self):
        keypoints = KeypointMapper.from_dict(STANDING)

        self.assertEqual(KeypointMapper.to_dict(keypoints), STANDING)

    def test_from_json(self):
        keypoints = KeypointMapper.from_json(json.dumps(STANDING))

        self.assertEqual(len(keypoints), 4)

    def test_from_json_rejects_non_object(self):
        with self.assertRaises(ValueError):
            KeypointMapper.from_json("[1, 2, 3]")

    def test_faces_from_json(self):
        faces = KeypointMapper.faces_from_json(
            json.dumps([{"x": 0.4, "y": 0.6, "width": 0.2, "height": 0.2}])
        )

        self.assertEqual(len(faces), 1)
        self.assertAlmostEqual(faces[0].width, 0.2)

    def test_faces_from_empty_payload(self):
        self.assertEqual(KeypointMapper.faces_from_json(None), [])
        self.assertEqual(KeypointMapper.faces_from_json(""), [])

    def test_faces_from_json_rejects_object(self):
        with self.assertRaises(ValueError):
            KeypointMapper.faces_from_json('{"x": 0.4}')


class TestMediaPipeMapper(unittest.TestCase):
    """Test MediaPipeMapper for converting MediaPipe output to PoseKeypointMap."""

    def test_all_schema_joints_present(self):
        keypoints = MediaPipeMapper.from_landmarks(create_landmarks())

        self.assertEqual(set(keypoints), set(JointName))

    def test_vertical_axis_flipped(self):
        """Test that top-left-origin y becomes bottom-left-origin y."""
        keypoints = MediaPipeMapper.from_landmarks(create_landmarks())

        nose = keypoints[JointName.NOSE]
        self.assertAlmostEqual(nose.y, 1.0)
        wrist = keypoints[JointName.LEFT_WRIST]
        self.assertAlmostEqual(wrist.x, 0.15)
        self.assertAlmostEqual(wrist.y, 1.0 - 0.30)
        self.assertAlmostEqual(wrist.confidence, 0.9)

    def test_neck_and_root_synthesized(self):
        landmarks = create_landmarks()
        landmarks[11].visibility = 0.4
        keypoints = MediaPipeMapper.from_landmarks(landmarks)

        neck = keypoints[JointName.NECK]
        self.assertAlmostEqual(neck.x, (0.11 + 0.12) / 2)
        self.assertAlmostEqual(neck.confidence, 0.4)

        root = keypoints[JointName.ROOT]
        self.assertAlmostEqual(root.y, 1.0 - (0.46 + 0.48) / 2)

    def test_short_landmark_list(self):
        """Test that missing indices are skipped rather than failing."""
        keypoints = MediaPipeMapper.from_landmarks(create_landmarks(count=12))

        self.assertIn(JointName.LEFT_SHOULDER, keypoints)
        self.assertNotIn(JointName.RIGHT_SHOULDER, keypoints)
        self.assertNotIn(JointName.NECK, keypoints)
        self.assertNotIn(JointName.ROOT, keypoints)

    def test_face_from_detection(self):
        bbox = SimpleNamespace(xmin=0.4, ymin=0.1, width=0.2, height=0.3)
        face = MediaPipeMapper.face_from_detection(bbox)

        self.assertAlmostEqual(face.x, 0.4)
        self.assertAlmostEqual(face.y, 0.6)
        self.assertAlmostEqual(face.width, 0.2)
        self.assertAlmostEqual(face.height, 0.3)

    def test_face_round_trips_to_pixels(self):
        """Test that the flipped rectangle lands back at the detected pixels."""
        bbox = SimpleNamespace(xmin=0.4, ymin=0.1, width=0.2, height=0.3)
        face = MediaPipeMapper.face_from_detection(bbox)

        x, y, w, h = face.to_pixel_rect(200, 100)
        self.assertAlmostEqual(x, 80.0)
        self.assertAlmostEqual(y, 10.0)
        self.assertAlmostEqual(w, 40.0)
        self.assertAlmostEqual(h, 30.0)


if __name__ == "__main__":
    unittest.main()
