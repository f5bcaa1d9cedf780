"""
Keypoint schema for single-person body pose.
Maps semantic joint names to the skeleton topology used for drawing.
"""

from enum import Enum
from typing import List, Optional, Tuple


class JointName(str, Enum):
    """
    Named body and face joints reported by the pose detector (19 total).

    Layout:
    - Face: nose, eyes, ears
    - Upper body: neck, shoulders, elbows, wrists
    - Lower body: root (hip center), hips, knees, ankles
    """

    # Face
    NOSE = "nose"
    LEFT_EYE = "left_eye"
    RIGHT_EYE = "right_eye"
    LEFT_EAR = "left_ear"
    RIGHT_EAR = "right_ear"

    # Upper body
    NECK = "neck"
    LEFT_SHOULDER = "left_shoulder"
    RIGHT_SHOULDER = "right_shoulder"
    LEFT_ELBOW = "left_elbow"
    RIGHT_ELBOW = "right_elbow"
    LEFT_WRIST = "left_wrist"
    RIGHT_WRIST = "right_wrist"

    # Lower body
    ROOT = "root"
    LEFT_HIP = "left_hip"
    RIGHT_HIP = "right_hip"
    LEFT_KNEE = "left_knee"
    RIGHT_KNEE = "right_knee"
    LEFT_ANKLE = "left_ankle"
    RIGHT_ANKLE = "right_ankle"

    @classmethod
    def parse(cls, name: str) -> Optional["JointName"]:
        """
        Look up a joint by value ('left_wrist') or member name ('LEFT_WRIST').

        Returns:
            JointName or None if the name is not part of the schema
        """
        try:
            return cls(name)
        except ValueError:
            pass
        return cls.__members__.get(name.upper())


Connection = Tuple[JointName, JointName]

# Torso and limbs (12 pairs), drawn on composited stills
BODY_CONNECTIONS: List[Connection] = [
    # Left arm
    (JointName.LEFT_SHOULDER, JointName.LEFT_ELBOW),
    (JointName.LEFT_ELBOW, JointName.LEFT_WRIST),
    # Right arm
    (JointName.RIGHT_SHOULDER, JointName.RIGHT_ELBOW),
    (JointName.RIGHT_ELBOW, JointName.RIGHT_WRIST),
    # Torso
    (JointName.LEFT_SHOULDER, JointName.RIGHT_SHOULDER),
    (JointName.LEFT_HIP, JointName.RIGHT_HIP),
    (JointName.LEFT_SHOULDER, JointName.LEFT_HIP),
    (JointName.RIGHT_SHOULDER, JointName.RIGHT_HIP),
    # Left leg
    (JointName.LEFT_HIP, JointName.LEFT_KNEE),
    (JointName.LEFT_KNEE, JointName.LEFT_ANKLE),
    # Right leg
    (JointName.RIGHT_HIP, JointName.RIGHT_KNEE),
    (JointName.RIGHT_KNEE, JointName.RIGHT_ANKLE),
]

# Body plus face (17 pairs), drawn on the live overlay
FACE_CONNECTIONS: List[Connection] = [
    (JointName.LEFT_EYE, JointName.RIGHT_EYE),
    (JointName.LEFT_EYE, JointName.NOSE),
    (JointName.RIGHT_EYE, JointName.NOSE),
    (JointName.LEFT_EAR, JointName.LEFT_EYE),
    (JointName.RIGHT_EAR, JointName.RIGHT_EYE),
]

FULL_CONNECTIONS: List[Connection] = BODY_CONNECTIONS + FACE_CONNECTIONS

# Joints ringed with the highlight color on the live overlay
HIGHLIGHT_JOINTS: Tuple[JointName, ...] = (
    JointName.NOSE,
    JointName.LEFT_WRIST,
    JointName.RIGHT_WRIST,
)

# Joints whose bounding box defines the body region to be masked
TORSO_JOINTS: Tuple[JointName, ...] = (
    JointName.LEFT_SHOULDER,
    JointName.RIGHT_SHOULDER,
    JointName.LEFT_HIP,
    JointName.RIGHT_HIP,
)
