"""
posestream - real-time pose classification and privacy masking.

Classifies a single person's pose from detected keypoints and renders
blurred, skeleton-annotated stills.
"""

__version__ = "1.0.0"
