"""Pose classification endpoints."""

from typing import Any, Dict
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from posestream.analysis.pose_classification import PoseClassifier
from posestream.analysis.pose_detection import PoseDetector
from posestream.models.config import ConfigurationStore
from posestream.models.mappers import KeypointMapper
from posestream.models.pose_data import ClassificationResult, PoseLabel
from posestream.utils.image_io import decode_image

from .deps import get_classifier, get_config_store, get_detector
from .schemas import ClassificationResponse, ClassifyRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["classify"])


@router.post("/classify", summary="Classify a keypoint map", response_model=ClassificationResponse)
def classify_keypoints(
    request: ClassifyRequest,
    classifier: PoseClassifier = Depends(get_classifier),
    config_store: ConfigurationStore = Depends(get_config_store),
) -> Dict[str, Any]:
    """
    Run the heuristic classifier on detector output.

    Joints below the threshold are ignored; an empty map yields "Unknown".
    """
    keypoints = KeypointMapper.from_dict(
        {name: kp.model_dump() for name, kp in request.keypoints.items()}
    )
    threshold = request.threshold
    if threshold is None:
        threshold = config_store.current().confidence_threshold

    result = classifier.classify(keypoints, threshold)
    return result.to_dict()


@router.post("/classify-pose", summary="Detect and classify the pose in an image", response_model=ClassificationResponse)
async def classify_image(
    image: UploadFile = File(..., description="JPEG or PNG still"),
    detector: PoseDetector = Depends(get_detector),
    classifier: PoseClassifier = Depends(get_classifier),
    config_store: ConfigurationStore = Depends(get_config_store),
) -> Dict[str, Any]:
    """
    Server side of the remote classification contract.

    **Returns:** `{"pose", "confidence", "alternatives"}`. An image with no
    detected person classifies as "Unknown".
    """
    data = await image.read()
    frame = await run_in_threadpool(decode_image, data)
    if frame is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Image could not be decoded"
        )

    # Detection is CPU-bound; keep it off the event loop
    keypoints = await run_in_threadpool(detector.detect_pose, frame)
    if keypoints is None:
        logger.info("No pose detected in uploaded image")
        return ClassificationResult(label=PoseLabel.UNKNOWN.value, confidence=0.0).to_dict()

    result = classifier.classify(keypoints, config_store.current().confidence_threshold)
    logger.info(f"Classified uploaded image as {result.label}")
    return result.to_dict()
