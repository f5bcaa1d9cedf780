"""Privacy masking endpoint."""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from posestream.analysis.region_mask_compositor import RegionMaskCompositor
from posestream.models.config import ConfigurationStore
from posestream.models.mappers import KeypointMapper
from posestream.utils.image_io import encode_jpeg

from .deps import get_compositor, get_config_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["composite"])


@router.post(
    "/composite",
    summary="Blur everything outside the body region and draw the skeleton",
    response_class=Response,
    responses={200: {"content": {"image/jpeg": {}}}},
)
async def composite_image(
    image: UploadFile = File(..., description="Source still"),
    keypoints: str = Form(..., description="JSON object: joint name -> {x, y, confidence}"),
    faces: Optional[str] = Form(None, description="JSON list of {x, y, width, height} face rectangles"),
    compositor: RegionMaskCompositor = Depends(get_compositor),
    config_store: ConfigurationStore = Depends(get_config_store),
) -> Response:
    """
    Render a masked, annotated, resized JPEG using the current configuration.

    Coordinates are normalized with the origin at the bottom-left.
    """
    try:
        pose = KeypointMapper.from_json(keypoints)
        face_rects = KeypointMapper.faces_from_json(faces)
    except (json.JSONDecodeError, ValueError, KeyError, TypeError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid keypoint or face payload: {e}"
        )

    config = config_store.current()
    data = await image.read()
    # Blur and drawing are CPU-bound; keep them off the event loop
    rendered = await run_in_threadpool(compositor.composite_bytes, data, pose, face_rects, config)
    if rendered is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Image processing failed"
        )

    logger.info(f"Composited image {rendered.shape[1]}x{rendered.shape[0]}")
    content = await run_in_threadpool(encode_jpeg, rendered)
    return Response(content=content, media_type="image/jpeg")
