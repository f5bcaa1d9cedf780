import logging
import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from posestream import __version__
from posestream.analysis.pose_classification import PoseClassifier
from posestream.analysis.pose_detection import PoseDetector
from posestream.analysis.region_mask_compositor import RegionMaskCompositor
from posestream.api.v1 import classify, composite, health, settings
from posestream.models.config import Configuration, ConfigurationStore
from posestream.utils.logging_config import configure_logging

logger = logging.getLogger(__name__)


def create_app(
    config_store: Optional[ConfigurationStore] = None,
    detector: Optional[PoseDetector] = None,
) -> FastAPI:
    """Application factory to build the FastAPI app."""

    app = FastAPI(
        title="Pose Stream API",
        version=__version__,
        description="Heuristic pose classification and privacy masking"
    )

    config_store = config_store or ConfigurationStore(Configuration.from_env())
    app.state.config_store = config_store
    app.state.classifier = PoseClassifier(config_store.current().confidence_threshold)
    app.state.compositor = RegionMaskCompositor()
    app.state.detector = detector

    # Get allowed origins from environment variable
    allowed_origins = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:5173,http://localhost:8080"
    ).split(",")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, prefix="/api/v1", tags=["health"])
    app.include_router(classify.router, prefix="/api/v1", tags=["classify"])
    app.include_router(composite.router, prefix="/api/v1", tags=["composite"])
    app.include_router(settings.router, prefix="/api/v1", tags=["config"])

    logger.info(f"Pose stream API ready (detector: {'yes' if detector else 'no'})")
    return app


def build_default_app() -> FastAPI:
    """
    App for `uvicorn posestream.main:app`. Attaches a MediaPipe detector
    when POSE_ENABLE_DETECTOR is set.
    """
    configure_logging()
    detector = None
    if os.getenv("POSE_ENABLE_DETECTOR", "false").lower() == "true":
        from posestream.analysis.pose_detection import MediaPipeDetector
        detector = MediaPipeDetector(static_image_mode=True)
    return create_app(detector=detector)


app = build_default_app()
