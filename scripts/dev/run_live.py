"""
Run the live pose pipeline against a local camera.

Shows the camera feed with the faded skeleton overlay and the current
label; stills are masked every capture interval and optionally sent to a
remote classification service.
"""
import argparse
import logging

import cv2

from posestream.analysis.frame_source import CameraFrameSource
from posestream.analysis.pipeline import PosePipeline
from posestream.analysis.pose_detection import MediaPipeDetector
from posestream.errors import DeviceUnavailableError
from posestream.models.config import Configuration, ConfigurationStore
from posestream.services.classification_client import RemoteClassificationClient
from posestream.utils.logging_config import configure_logging

logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Live pose classification with privacy masking")
    parser.add_argument("--camera", type=int, default=0, help="Camera index")
    parser.add_argument("--remote-url", default=None, help="Base URL of a remote classification service")
    parser.add_argument("--fps", type=int, default=None, help="Processing FPS (1-30)")
    parser.add_argument("--interval", type=float, default=None, help="Still capture interval in seconds (0.5-10)")
    parser.add_argument("--no-display", action="store_true", help="Log labels only, no preview window")
    return parser.parse_args()


def main():
    configure_logging()
    args = parse_args()

    store = ConfigurationStore(Configuration.from_env())
    overrides = {}
    if args.fps is not None:
        overrides["processing_fps"] = args.fps
    if args.interval is not None:
        overrides["capture_interval"] = args.interval
    if overrides:
        store.update(**overrides)

    camera = CameraFrameSource(args.camera)
    latest = {"label": "", "still": None}

    pipeline = PosePipeline(
        detector=MediaPipeDetector(),
        config_store=store,
        remote_client=RemoteClassificationClient(args.remote_url) if args.remote_url else None,
        frame_source=camera,
    )

    def on_classified(result):
        if result is not None:
            latest["label"] = f"{result.label} ({result.confidence:.2f})"

    pipeline.on_classified = on_classified
    pipeline.on_processed_image = lambda image: latest.update(still=image)
    pipeline.on_remote_result = lambda result: logger.info(f"Remote: {result.label} ({result.confidence:.2f})")
    pipeline.on_error = lambda error: logger.warning(f"Remote classification failed: {error}")

    try:
        pipeline.start()
    except DeviceUnavailableError as e:
        logger.error(str(e))
        return 1

    try:
        while True:
            frame = camera.read()
            if frame is None:
                continue
            pipeline.submit_frame(frame)

            if args.no_display:
                continue

            view = pipeline.render_overlay(frame)
            cv2.putText(view, latest["label"], (16, 32), cv2.FONT_HERSHEY_SIMPLEX, 0.9, (255, 255, 255), 2)
            cv2.putText(view, f"{pipeline.frame_rate:.0f} fps", (16, 64), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1)
            cv2.imshow("pose", view)
            if latest["still"] is not None:
                cv2.imshow("masked still", latest["still"])
            if cv2.waitKey(1) & 0xFF == ord("q"):
                break
    except KeyboardInterrupt:
        pass
    finally:
        pipeline.shutdown()
        cv2.destroyAllWindows()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
