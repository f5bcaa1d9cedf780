"""
Orchestrate the live and periodic pose pipelines.

Two independent cadences share only the read-only configuration snapshot:

- Continuous path: every delivered camera frame passes a 1/processing_fps
  throttle, then detection + classification run on the live worker.
- Periodic path: a timer fires every capture_interval; a still is taken
  unless a previous cycle is still in flight, then detection, masking and
  optional remote classification run on the capture worker.
"""

from concurrent.futures import Future, ThreadPoolExecutor
import logging
import threading
import time
from typing import Callable, Optional, Tuple

import numpy as np

from posestream.errors import TransportError
from posestream.models.config import Configuration, ConfigurationStore
from posestream.models.pose_data import ClassificationResult, PoseKeypointMap
from posestream.services.classification_client import RemoteClassificationClient

from .frame_source import CameraFrameSource
from .pose_classification import PoseClassifier
from .pose_detection import PoseDetector
from .region_mask_compositor import RegionMaskCompositor
from .temporal_overlay import TemporalOverlayBuffer

logger = logging.getLogger(__name__)


class FrameRateTracker:
    """Counts delivered frames and publishes a rate once per second."""

    def __init__(self, clock: Callable[[], float] = time.monotonic, window: float = 1.0):
        self._clock = clock
        self._window = window
        self._lock = threading.Lock()
        self._count = 0
        self._window_start = clock()
        self.frame_rate = 0.0

    def increment_frame(self) -> None:
        with self._lock:
            self._count += 1
            now = self._clock()
            elapsed = now - self._window_start
            if elapsed >= self._window:
                self.frame_rate = self._count / elapsed
                self._count = 0
                self._window_start = now

    def reset(self) -> None:
        with self._lock:
            self._count = 0
            self._window_start = self._clock()
            self.frame_rate = 0.0


class CaptureScheduler:
    """
    Cancellable repeating timer on a daemon thread.

    The interval is re-read before every wait so configuration changes take
    effect on the next cycle.
    """

    def __init__(self, interval: Callable[[], float], action: Callable[[], object]):
        self._interval = interval
        self._action = action
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        self.cancel()
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_event,), name="capture-timer", daemon=True
        )
        self._thread.start()

    def cancel(self) -> None:
        self._stop_event.set()
        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=1.0)

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self._interval()):
            try:
                self._action()
            except Exception as e:
                logger.error(f"Scheduled capture failed: {e}", exc_info=True)


class PosePipeline:
    """
    Pipeline controller holding typed callback slots.

    Callbacks run on worker threads, in this order per cycle:
        live:    on_overlay_update(map | None), on_classified(result | None)
        capture: on_processed_image(image), on_remote_result(result) or on_error(exc)

    After stop() no capture is scheduled; work already running is allowed to
    finish but its results are dropped.
    """

    def __init__(
        self,
        detector: PoseDetector,
        config_store: Optional[ConfigurationStore] = None,
        classifier: Optional[PoseClassifier] = None,
        compositor: Optional[RegionMaskCompositor] = None,
        overlay: Optional[TemporalOverlayBuffer] = None,
        remote_client: Optional[RemoteClassificationClient] = None,
        frame_source: Optional[CameraFrameSource] = None,
        still_source: Optional[Callable[[], Optional[np.ndarray]]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.detector = detector
        self.config_store = config_store or ConfigurationStore()
        config = self.config_store.current()

        self.classifier = classifier or PoseClassifier(config.confidence_threshold)
        self.compositor = compositor or RegionMaskCompositor()
        self.overlay = overlay or TemporalOverlayBuffer(
            capacity=config.max_observations, fade_duration=config.fade_duration, clock=clock
        )
        self.remote_client = remote_client
        self.frame_source = frame_source
        if still_source is None and frame_source is not None:
            still_source = frame_source.read
        self.still_source = still_source
        self.frame_rate_tracker = FrameRateTracker(clock=clock)

        # Callback slots
        self.on_overlay_update: Optional[Callable[[Optional[PoseKeypointMap]], None]] = None
        self.on_classified: Optional[Callable[[Optional[ClassificationResult]], None]] = None
        self.on_processed_image: Optional[Callable[[np.ndarray], None]] = None
        self.on_remote_result: Optional[Callable[[ClassificationResult], None]] = None
        self.on_error: Optional[Callable[[Exception], None]] = None

        self._clock = clock
        self._lock = threading.Lock()
        self._running = False
        self._generation = 0
        self._in_flight = False
        self._last_processed_frame_time = -float("inf")
        self._last_capture_time = -float("inf")

        self._shut_down = False
        self._create_executors()
        self._scheduler = CaptureScheduler(
            interval=lambda: self.config_store.current().capture_interval,
            action=self.capture_still,
        )

    # Lifecycle

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_processing(self) -> bool:
        return self._in_flight

    @property
    def frame_rate(self) -> float:
        return self.frame_rate_tracker.frame_rate

    def start(self) -> None:
        """
        Open the frame source and start the capture timer.

        Raises:
            DeviceUnavailableError: if the camera cannot be opened
        """
        if self._running:
            return
        if self.frame_source is not None:
            self.frame_source.open()
        if self._shut_down:
            self._create_executors()
            self._shut_down = False

        with self._lock:
            self._running = True
            self._generation += 1
        self.frame_rate_tracker.reset()
        self._scheduler.start()
        logger.info("Pose pipeline started")

    def stop(self) -> None:
        with self._lock:
            if not self._running:
                return
            self._running = False
            self._generation += 1
        self._scheduler.cancel()
        logger.info("Pose pipeline stopped")

    def shutdown(self) -> None:
        """Stop, wait for workers, release the camera. start() may be called again afterwards."""
        self.stop()
        self._shut_down = True
        self._live_executor.shutdown(wait=True)
        self._capture_executor.shutdown(wait=True)
        if self.frame_source is not None:
            self.frame_source.release()

    # Continuous path

    def submit_frame(self, frame: np.ndarray) -> Optional[Future]:
        """
        Offer a live frame. Frames arriving sooner than 1/processing_fps after
        the last processed frame are dropped, never queued.

        Returns:
            Future for the scheduled work, or None if the frame was dropped
        """
        self.frame_rate_tracker.increment_frame()
        config = self.config_store.current()

        with self._lock:
            if not self._running:
                return None
            now = self._clock()
            if now - self._last_processed_frame_time < config.frame_interval:
                return None
            self._last_processed_frame_time = now
            generation = self._generation

        return self._live_executor.submit(self._run_live, frame, generation, config)

    def process_frame(
        self,
        frame: np.ndarray,
        config: Optional[Configuration] = None
    ) -> Tuple[Optional[PoseKeypointMap], Optional[ClassificationResult]]:
        """Detect and classify one frame synchronously."""
        config = config or self.config_store.current()
        keypoints = self._detect_pose(frame)
        if keypoints is None:
            return None, None
        return keypoints, self.classifier.classify(keypoints, config.confidence_threshold)

    def _run_live(self, frame: np.ndarray, generation: int, config: Configuration) -> Optional[ClassificationResult]:
        keypoints, result = self.process_frame(frame, config)
        if not self._is_current(generation):
            return None

        if (self.overlay.capacity, self.overlay.fade_duration) != (config.max_observations, config.fade_duration):
            self.overlay.reconfigure(config.max_observations, config.fade_duration)
        self.overlay.update(keypoints)

        self._emit(self.on_overlay_update, keypoints)
        self._emit(self.on_classified, result)
        return result

    def render_overlay(self, frame: np.ndarray) -> np.ndarray:
        """Draw the faded pose history onto a copy of `frame`."""
        self.overlay.tick()
        return self.overlay.render(frame, self.config_store.current().confidence_threshold)

    # Periodic path

    def should_capture(self) -> bool:
        config = self.config_store.current()
        with self._lock:
            if not self._running:
                logger.debug("Capture skipped: pipeline not running")
                return False
            if self._in_flight:
                logger.debug("Capture skipped: already processing")
                return False
            if self._clock() - self._last_capture_time < config.capture_interval:
                logger.debug("Capture skipped: waiting for capture interval")
                return False
        return True

    def capture_still(self) -> Optional[Future]:
        """
        Take a still and schedule masking + remote classification.

        Returns:
            Future for the capture cycle, or None if the capture was dropped
        """
        if self.still_source is None or not self.should_capture():
            return None

        frame = self.still_source()
        if frame is None:
            logger.debug("Capture skipped: no frame available")
            return None

        config = self.config_store.current()
        with self._lock:
            if self._in_flight:
                return None
            self._in_flight = True
            self._last_capture_time = self._clock()
            generation = self._generation

        return self._capture_executor.submit(self._run_capture, frame, generation, config)

    def process_still(self, image: np.ndarray, config: Optional[Configuration] = None) -> Optional[np.ndarray]:
        """
        Detect pose and faces, then mask, annotate and resize.

        Returns:
            Rendered image, or None when no pose was detected or compositing failed
        """
        config = config or self.config_store.current()
        pose = self._detect_pose(image)
        if pose is None:
            return None

        faces = []
        if config.preserve_faces:
            try:
                faces = self.detector.detect_faces(image)
            except Exception as e:
                logger.warning(f"Face detection failed: {e}")
        return self.compositor.composite_and_resize(image, pose, faces, config)

    def _run_capture(self, frame: np.ndarray, generation: int, config: Configuration) -> Optional[np.ndarray]:
        try:
            processed = self.process_still(frame, config)
            if processed is None:
                logger.debug("Capture produced no image")
                return None
            if not self._is_current(generation):
                return None

            self._emit(self.on_processed_image, processed)

            if self.remote_client is not None:
                try:
                    remote = self.remote_client.classify_image(processed)
                except TransportError as e:
                    if self._is_current(generation):
                        self._emit(self.on_error, e)
                    return processed
                if self._is_current(generation):
                    self._emit(self.on_remote_result, remote)
            return processed
        except Exception as e:
            logger.error(f"Capture cycle failed: {e}", exc_info=True)
            return None
        finally:
            with self._lock:
                self._in_flight = False

    # Helpers

    def _create_executors(self) -> None:
        self._live_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="live-pose")
        self._capture_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="capture")

    def _detect_pose(self, image: np.ndarray) -> Optional[PoseKeypointMap]:
        try:
            return self.detector.detect_pose(image)
        except Exception as e:
            logger.warning(f"Pose detection failed: {e}")
            return None

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return self._running and generation == self._generation

    @staticmethod
    def _emit(callback: Optional[Callable], value) -> None:
        if callback is None:
            return
        try:
            callback(value)
        except Exception as e:
            logger.error(f"Pipeline callback failed: {e}", exc_info=True)
