"""Short pose history with age-based fading, for the live overlay only."""

from collections import deque
import logging
import threading
import time
from typing import Callable, Deque, List, Optional, Tuple

import numpy as np

from posestream.models.pose_data import PoseKeypointMap

from .overlay_drawing import LIVE_OVERLAY_STYLE, SkeletonStyle, draw_pose

logger = logging.getLogger(__name__)

AGE_ALPHA_STEP = 0.3


class TemporalOverlayBuffer:
    """
    Holds the last `capacity` pose observations.

    update(map) appends (evicting the oldest past capacity) and restarts the
    fade clock. update(None) leaves the buffer alone and starts the fade
    countdown; once `fade_duration` has elapsed since the last real
    observation the buffer is cleared.

    One writer (the live worker) calls update(); renderers read through
    snapshot(), which returns a copy taken under the lock.
    """

    def __init__(
        self,
        capacity: int = 3,
        fade_duration: float = 0.5,
        clock: Callable[[], float] = time.monotonic,
        style: SkeletonStyle = LIVE_OVERLAY_STYLE
    ):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        if fade_duration <= 0:
            raise ValueError(f"fade_duration must be positive, got {fade_duration}")

        self.capacity = capacity
        self.fade_duration = fade_duration
        self.style = style
        self._clock = clock
        self._lock = threading.Lock()
        self._observations: Deque[PoseKeypointMap] = deque(maxlen=capacity)
        self._last_update_time = clock()
        self._fading = False

    def __len__(self) -> int:
        with self._lock:
            self._expire_locked()
            return len(self._observations)

    @property
    def is_fading(self) -> bool:
        with self._lock:
            return self._fading

    def update(self, observation: Optional[PoseKeypointMap]) -> None:
        with self._lock:
            if observation is not None:
                self._observations.append(dict(observation))
                self._last_update_time = self._clock()
                self._fading = False
            else:
                self._fading = True
                self._expire_locked()

    def tick(self) -> None:
        """Advance the fade countdown; call periodically while fading."""
        with self._lock:
            self._expire_locked()

    def clear(self) -> None:
        with self._lock:
            self._observations.clear()
            self._fading = False

    def reconfigure(self, capacity: int, fade_duration: float) -> None:
        """Apply new limits, keeping the most recent observations."""
        if capacity < 1 or fade_duration <= 0:
            raise ValueError(f"Invalid overlay limits: capacity={capacity}, fade_duration={fade_duration}")
        with self._lock:
            self._observations = deque(self._observations, maxlen=capacity)
            self.capacity = capacity
            self.fade_duration = fade_duration

    def remaining_alpha(self) -> float:
        with self._lock:
            return self._remaining_alpha_locked()

    def snapshot(self) -> List[Tuple[PoseKeypointMap, float]]:
        """
        Copy of the buffered observations with their draw opacity.

        Ordered most recent first; alpha is
        remaining_alpha * (1 - index * 0.3), floored at 0.
        """
        with self._lock:
            self._expire_locked()
            remaining = self._remaining_alpha_locked()
            ordered = list(reversed(self._observations))

        return [
            (observation, max(0.0, remaining * (1.0 - index * AGE_ALPHA_STEP)))
            for index, observation in enumerate(ordered)
        ]

    def render(self, image: np.ndarray, threshold: float) -> np.ndarray:
        """Draw every buffered observation onto a copy of `image`, oldest first."""
        output = image.copy()
        for observation, alpha in reversed(self.snapshot()):
            if alpha <= 0:
                continue
            output = draw_pose(output, observation, self.style, threshold, alpha=alpha)
        return output

    def _elapsed_locked(self) -> float:
        return self._clock() - self._last_update_time

    def _remaining_alpha_locked(self) -> float:
        progress = min(self._elapsed_locked() / self.fade_duration, 1.0)
        return 1.0 - progress

    def _expire_locked(self) -> None:
        if self._elapsed_locked() <= self.fade_duration:
            return
        if self._observations:
            logger.debug(f"Clearing {len(self._observations)} stale overlay observations")
            self._observations.clear()
        self._fading = False
