"""
Pipeline configuration.

A Configuration is an immutable snapshot. The host UI writes a new snapshot
through ConfigurationStore.update(); workers read the snapshot valid at the
start of each cycle.
"""
from dataclasses import asdict, dataclass, replace
import logging
import os
import threading
from typing import Any, Dict

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Configuration:
    # Masking / classification
    confidence_threshold: float = 0.3
    blur_radius: float = 30.0
    preserve_faces: bool = True
    max_output_dimension: float = 640.0

    # Cadence
    capture_interval: float = 2.0  # seconds between still captures
    processing_fps: int = 10  # live frames classified per second

    # Live overlay
    fade_duration: float = 0.5  # seconds before stale overlay is cleared
    max_observations: int = 3

    def validate(self) -> "Configuration":
        """
        Check host-facing ranges.

        Raises:
            ValueError: if any value is outside its allowed range
        """
        if not 0.5 <= self.capture_interval <= 10.0:
            raise ValueError(f"capture_interval must be in [0.5, 10], got {self.capture_interval}")
        if not 1 <= self.processing_fps <= 30:
            raise ValueError(f"processing_fps must be in [1, 30], got {self.processing_fps}")
        if not 0.0 <= self.blur_radius <= 100.0:
            raise ValueError(f"blur_radius must be in [0, 100], got {self.blur_radius}")
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ValueError(f"confidence_threshold must be in [0, 1], got {self.confidence_threshold}")
        if self.max_output_dimension <= 0:
            raise ValueError(f"max_output_dimension must be positive, got {self.max_output_dimension}")
        if self.fade_duration <= 0:
            raise ValueError(f"fade_duration must be positive, got {self.fade_duration}")
        if self.max_observations < 1:
            raise ValueError(f"max_observations must be at least 1, got {self.max_observations}")
        return self

    @property
    def frame_interval(self) -> float:
        """Minimum seconds between processed live frames."""
        return 1.0 / self.processing_fps

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_env(cls) -> "Configuration":
        """Build a configuration from POSE_* environment variables."""
        defaults = cls()
        config = cls(
            confidence_threshold=float(os.getenv("POSE_CONFIDENCE_THRESHOLD", defaults.confidence_threshold)),
            blur_radius=float(os.getenv("POSE_BLUR_RADIUS", defaults.blur_radius)),
            preserve_faces=_env_bool("POSE_PRESERVE_FACES", defaults.preserve_faces),
            max_output_dimension=float(os.getenv("POSE_MAX_OUTPUT_DIMENSION", defaults.max_output_dimension)),
            capture_interval=float(os.getenv("POSE_CAPTURE_INTERVAL", defaults.capture_interval)),
            processing_fps=int(os.getenv("POSE_PROCESSING_FPS", defaults.processing_fps)),
            fade_duration=float(os.getenv("POSE_FADE_DURATION", defaults.fade_duration)),
            max_observations=int(os.getenv("POSE_MAX_OBSERVATIONS", defaults.max_observations)),
        )
        return config.validate()


class ConfigurationStore:
    """
    Holds the current Configuration snapshot.

    Snapshots are swapped whole under a lock, never mutated field by field.
    """

    def __init__(self, config: Configuration = None):
        self._lock = threading.Lock()
        self._config = (config or Configuration()).validate()

    def current(self) -> Configuration:
        with self._lock:
            return self._config

    def update(self, **changes: Any) -> Configuration:
        """
        Replace the snapshot with a copy carrying `changes`.

        Raises:
            ValueError: for unknown fields or out-of-range values; the
                previous snapshot stays in place
        """
        with self._lock:
            try:
                new_config = replace(self._config, **changes)
            except TypeError as e:
                raise ValueError(f"Unknown configuration field: {e}") from e
            new_config.validate()
            self._config = new_config
        logger.info(f"Configuration updated: {sorted(changes)}")
        return new_config
