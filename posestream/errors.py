"""Error types raised across the pipeline."""

from typing import Optional


class PoseStreamError(Exception):
    """Base class for all posestream errors."""


class DeviceUnavailableError(PoseStreamError):
    """No capture device could be opened. Fatal to pipeline start."""


class CompositingError(PoseStreamError):
    """An image-processing stage could not produce an output."""


class TransportError(PoseStreamError):
    """Remote classification failed before a result could be decoded."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
