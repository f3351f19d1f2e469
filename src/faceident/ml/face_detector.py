"""Face detector/embedder protocol.

The detector is an external collaborator: it finds faces in a frame and
produces one descriptor per face. faceident only consumes its output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray


@dataclass(frozen=True)
class BoundingBox:
    """Face bounding box in pixel space of the input frame."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class FaceDetection:
    """A detected face with its descriptor.

    ``score`` is None when the detector does not report a confidence.
    """

    descriptor: NDArray[np.float32]
    box: BoundingBox
    score: float | None = None


class FaceDetector(Protocol):
    """Protocol for face detection + embedding models."""

    @property
    def embedding_dim(self) -> int:
        """Return the descriptor dimensionality (e.g., 128)."""
        ...

    def load(self) -> None:
        """Load model weights. Called once before the first detection.

        Raises:
            Exception: Any loading failure; the caller wraps it.
        """
        ...

    def detect(self, frame: NDArray[np.uint8]) -> list[FaceDetection]:
        """Detect faces in a frame and embed each one.

        Args:
            frame: HxWx3 RGB uint8 array.

        Returns:
            Detections in detector order, possibly empty.
        """
        ...
