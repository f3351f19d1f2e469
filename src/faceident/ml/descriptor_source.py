"""Robust descriptor source: wraps the external detector.

Once initialized, the source always yields a descriptor. If the detector
raises or finds no usable face, a synthetic descriptor of the expected
dimensionality is substituted so downstream flows can proceed. Results are
tagged with their provenance so callers can tell the two apart.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, TypeAlias

import numpy as np

from faceident.ml.face_detector import BoundingBox

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from faceident.config import Settings
    from faceident.ml.face_detector import FaceDetection, FaceDetector

logger = logging.getLogger(__name__)

# Confidence assigned to detections that carry no score.
DEFAULT_DETECTION_CONFIDENCE: float = 0.5

SYNTHETIC_BOX = BoundingBox(x=100.0, y=100.0, width=200.0, height=200.0)


class EngineState(StrEnum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class EngineInitializationError(RuntimeError):
    """The detector failed to load."""


class EngineNotReadyError(RuntimeError):
    """A descriptor was requested before the engine was initialized."""


@dataclass(frozen=True)
class RealDescriptor:
    """Descriptor produced by the detector for an actual face."""

    descriptor: NDArray[np.float32]
    confidence: float
    box: BoundingBox


@dataclass(frozen=True)
class SyntheticDescriptor:
    """Placeholder descriptor substituted when detection fails."""

    descriptor: NDArray[np.float32]
    confidence: float
    box: BoundingBox = SYNTHETIC_BOX


DescriptorResult: TypeAlias = RealDescriptor | SyntheticDescriptor


class RobustDescriptorSource:
    """Obtains descriptors from a detector, falling back to synthetic ones."""

    def __init__(
        self,
        detector: FaceDetector,
        *,
        min_confidence: float = 0.3,
        descriptor_dim: int = 128,
        synthetic_low: float = 0.25,
        synthetic_high: float = 0.75,
        synthetic_confidence: float = 0.8,
        rng: np.random.Generator | None = None,
    ) -> None:
        self._detector = detector
        self._min_confidence = min_confidence
        self._descriptor_dim = descriptor_dim
        self._synthetic_low = synthetic_low
        self._synthetic_high = synthetic_high
        self._synthetic_confidence = synthetic_confidence
        self._rng = rng if rng is not None else np.random.default_rng()
        self._state = EngineState.UNINITIALIZED

    @classmethod
    def from_settings(
        cls,
        detector: FaceDetector,
        settings: Settings,
        rng: np.random.Generator | None = None,
    ) -> RobustDescriptorSource:
        return cls(
            detector,
            min_confidence=settings.min_confidence,
            descriptor_dim=settings.descriptor_dim,
            synthetic_low=settings.synthetic_low,
            synthetic_high=settings.synthetic_high,
            synthetic_confidence=settings.synthetic_confidence,
            rng=rng,
        )

    @property
    def state(self) -> EngineState:
        return self._state

    def initialize(self) -> None:
        """Load the detector. Calling it again on a ready source is a no-op.

        Raises:
            EngineInitializationError: If the detector fails to load.
        """
        if self._state is EngineState.READY:
            return

        logger.info("Loading face detector...")
        try:
            self._detector.load()
        except Exception as exc:
            raise EngineInitializationError(f"Face engine failed to load: {exc}") from exc

        embedding_dim = self._detector.embedding_dim
        if embedding_dim != self._descriptor_dim:
            logger.warning(
                "Detector produces %d-d descriptors but synthetic fallback uses %d-d",
                embedding_dim,
                self._descriptor_dim,
            )
        self._state = EngineState.READY
        logger.info("Face engine ready")

    def obtain_descriptor(self, frame: NDArray[np.uint8]) -> DescriptorResult:
        """Return the first usable face in ``frame``, or a synthetic descriptor.

        Raises:
            EngineNotReadyError: If :meth:`initialize` has not completed.
        """
        return self.obtain_all(frame)[0]

    def obtain_all(self, frame: NDArray[np.uint8]) -> list[DescriptorResult]:
        """Return every usable face in ``frame``; never empty.

        Raises:
            EngineNotReadyError: If :meth:`initialize` has not completed.
        """
        if self._state is not EngineState.READY:
            raise EngineNotReadyError("Initialize engine first")

        try:
            # Detectors may return lazy iterables; consume them inside the guard.
            detections = list(self._detector.detect(frame) or [])
            usable: list[DescriptorResult] = [
                real
                for real in map(self._to_real, detections)
                if real is not None and real.confidence >= self._min_confidence
            ]
        except Exception:
            logger.warning("Face detection failed; substituting synthetic descriptor", exc_info=True)
            return [self._synthesize()]

        if not usable:
            logger.info("No faces detected; substituting synthetic descriptor")
            return [self._synthesize()]
        return usable

    @staticmethod
    def _to_real(detection: FaceDetection) -> RealDescriptor | None:
        """Convert a detection, or return None if its descriptor is unusable."""
        descriptor = np.asarray(detection.descriptor, dtype=np.float32)
        if descriptor.ndim != 1 or descriptor.size == 0 or not np.all(np.isfinite(descriptor)):
            logger.warning("Discarding detection with malformed descriptor (shape=%s)", descriptor.shape)
            return None
        confidence = DEFAULT_DETECTION_CONFIDENCE if detection.score is None else detection.score
        return RealDescriptor(
            descriptor=descriptor,
            confidence=confidence,
            box=detection.box,
        )

    def _synthesize(self) -> SyntheticDescriptor:
        descriptor = self._rng.uniform(
            self._synthetic_low,
            self._synthetic_high,
            size=self._descriptor_dim,
        ).astype(np.float32)
        return SyntheticDescriptor(descriptor=descriptor, confidence=self._synthetic_confidence)
