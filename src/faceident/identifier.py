"""Frame-level face identification flows.

:class:`FaceIdentifier` ties the descriptor source to the matching core:
register a face from a frame, identify a frame against stored records, and
verify two stored records against each other. Storage stays with the caller.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from faceident.matching.matcher import Matcher
from faceident.matching.registration import build_record
from faceident.matching.verifier import Verifier
from faceident.ml.descriptor_source import RobustDescriptorSource

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    import numpy as np
    from numpy.typing import NDArray

    from faceident.config import Settings
    from faceident.matching.hashing import HashEncoder
    from faceident.matching.types import FaceRecord, IdentificationResult, VerificationResult
    from faceident.ml.face_detector import FaceDetector

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FaceIdentifier:
    """Registers, identifies and verifies faces against caller-owned records."""

    def __init__(
        self,
        source: RobustDescriptorSource,
        matcher: Matcher,
        *,
        match_threshold: float = 0.6,
        verifier: Verifier | None = None,
    ) -> None:
        self.source = source
        self.matcher = matcher
        self.match_threshold = match_threshold
        self.verifier = verifier or Verifier(matcher.scorer)

    @classmethod
    def from_settings(
        cls,
        detector: FaceDetector,
        settings: Settings,
        rng: np.random.Generator | None = None,
    ) -> FaceIdentifier:
        return cls(
            RobustDescriptorSource.from_settings(detector, settings, rng=rng),
            Matcher.from_settings(settings),
            match_threshold=settings.match_threshold,
        )

    @property
    def encoder(self) -> HashEncoder:
        return self.matcher.encoder

    def initialize(self) -> None:
        self.source.initialize()

    def register_face(self, frame: NDArray[np.uint8], user_data: T | None = None) -> FaceRecord[T]:
        """Detect the first face in ``frame`` and return a record for storage."""
        logger.info("Registering face...")
        result = self.source.obtain_descriptor(frame)
        return build_record(result.descriptor, result.confidence, self.encoder, user_data)

    def batch_register_faces(self, frames: Iterable[NDArray[np.uint8]]) -> list[FaceRecord[Any] | None]:
        """Register each frame; a frame that fails yields ``None`` in its slot."""
        records: list[FaceRecord[Any] | None] = []
        for index, frame in enumerate(frames):
            try:
                records.append(self.register_face(frame))
            except Exception:
                logger.warning("Batch registration skipped frame %d", index, exc_info=True)
                records.append(None)
        return records

    def identify_face(
        self,
        frame: NDArray[np.uint8],
        records: Sequence[FaceRecord[T]],
    ) -> IdentificationResult[T]:
        """Identify the first face in ``frame`` against ``records``.

        An empty collection returns a no-match result without running detection.
        """
        logger.info("Identifying face against %d records...", len(records))
        if not records:
            return self.matcher.identify((), 0.0, records, self.match_threshold)

        result = self.source.obtain_descriptor(frame)
        return self.matcher.identify(result.descriptor, result.confidence, records, self.match_threshold)

    def verify_faces(self, record_a: FaceRecord[Any], record_b: FaceRecord[Any]) -> VerificationResult:
        """Compare two stored records using the configured match threshold."""
        return self.verifier.verify(record_a.descriptor, record_b.descriptor, self.match_threshold)
