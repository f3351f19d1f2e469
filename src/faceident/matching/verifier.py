"""One-shot pairwise verification."""

from __future__ import annotations

from typing import TYPE_CHECKING

from faceident.matching.similarity import SimilarityScorer
from faceident.matching.types import VerificationResult

if TYPE_CHECKING:
    from faceident.matching.types import Descriptor


class Verifier:
    """Decides whether two descriptors belong to the same face."""

    def __init__(self, scorer: SimilarityScorer | None = None) -> None:
        self.scorer = scorer or SimilarityScorer()

    def verify(self, descriptor_a: Descriptor, descriptor_b: Descriptor, match_threshold: float) -> VerificationResult:
        similarity = self.scorer.similarity(descriptor_a, descriptor_b)
        return VerificationResult(
            is_match=similarity >= match_threshold,
            similarity=similarity,
            threshold=match_threshold,
        )


def verify(descriptor_a: Descriptor, descriptor_b: Descriptor, match_threshold: float) -> VerificationResult:
    """Verify two descriptors with the default scorer."""
    return Verifier().verify(descriptor_a, descriptor_b, match_threshold)
