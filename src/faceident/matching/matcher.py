"""Identification: prefilter, score, rank and threshold-gate stored records."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

from faceident.matching.filtering import CandidateFilter
from faceident.matching.hashing import HashEncoder
from faceident.matching.similarity import SimilarityScorer, as_vector
from faceident.matching.types import IdentificationResult, MatchCandidate

if TYPE_CHECKING:
    from collections.abc import Sequence

    from faceident.config import Settings
    from faceident.matching.types import Descriptor, FaceRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TOP_K: int = 5


class Matcher:
    """Finds the stored record most similar to a query descriptor."""

    def __init__(
        self,
        encoder: HashEncoder | None = None,
        candidate_filter: CandidateFilter | None = None,
        scorer: SimilarityScorer | None = None,
        top_k: int = DEFAULT_TOP_K,
    ) -> None:
        if top_k < 1:
            raise ValueError(f"top_k must be at least 1, got {top_k}")
        self.encoder = encoder or HashEncoder()
        self.candidate_filter = candidate_filter or CandidateFilter()
        self.scorer = scorer or SimilarityScorer()
        self.top_k = top_k

    @classmethod
    def from_settings(cls, settings: Settings) -> Matcher:
        """Build a matcher from the configured hash, filter and ranking options."""
        return cls(
            encoder=HashEncoder(settings.hash_bits),
            candidate_filter=CandidateFilter(
                hamming_threshold=settings.hamming_threshold,
                cutover=settings.filter_cutover,
            ),
            top_k=settings.top_k,
        )

    def identify(
        self,
        query_descriptor: Descriptor,
        query_confidence: float,
        records: Sequence[FaceRecord[T]],
        match_threshold: float,
    ) -> IdentificationResult[T]:
        """Match ``query_descriptor`` against ``records``.

        Every survivor of the hash prefilter is scored. The best match is the
        first record reaching the highest similarity, reported only when that
        similarity is at least ``match_threshold``. The raw best similarity
        is returned either way.
        """
        if not records:
            return IdentificationResult(
                match_found=False,
                best_match=None,
                similarity=0.0,
                candidates=[],
                query_confidence=query_confidence,
            )

        query_vector = as_vector(query_descriptor)
        query = tuple(query_vector.tolist())
        query_hash = self.encoder.encode(query_vector)
        survivors = self.candidate_filter.filter(records, query_hash)

        scored: list[MatchCandidate[T]] = []
        best: MatchCandidate[T] | None = None
        for record in survivors:
            candidate = MatchCandidate(
                face_id=record.face_id,
                similarity=self.scorer.similarity(query_vector, record.descriptor),
                user_data=record.user_data,
            )
            scored.append(candidate)
            # Strict comparison keeps the first record on ties.
            if best is None or candidate.similarity > best.similarity:
                best = candidate

        global_max = best.similarity if best is not None else 0.0
        best_match = best if best is not None and global_max >= match_threshold else None

        # sorted() is stable with reverse=True, so ties keep iteration order.
        ranked = sorted(scored, key=lambda c: c.similarity, reverse=True)[: self.top_k]

        logger.debug(
            "Identified against %d records (%d survivors): best=%.4f, match=%s",
            len(records),
            len(survivors),
            global_max,
            best_match.face_id if best_match is not None else None,
        )
        return IdentificationResult(
            match_found=best_match is not None,
            best_match=best_match,
            similarity=global_max,
            candidates=ranked,
            query_descriptor=query,
            query_hash=query_hash,
            query_confidence=query_confidence,
        )
