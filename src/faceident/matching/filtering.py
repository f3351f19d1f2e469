"""Hash-based candidate prefiltering."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

from faceident.matching.hashing import hamming_distance

if TYPE_CHECKING:
    from collections.abc import Sequence

    from faceident.matching.types import FaceHash, FaceRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_HAMMING_THRESHOLD: int = 8
DEFAULT_CUTOVER: int = 1000


class CandidateFilter:
    """Narrows a record collection by Hamming distance to the query hash.

    Collections no larger than ``cutover`` pass through untouched. Above it,
    only records within ``hamming_threshold`` differing bits survive. This
    trades a little recall for speed; it never changes how survivors score.
    """

    def __init__(
        self,
        hamming_threshold: int = DEFAULT_HAMMING_THRESHOLD,
        cutover: int = DEFAULT_CUTOVER,
    ) -> None:
        if hamming_threshold < 0:
            raise ValueError(f"hamming_threshold must be non-negative, got {hamming_threshold}")
        if cutover < 0:
            raise ValueError(f"cutover must be non-negative, got {cutover}")
        self.hamming_threshold = hamming_threshold
        self.cutover = cutover

    def filter(self, records: Sequence[FaceRecord[T]], query_hash: FaceHash) -> list[FaceRecord[T]]:
        """Return the surviving records in their original order."""
        if len(records) <= self.cutover:
            return list(records)

        survivors = [
            record for record in records if hamming_distance(record.hash, query_hash) <= self.hamming_threshold
        ]
        logger.debug(
            "Hash prefilter kept %d of %d records (threshold=%d)",
            len(survivors),
            len(records),
            self.hamming_threshold,
        )
        return survivors
