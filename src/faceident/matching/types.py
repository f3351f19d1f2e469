"""Value objects passed through the matching pipeline.

Records are owned by the caller. Nothing in :mod:`faceident.matching`
mutates them; results are built fresh for every call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeAlias, TypeVar

if TYPE_CHECKING:
    from collections.abc import Sequence

    import numpy as np
    from numpy.typing import NDArray

T = TypeVar("T")

Descriptor: TypeAlias = "Sequence[float] | NDArray[np.floating]"
"""Anything that behaves like an ordered sequence of floats."""

FaceHash: TypeAlias = str
"""Binary fingerprint encoded as a string of '0'/'1' characters."""


@dataclass(frozen=True)
class FaceRecord(Generic[T]):
    """A registered face, as stored by the caller."""

    face_id: str
    descriptor: tuple[float, ...]
    hash: FaceHash
    confidence: float
    timestamp: int
    user_data: T | None = None


@dataclass(frozen=True)
class MatchCandidate(Generic[T]):
    """A scored record produced during a single identification call."""

    face_id: str
    similarity: float
    user_data: T | None = None


@dataclass(frozen=True)
class IdentificationResult(Generic[T]):
    """Outcome of matching one query descriptor against a record collection.

    ``similarity`` is the best score seen, whether or not it cleared the
    threshold. ``candidates`` holds the top scores in descending order.
    """

    match_found: bool
    best_match: MatchCandidate[T] | None
    similarity: float
    candidates: list[MatchCandidate[T]] = field(default_factory=list)
    query_descriptor: tuple[float, ...] = ()
    query_hash: FaceHash = ""
    query_confidence: float = 0.0


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of comparing two descriptors directly."""

    is_match: bool
    similarity: float
    threshold: float
