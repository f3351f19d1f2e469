"""Build storable face records from descriptors."""

from __future__ import annotations

import secrets
import string
import time
from typing import TYPE_CHECKING, TypeVar

from faceident.matching.similarity import as_vector
from faceident.matching.types import FaceRecord

if TYPE_CHECKING:
    from faceident.matching.hashing import HashEncoder
    from faceident.matching.types import Descriptor

T = TypeVar("T")

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LENGTH = 9


def now_ms() -> int:
    """Return the current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def new_face_id(timestamp: int) -> str:
    """Return an id of the form ``face_<timestamp>_<9 base36 chars>``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_SUFFIX_LENGTH))
    return f"face_{timestamp}_{suffix}"


def build_record(
    descriptor: Descriptor,
    confidence: float,
    encoder: HashEncoder,
    user_data: T | None = None,
    *,
    timestamp: int | None = None,
) -> FaceRecord[T]:
    """Create a record the caller can persist and later pass to the matcher.

    The hash is produced by ``encoder``; records must be matched with an
    encoder of the same configuration for the prefilter to be meaningful.
    """
    created = now_ms() if timestamp is None else timestamp
    values = tuple(as_vector(descriptor).tolist())
    return FaceRecord(
        face_id=new_face_id(created),
        descriptor=values,
        hash=encoder.encode(values),
        confidence=confidence,
        timestamp=created,
        user_data=user_data,
    )
