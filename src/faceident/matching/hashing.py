"""Binary fingerprints for cheap candidate prefiltering.

Each bit says whether a leading descriptor component sits at or above the
mean of those components. Descriptors that agree in their leading
coordinates tend to land within a small Hamming distance of each other.
There is no collision guarantee; the hash only narrows the search.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from faceident.matching.types import Descriptor, FaceHash

DEFAULT_HASH_BITS: int = 64


class HashEncoder:
    """Derives a fixed-length bit string from a descriptor."""

    def __init__(self, hash_bits: int = DEFAULT_HASH_BITS) -> None:
        if hash_bits <= 0:
            raise ValueError(f"hash_bits must be positive, got {hash_bits}")
        self._hash_bits = hash_bits

    @property
    def hash_bits(self) -> int:
        """Return the configured maximum hash length."""
        return self._hash_bits

    def hash_length(self, dimension: int) -> int:
        """Return the hash length produced for a descriptor of ``dimension`` components."""
        return min(self._hash_bits, dimension)

    def encode(self, descriptor: Descriptor) -> FaceHash:
        """Encode the first ``min(hash_bits, len(descriptor))`` components.

        Components equal to the mean encode as ``"1"``, so a constant
        descriptor yields an all-ones hash. An empty descriptor yields ``""``.
        """
        values = np.asarray(descriptor, dtype=np.float64).ravel()[: self._hash_bits]
        if values.size == 0:
            return ""
        bits = values >= values.mean()
        return "".join("1" if bit else "0" for bit in bits)


def hamming_distance(hash1: FaceHash, hash2: FaceHash) -> int:
    """Count differing positions over the shorter of the two hashes."""
    return sum(1 for a, b in zip(hash1, hash2) if a != b)
