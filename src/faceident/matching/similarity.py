"""Cosine similarity between descriptors, clamped to [0, 1]."""

from __future__ import annotations

import warnings
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from faceident.matching.types import Descriptor


class DescriptorDimensionWarning(UserWarning):
    """Two descriptors of different lengths were compared."""


def as_vector(descriptor: Descriptor) -> NDArray[np.float64]:
    """Return ``descriptor`` as a flat float64 array."""
    return np.asarray(descriptor, dtype=np.float64).ravel()


def cosine_similarity(a: Descriptor, b: Descriptor) -> float:
    """Return the cosine similarity of ``a`` and ``b`` in ``[0, 1]``.

    Only the first ``min(len(a), len(b))`` components take part. A zero
    partial norm scores ``0.0``, and so does any negative cosine: opposite
    embeddings count as unrelated.

    Warns:
        DescriptorDimensionWarning: If the descriptors differ in length.
    """
    va = as_vector(a)
    vb = as_vector(b)
    if va.size != vb.size:
        warnings.warn(
            f"Comparing descriptors of different lengths ({va.size} vs {vb.size}); truncating to the shorter",
            DescriptorDimensionWarning,
            stacklevel=2,
        )
        n = min(va.size, vb.size)
        va = va[:n]
        vb = vb[:n]

    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    cosine = float(np.dot(va, vb)) / (norm_a * norm_b)
    return min(1.0, max(0.0, cosine))


class SimilarityScorer:
    """Scores descriptor pairs for the matcher and verifier."""

    def similarity(self, a: Descriptor, b: Descriptor) -> float:
        return cosine_similarity(a, b)
