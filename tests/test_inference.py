"""Tests for the matching worker pool."""

from __future__ import annotations

import math

import pytest

from faceident.config import Settings
from faceident.matching.hashing import HashEncoder
from faceident.matching.matcher import Matcher
from faceident.matching.types import FaceRecord
from faceident.matching.verifier import Verifier
from faceident.ml.inference import MatchingPool


def _make_pool(max_concurrent: int = 1, **kwargs: float) -> MatchingPool:
    return MatchingPool(Settings(max_concurrent=max_concurrent), Matcher(), Verifier(), **kwargs)


def _record(face_id: str, cosine: float) -> FaceRecord[str]:
    descriptor = (cosine, math.sqrt(1.0 - cosine * cosine))
    return FaceRecord(
        face_id=face_id,
        descriptor=descriptor,
        hash=HashEncoder().encode(descriptor),
        confidence=0.9,
        timestamp=0,
        user_data=face_id,
    )


class TestMatchingPool:
    async def test_identify_runs_matcher(self) -> None:
        pool = _make_pool()
        try:
            records = [_record("a", 0.9), _record("b", 0.4)]
            result = await pool.identify([1.0, 0.0], 0.8, records, 0.6)

            assert result.match_found is True
            assert result.best_match is not None
            assert result.best_match.face_id == "a"
            assert pool.records_scored == 2
            assert pool.active_count == 0
            assert pool.queue_depth == 0
        finally:
            pool.shutdown()

    async def test_verify_runs_verifier(self) -> None:
        pool = _make_pool()
        try:
            result = await pool.verify([1.0, 0.0], [0.8, 0.6], 0.5)
            assert result.is_match is True
            assert result.similarity == pytest.approx(0.8)
            assert pool.records_scored == 0
        finally:
            pool.shutdown()

    async def test_submit_propagates_exceptions(self) -> None:
        def boom() -> None:
            raise ValueError("bad input")

        pool = _make_pool()
        try:
            with pytest.raises(ValueError, match="bad input"):
                await pool.submit(boom)
            assert pool.active_count == 0
        finally:
            pool.shutdown()

    async def test_saturated_pool_times_out(self) -> None:
        pool = _make_pool(queue_timeout=0.05)
        await pool._slots.acquire()
        try:
            with pytest.raises(TimeoutError):
                await pool.verify([1.0], [1.0], 0.5)
            assert pool.queue_depth == 0
            assert pool.active_count == 0
        finally:
            pool._slots.release()
            pool.shutdown()
