"""Tests for the Hamming-distance candidate prefilter."""

from __future__ import annotations

import pytest

from faceident.matching.filtering import CandidateFilter
from faceident.matching.types import FaceRecord

QUERY_HASH = "0" * 64


def _record(face_id: str, face_hash: str) -> FaceRecord[None]:
    return FaceRecord(
        face_id=face_id,
        descriptor=(1.0, 0.0),
        hash=face_hash,
        confidence=0.9,
        timestamp=0,
    )


def _hash_at_distance(distance: int) -> str:
    return "1" * distance + "0" * (64 - distance)


def _far_records(count: int) -> list[FaceRecord[None]]:
    return [_record(f"far_{i}", _hash_at_distance(64)) for i in range(count)]


class TestCandidateFilter:
    def test_small_collection_passes_through(self) -> None:
        records = _far_records(10)
        assert CandidateFilter().filter(records, QUERY_HASH) == records

    def test_exactly_cutover_returns_everything(self) -> None:
        records = _far_records(1000)
        survivors = CandidateFilter().filter(records, QUERY_HASH)
        assert len(survivors) == 1000

    def test_above_cutover_keeps_only_near_hashes(self) -> None:
        near = [
            _record("exact", _hash_at_distance(0)),
            _record("edge", _hash_at_distance(8)),
            _record("outside", _hash_at_distance(9)),
        ]
        records = _far_records(998) + near
        assert len(records) == 1001

        survivors = CandidateFilter().filter(records, QUERY_HASH)

        assert [r.face_id for r in survivors] == ["exact", "edge"]

    def test_preserves_input_order(self) -> None:
        records = _far_records(1000)
        records.insert(3, _record("first", _hash_at_distance(1)))
        records.append(_record("second", _hash_at_distance(2)))
        records.insert(0, _record("zeroth", _hash_at_distance(5)))

        survivors = CandidateFilter().filter(records, QUERY_HASH)

        assert [r.face_id for r in survivors] == ["zeroth", "first", "second"]

    def test_custom_threshold_and_cutover(self) -> None:
        records = [_record(str(d), _hash_at_distance(d)) for d in range(6)]
        survivors = CandidateFilter(hamming_threshold=2, cutover=3).filter(records, QUERY_HASH)
        assert [r.face_id for r in survivors] == ["0", "1", "2"]

    def test_returns_new_list(self) -> None:
        records = _far_records(3)
        survivors = CandidateFilter().filter(records, QUERY_HASH)
        assert survivors is not records

    def test_rejects_negative_settings(self) -> None:
        with pytest.raises(ValueError, match="hamming_threshold"):
            CandidateFilter(hamming_threshold=-1)
        with pytest.raises(ValueError, match="cutover"):
            CandidateFilter(cutover=-1)
