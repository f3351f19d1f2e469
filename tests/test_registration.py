"""Tests for building storable face records."""

from __future__ import annotations

import re
from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from faceident.matching.hashing import HashEncoder
from faceident.matching.registration import build_record, new_face_id, now_ms

FACE_ID_PATTERN = re.compile(r"^face_(\d+)_[0-9a-z]{9}$")


class TestFaceId:
    def test_format(self) -> None:
        face_id = new_face_id(1_700_000_000_123)
        match = FACE_ID_PATTERN.match(face_id)
        assert match is not None
        assert match.group(1) == "1700000000123"

    def test_ids_are_unique(self) -> None:
        ids = {new_face_id(0) for _ in range(500)}
        assert len(ids) == 500


class TestBuildRecord:
    def test_record_fields(self) -> None:
        encoder = HashEncoder()
        descriptor = np.random.default_rng(3).random(128).astype(np.float32)

        record = build_record(descriptor, 0.92, encoder, {"user": 42}, timestamp=1_700_000_000_000)

        assert FACE_ID_PATTERN.match(record.face_id)
        assert record.face_id.startswith("face_1700000000000_")
        assert len(record.descriptor) == 128
        assert all(isinstance(v, float) for v in record.descriptor)
        assert record.hash == encoder.encode(descriptor)
        assert len(record.hash) == 64
        assert record.confidence == 0.92
        assert record.timestamp == 1_700_000_000_000
        assert record.user_data == {"user": 42}

    def test_timestamp_defaults_to_now(self) -> None:
        before = now_ms()
        record = build_record([0.1, 0.2], 0.5, HashEncoder())
        after = now_ms()
        assert before <= record.timestamp <= after
        assert record.user_data is None

    def test_record_is_immutable(self) -> None:
        record = build_record([0.1, 0.2], 0.5, HashEncoder())
        with pytest.raises(FrozenInstanceError):
            record.confidence = 1.0  # type: ignore[misc]

    def test_descriptor_is_copied(self) -> None:
        descriptor = [0.1, 0.2, 0.3]
        record = build_record(descriptor, 0.5, HashEncoder())
        descriptor[0] = 9.0
        assert record.descriptor[0] == pytest.approx(0.1)
