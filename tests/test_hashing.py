"""Tests for descriptor hashing and Hamming distance."""

from __future__ import annotations

import numpy as np
import pytest

from faceident.matching.hashing import HashEncoder, hamming_distance


class TestHashEncoder:
    def test_bits_follow_mean_threshold(self) -> None:
        assert HashEncoder().encode([1.0, 2.0, 3.0, 4.0]) == "0011"

    def test_value_equal_to_mean_sets_bit(self) -> None:
        # mean of (0, 1, 2) is 1
        assert HashEncoder().encode([0.0, 1.0, 2.0]) == "011"

    def test_constant_descriptor_is_all_ones(self) -> None:
        assert HashEncoder().encode([0.5] * 16) == "1" * 16

    def test_order_is_preserved(self) -> None:
        assert HashEncoder().encode([4.0, 1.0, 3.0, 2.0]) == "1010"

    def test_only_leading_components_are_used(self) -> None:
        encoder = HashEncoder(hash_bits=4)
        # Trailing values would shift the mean if they were included.
        assert encoder.encode([1.0, 2.0, 3.0, 4.0, 100.0, 100.0]) == "0011"

    @pytest.mark.parametrize(("hash_bits", "dimension"), [(64, 128), (64, 10), (8, 8), (1, 128), (200, 128)])
    def test_hash_length_is_min_of_bits_and_dimension(self, hash_bits: int, dimension: int) -> None:
        descriptor = np.random.default_rng(0).random(dimension)
        encoder = HashEncoder(hash_bits=hash_bits)
        assert len(encoder.encode(descriptor)) == min(hash_bits, dimension)
        assert encoder.hash_length(dimension) == min(hash_bits, dimension)

    def test_encoding_is_deterministic(self) -> None:
        descriptor = np.random.default_rng(7).random(128).astype(np.float32)
        encoder = HashEncoder()
        assert encoder.encode(descriptor) == encoder.encode(descriptor)
        assert encoder.encode(descriptor) == encoder.encode(descriptor.tolist())

    def test_empty_descriptor_gives_empty_hash(self) -> None:
        assert HashEncoder().encode([]) == ""

    @pytest.mark.parametrize("hash_bits", [0, -1])
    def test_non_positive_bits_rejected(self, hash_bits: int) -> None:
        with pytest.raises(ValueError, match="hash_bits"):
            HashEncoder(hash_bits=hash_bits)


class TestHammingDistance:
    def test_identical_hashes(self) -> None:
        assert hamming_distance("1010", "1010") == 0

    def test_counts_differing_positions(self) -> None:
        assert hamming_distance("1010", "1001") == 2
        assert hamming_distance("0000", "1111") == 4

    def test_compares_shorter_length_only(self) -> None:
        assert hamming_distance("1111", "11") == 0
        assert hamming_distance("01", "1111") == 1

    def test_empty_hash(self) -> None:
        assert hamming_distance("", "1010") == 0
