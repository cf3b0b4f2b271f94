import math

import numpy as np
import pytest

from metrics import bits_per_byte, compression_ratio, entropy, redundancy


def test_entropy_uniform_and_single():
    assert entropy(np.ones(256)) == pytest.approx(8.0)
    f = np.zeros(256)
    f[65] = 42
    assert entropy(f) == 0.0
    assert entropy(np.zeros(256)) == 0.0


def test_entropy_two_to_one():
    f = np.zeros(256)
    f[0], f[1] = 2, 1
    expected = -(2 / 3) * math.log2(2 / 3) - (1 / 3) * math.log2(1 / 3)
    assert entropy(f) == pytest.approx(expected)


def test_redundancy_nonnegative_for_huffman_lengths():
    f = np.zeros(256)
    f[ord("A")], f[ord("B")], f[ord("C")] = 1, 1, 1
    lengths = np.zeros(256)
    lengths[ord("A")], lengths[ord("B")], lengths[ord("C")] = 2, 2, 1
    r = redundancy(f, lengths)
    assert r == pytest.approx(5 / 3 - math.log2(3))
    assert r >= 0


def test_ratio_and_rate():
    assert compression_ratio(100, 25) == 4.0
    assert compression_ratio(10, 0) == float("inf")
    assert bits_per_byte(5, 3) == pytest.approx(5 / 3)
    assert bits_per_byte(0, 0) == 0.0
