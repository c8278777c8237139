import math

import numpy as np
import pytest

from src.face_attendance.face_attendance.biometrics.comparator import euclidean_distance, is_match


def test_identical_embeddings_have_zero_distance():
    v = [0.1] * 128
    assert euclidean_distance(v, np.asarray(v)) == 0.0
    assert is_match(v, v)


@pytest.mark.parametrize("seed", [0, 1, 7, 42])
def test_distance_is_symmetric(seed):
    rng = np.random.default_rng(seed)
    a = rng.normal(size=128)
    b = rng.normal(size=128)
    assert euclidean_distance(a, b) == euclidean_distance(b, a)
    assert euclidean_distance(a, a) == 0.0


def test_distance_at_threshold_is_a_match():
    a = np.zeros(128)
    b = np.zeros(128)
    b[0] = 0.5
    assert euclidean_distance(a, b) == 0.5
    assert is_match(a, b, threshold=0.5)


def test_distance_above_threshold_is_rejected():
    a = np.zeros(128)
    b = np.zeros(128)
    b[0] = 0.51
    assert not is_match(a, b, threshold=0.5)


def test_missing_or_mismatched_vectors_never_match():
    assert euclidean_distance(None, [0.0] * 128) == math.inf
    assert euclidean_distance([], []) == math.inf
    assert euclidean_distance([0.0] * 128, [0.0] * 127) == math.inf
    assert not is_match([0.0] * 128, [0.0] * 64, threshold=1e9)


def test_nan_distance_fails_closed():
    a = np.zeros(128)
    b = np.zeros(128)
    b[3] = float("nan")
    assert euclidean_distance(a, b) == math.inf
    assert not is_match(a, b)
