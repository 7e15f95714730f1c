#!/usr/bin/env python3
"""
Tests for the Bounds search box.
"""

import numpy as np
import pytest

from PSO_ENGINE.Logs.logger import log_header, log_info, log_success
from PSO_ENGINE.PSO.Bounds import Bounds
from PSO_ENGINE.PSO.Errors import DimensionMismatch, InvalidBounds


def test_clamp_is_idempotent():
    log_header("=== Bounds Clamp Test ===", "test_bounds")
    bounds = Bounds([-1.0, 0.0, 5.0], [1.0, 10.0, 5.0])
    rng = np.random.default_rng(0)
    points = rng.normal(0, 20, size=(200, 3))

    for p in points:
        once = bounds.clamp(p)
        assert np.array_equal(bounds.clamp(once), once)
        assert bounds.contains(once)

    clamped_matrix = bounds.clamp(points)
    assert clamped_matrix.shape == points.shape
    assert np.array_equal(bounds.clamp(clamped_matrix), clamped_matrix)
    log_success("clamp(clamp(p)) == clamp(p) holds", "test_bounds")


def test_clamp_saturates_instead_of_wrapping():
    bounds = Bounds.from_pairs([(-10, 10), (0, 1)])
    assert np.array_equal(bounds.clamp([25.0, -3.0]), [10.0, 0.0])
    assert np.array_equal(bounds.clamp([-25.0, 0.5]), [-10.0, 0.5])


@pytest.mark.parametrize("lower, upper", [
    ([0.0, 1.0], [1.0, 0.5]),          # lower > upper in dimension 1
    ([0.0, 1.0], [1.0]),               # length mismatch
    ([], []),                          # no dimensions
    ([0.0, -np.inf], [1.0, 1.0]),      # non-finite
    (["a", 0.0], [1.0, 1.0]),          # not numeric
])
def test_invalid_bounds_rejected_at_construction(lower, upper):
    with pytest.raises(InvalidBounds):
        Bounds(lower, upper)


def test_invalid_pairs_rejected():
    with pytest.raises(InvalidBounds):
        Bounds.from_pairs([(0.0, 1.0), (2.0,)])
    with pytest.raises(InvalidBounds):
        Bounds.from_pairs([(3.0, 1.0)])


def test_invalid_bounds_is_a_value_error():
    with pytest.raises(ValueError):
        Bounds([1.0], [0.0])


def test_sample_stays_inside():
    bounds = Bounds.from_pairs([(0.05, 2.0), (0.25, 1.3), (2.0, 15.0)])
    rng = np.random.default_rng(42)
    samples = np.array([bounds.sample(rng) for _ in range(500)])
    log_info(f"Sample min {samples.min(axis=0)}, max {samples.max(axis=0)}", "test_bounds")
    assert np.all(samples >= bounds.lower)
    assert np.all(samples <= bounds.upper)


def test_degenerate_dimension_is_allowed():
    bounds = Bounds([2.0, -1.0], [2.0, 1.0])
    rng = np.random.default_rng(1)
    assert bounds.sample(rng)[0] == 2.0


def test_wrong_dimension_raises():
    bounds = Bounds.uniform(-1.0, 1.0, 3)
    with pytest.raises(DimensionMismatch):
        bounds.clamp([0.0, 0.0])
    with pytest.raises(DimensionMismatch):
        bounds.contains(np.zeros((4, 2)))


def test_accessors():
    bounds = Bounds.uniform(-5.0, 5.0, 2)
    assert bounds.dim == 2
    assert len(bounds) == 2
    assert bounds.as_pairs() == [(-5.0, 5.0), (-5.0, 5.0)]
    assert np.array_equal(bounds.span, [10.0, 10.0])
    assert Bounds.coerce([(-5, 5), (-5, 5)]) == bounds
    assert Bounds.coerce(bounds) is bounds
