import numpy as np

from mobility_core.mobility_math import linear_rescale, safe_reciprocal


def test_safe_reciprocal_zero_degree():
    out = safe_reciprocal([0, 1, 2, 4])
    assert out.tolist() == [0.0, 1.0, 0.5, 0.25]


def test_rescale_endpoints():
    out = linear_rescale([3.0, 5.0, 7.0])
    assert out[0] == 0.2
    assert out[-1] == 1.0
    assert np.isclose(out[1], 0.6)


def test_rescale_preserves_order():
    values = np.array([4.0, -1.0, 10.0, 2.5])
    out = linear_rescale(values)
    assert np.array_equal(np.argsort(out), np.argsort(values))


def test_rescale_degenerate():
    assert linear_rescale([2.0, 2.0, 2.0]).tolist() == [0.6, 0.6, 0.6]
    assert linear_rescale([9.0]).tolist() == [0.6]


def test_rescale_non_finite_falls_back():
    out = linear_rescale([1.0, np.nan, 3.0])
    assert out.tolist() == [0.6, 0.6, 0.6]


def test_rescale_custom_range():
    out = linear_rescale([0.0, 10.0], lo=0.0, hi=2.0, degenerate=1.0)
    assert out.tolist() == [0.0, 2.0]


def test_rescale_empty():
    assert linear_rescale([]).size == 0
