import numpy as np
import pytest

from shiftedprox.norms import NormL2


def test_norm_l2_value():
    h = NormL2(2.0)
    assert h(np.array([3.0, 4.0])) == pytest.approx(10.0)


def test_norm_l2_rejects_non_positive_weight():
    with pytest.raises(ValueError):
        NormL2(0.0)
    with pytest.raises(ValueError):
        NormL2(-1.0)


def test_norm_l2_prox_shrinks_towards_origin():
    h = NormL2(1.0)
    q = np.array([3.0, 4.0])
    y = h.prox(q, 1.0)
    assert np.allclose(y, q * (1.0 - 1.0 / 5.0))


def test_norm_l2_prox_inside_ball_is_zero():
    h = NormL2(1.0)
    y = h.prox(np.array([0.3, -0.4]), 1.0)
    assert np.array_equal(y, np.zeros(2))


def test_norm_l2_prox_writes_into_out():
    h = NormL2(0.5)
    out = np.empty(2)
    result = h.prox(np.array([2.0, 0.0]), 2.0, out=out)
    assert result is out
    assert np.allclose(out, [1.0, 0.0])
