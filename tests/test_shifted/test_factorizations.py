import numpy as np
import pytest

from shiftedprox.shifted.linalg import (
    FactorStatus,
    apply_regularized_gram,
    augmented_qr,
    forward_solve,
    gram_cholesky,
    solve_factored,
)


def test_gram_cholesky_full_rank(rng):
    A = rng.standard_normal((3, 5))
    fact = gram_cholesky(A)
    assert fact.ok
    assert fact.status is FactorStatus.OK
    assert np.allclose(fact.lower @ fact.lower.T, A @ A.T)
    assert np.allclose(np.triu(fact.lower, 1), 0.0)


def test_gram_cholesky_regularized(rng):
    A = rng.standard_normal((3, 4))
    fact = gram_cholesky(A, alpha=0.5)
    assert fact.ok
    assert fact.alpha == 0.5
    assert np.allclose(fact.lower @ fact.lower.T, A @ A.T + 0.5 * np.eye(3))


def test_gram_cholesky_reports_duplicated_rows():
    A = np.array([[1.0, 0.0], [1.0, 0.0]])
    fact = gram_cholesky(A)
    assert not fact.ok
    assert fact.status is FactorStatus.SINGULAR
    assert fact.lower is None


def test_gram_cholesky_reports_more_rows_than_columns():
    A = np.array([[1.0], [2.0], [3.0]])
    assert gram_cholesky(A).status is FactorStatus.SINGULAR
    assert augmented_qr(A).status is FactorStatus.SINGULAR


def test_augmented_qr_matches_normal_equations(rng):
    A = rng.standard_normal((4, 6))
    for alpha in (0.0, 0.3, 10.0):
        fact = augmented_qr(A, alpha)
        assert fact.ok
        assert np.all(np.diag(fact.lower) > 0.0)
        assert np.allclose(fact.lower @ fact.lower.T, A @ A.T + alpha * np.eye(4))


def test_augmented_qr_reports_duplicated_rows():
    A = np.array([[1.0, 0.0], [1.0, 0.0]])
    assert augmented_qr(A).status is FactorStatus.SINGULAR
    assert augmented_qr(A, alpha=1.0).ok


def test_non_finite_input_propagates():
    A = np.array([[np.nan, 1.0], [0.0, 1.0]])
    with pytest.raises(ValueError):
        gram_cholesky(A)
    with pytest.raises(ValueError):
        augmented_qr(A)


def test_solves_with_factor(rng):
    A = rng.standard_normal((3, 5))
    rhs = rng.standard_normal(3)
    fact = gram_cholesky(A, alpha=0.1)
    out = np.empty(3)
    sol = solve_factored(fact, rhs, out=out)
    assert sol is out
    assert np.allclose(apply_regularized_gram(A, 0.1, sol), rhs)
    w = forward_solve(fact, sol)
    assert np.allclose(fact.lower @ w, sol)
