"""Mathematic utilities.

Integer linear algebra used to identify superlattices: enumeration and
computation of Hermite normal forms.
"""

__author__ = "Luis Barroso-Luque, Fengyu Xie"

from itertools import product

import numpy as np

# Global numerical tolerance in this module.
NUM_TOL = 1e-6


def yield_hermite_normal_forms(determinant):
    """Yield all hermite normal form matrices with given determinant.

    Matrices are lower triangular, [[a, 0, 0], [b, c, 0], [d, e, f]] with
    0 <= b < c and 0 <= d, e < f, the same form returned by
    :func:`hermite_normal_form`.

    Args:
        determinant (int):
            determinant of hermite normal forms to be yielded

    Yields:
        ndarray: hermite normal form matrix with given determinant
    """
    for a in filter(lambda x: determinant % x == 0, range(1, determinant + 1)):
        quotient = determinant // a
        for c in filter(lambda x: quotient % x == 0, range(1, determinant // a + 1)):
            f = quotient // c
            for b, d, e in product(range(0, c), range(0, f), range(0, f)):
                yield np.array([[a, 0, 0], [b, c, 0], [d, e, f]], dtype=int)


def gcdex(a, b):
    """Extend Euclidean Algorithm.

    Returns:
        tuple: x, y, g such that x * a + y * b = g = gcd(a, b) (up to sign)
    """
    if a == 0:
        return 0, 1, b

    x1, y1, g = gcdex(b % a, a)
    x = y1 - (b // a) * x1
    y = x1

    return x, y, g


def hermite_normal_form(matrix):
    """Compute the lower triangular (column style) hermite normal form.

    The returned matrix H satisfies H = matrix @ U for some unimodular U
    (up to dropping zero columns), so two full rank matrices have the same
    hermite normal form iff their columns generate the same lattice.

    Args:
        matrix (ArrayLike):
            integer matrix of shape (n, k) with k >= n and rank n. The columns
            are the generators of a lattice.

    Returns:
        ndarray: n x n lower triangular matrix with positive diagonal and
            entries left of the diagonal in [0, diagonal)
    """
    hnf = round_to_integer(matrix)
    if hnf.ndim != 2 or hnf.shape[1] < hnf.shape[0]:
        raise ValueError(
            f"Matrix of shape {hnf.shape} must have at least as many columns as rows."
        )

    nrows, ncols = hnf.shape
    for i in range(nrows):
        for j in range(i + 1, ncols):
            if hnf[i, j] == 0:
                continue
            x, y, g = gcdex(int(hnf[i, i]), int(hnf[i, j]))
            a, b = int(hnf[i, i]) // g, int(hnf[i, j]) // g
            col_i, col_j = hnf[:, i].copy(), hnf[:, j].copy()
            hnf[:, i] = x * col_i + y * col_j
            hnf[:, j] = -b * col_i + a * col_j

        if hnf[i, i] < 0:
            hnf[:, i] *= -1
        if hnf[i, i] == 0:
            raise ValueError(f"Matrix {matrix} does not have full row rank.")

        for j in range(i):
            hnf[:, j] -= (hnf[i, j] // hnf[i, i]) * hnf[:, i]

    return hnf[:, :nrows]


def round_to_integer(matrix, tol=NUM_TOL):
    """Round an array to integers, raising if it is not integer valued.

    Args:
        matrix (ArrayLike):
            array of (nearly) integer values
        tol (float): optional
            absolute tolerance to consider a value an integer.

    Returns:
        ndarray: array of ints
    """
    matrix = np.asarray(matrix)
    rounded = np.round(matrix)
    if not np.allclose(matrix, rounded, atol=tol):
        raise ValueError(f"Array {matrix.tolist()} is not integer valued.")
    return rounded.astype(int)


def is_unimodular(matrix, tol=NUM_TOL):
    """Check if a square matrix is integer valued with determinant +/-1."""
    matrix = np.asarray(matrix)
    if not np.allclose(matrix, np.round(matrix), atol=tol):
        return False
    return abs(abs(np.linalg.det(matrix)) - 1) < tol
