"""
Dense real and complex linear solvers for the MNA system.

Gaussian elimination with partial pivoting is the reference solver. An LU
path backed by scipy is available for transient runs that solve the same
matrix many times.
"""

import warnings
from typing import Optional, Tuple

import numpy as np
from scipy import linalg

from ..config import SINGULAR_PIVOT_TOLERANCE


def create_matrix(n: int) -> np.ndarray:
    return np.zeros((n, n), dtype=float)


def create_vector(n: int) -> np.ndarray:
    return np.zeros(n, dtype=float)


def create_complex_matrix(n: int) -> np.ndarray:
    return np.zeros((n, n), dtype=complex)


def create_complex_vector(n: int) -> np.ndarray:
    return np.zeros(n, dtype=complex)


def _eliminate(A: np.ndarray, b: np.ndarray, tolerance: float) -> Optional[np.ndarray]:
    n = len(b)
    a = np.array(A, dtype=A.dtype, copy=True)
    x = np.array(b, dtype=b.dtype, copy=True)

    for col in range(n):
        # Partial pivoting: bring the row with the largest magnitude into place
        pivot_row = col + int(np.argmax(np.abs(a[col:, col])))
        if abs(a[pivot_row, col]) < tolerance:
            return None
        if pivot_row != col:
            a[[col, pivot_row]] = a[[pivot_row, col]]
            x[[col, pivot_row]] = x[[pivot_row, col]]

        for row in range(col + 1, n):
            factor = a[row, col] / a[col, col]
            if factor != 0:
                a[row, col:] -= factor * a[col, col:]
                x[row] -= factor * x[col]

    solution = np.zeros(n, dtype=x.dtype)
    for row in range(n - 1, -1, -1):
        residual = x[row] - np.dot(a[row, row + 1:], solution[row + 1:])
        solution[row] = residual / a[row, row]
    return solution


def gaussian_elimination(A: np.ndarray, b: np.ndarray,
                         tolerance: float = SINGULAR_PIVOT_TOLERANCE) -> Optional[np.ndarray]:
    """
    Solve A x = b for real systems.
    Returns None when a pivot falls below the tolerance (singular system).
    """
    return _eliminate(np.asarray(A, dtype=float), np.asarray(b, dtype=float), tolerance)


def complex_gaussian_elimination(A: np.ndarray, b: np.ndarray,
                                 tolerance: float = SINGULAR_PIVOT_TOLERANCE) -> Optional[np.ndarray]:
    """Complex variant of gaussian_elimination; pivots on magnitude."""
    return _eliminate(np.asarray(A, dtype=complex), np.asarray(b, dtype=complex), tolerance)


def lu_decompose(A: np.ndarray,
                 tolerance: float = SINGULAR_PIVOT_TOLERANCE) -> Optional[Tuple[np.ndarray, np.ndarray]]:
    """
    Factor A with partial pivoting. Returns (lu, piv) or None when any
    diagonal entry of U falls below the tolerance.
    """
    if len(A) == 0:
        return np.zeros((0, 0)), np.zeros(0, dtype=int)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", linalg.LinAlgWarning)
        lu, piv = linalg.lu_factor(A)
    if np.min(np.abs(np.diag(lu))) < tolerance:
        return None
    return lu, piv


def lu_solve(factors: Tuple[np.ndarray, np.ndarray], b: np.ndarray) -> np.ndarray:
    if len(b) == 0:
        return np.asarray(b).copy()
    return linalg.lu_solve(factors, b)


def solve_linear_system(A: np.ndarray, b: np.ndarray, method: str = "gaussian",
                        tolerance: float = SINGULAR_PIVOT_TOLERANCE) -> Optional[np.ndarray]:
    """Dispatch to the requested dense solver; None signals a singular matrix."""
    if method == "lu":
        factors = lu_decompose(A, tolerance)
        if factors is None:
            return None
        return lu_solve(factors, b)
    if method != "gaussian":
        raise ValueError(f"Unknown solver method: {method}")
    if np.iscomplexobj(A) or np.iscomplexobj(b):
        return complex_gaussian_elimination(A, b, tolerance)
    return gaussian_elimination(A, b, tolerance)
