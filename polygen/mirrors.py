"""Mirror placement and the initial vertex of a Wythoff construction."""

from __future__ import annotations

from typing import Sequence

import numpy as np


def place_mirrors(symmetry_matrix: Sequence[Sequence[float]]) -> np.ndarray:
    """
    Place a set of mirrors given a symmetry matrix S, where S[i][j] = k means
    mirrors i and j meet at an angle of pi/k. Returns the unit normals as rows.

    The normals are found row by row, like a Cholesky factorisation of the
    matrix C[i][j] = -cos(pi / S[i][j]) of required dot products: the first
    normal is (1, 0, ..., 0) and row i only uses its first i+1 components.
    A symmetry matrix that is not realizable as a finite reflection group
    yields NaN (or a zero last component) in the result.
    """
    S = np.asarray(symmetry_matrix, dtype=float)
    C = -np.cos(np.pi / S)
    n = len(S)
    M = np.zeros((n, n))
    M[0, 0] = 1.0
    with np.errstate(invalid="ignore", divide="ignore"):
        for i in range(1, n):
            for j in range(i):
                M[i, j] = (C[i, j] - M[j, :j] @ M[i, :j]) / M[j, j]
            M[i, i] = np.sqrt(1.0 - M[i, :i] @ M[i, :i])
    return M


def is_finite_reflection_group(symmetry_matrix: Sequence[Sequence[float]], tol: float = 1e-9) -> bool:
    """True if the mirrors bound a finite group, i.e. the Gram matrix
    -cos(pi / S) is positive definite. Affine and hyperbolic symmetries fail."""
    S = np.asarray(symmetry_matrix, dtype=float)
    gram = -np.cos(np.pi / S)
    return bool(np.linalg.eigvalsh(gram).min() > tol)


def place_initial_vertex(normals: np.ndarray, offsets: Sequence[float]) -> np.ndarray:
    """Vertex whose signed distance to mirror i is offsets[i]."""
    return np.linalg.solve(normals, np.asarray(offsets, dtype=float))


def reflect(v: np.ndarray, normal: np.ndarray) -> np.ndarray:
    """Reflection of ``v`` in the mirror with unit ``normal``, as a new array."""
    return v - 2.0 * (v @ normal) * normal


def reflect_inplace(v: np.ndarray, normal: np.ndarray) -> np.ndarray:
    """Reflect ``v`` in place and return it."""
    v -= 2.0 * (v @ normal) * normal
    return v


__all__ = ["place_mirrors", "is_finite_reflection_group", "place_initial_vertex", "reflect", "reflect_inplace"]
