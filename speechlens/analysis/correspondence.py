"""Correspondence analysis of a group x term contingency matrix.

The computation follows the standard formulation in Greenacre, M. (2017),
*Correspondence Analysis in Practice* (3rd ed.):

1. P = N / n                                  (correspondence matrix)
2. r = P 1,  c = Pᵀ 1                          (row and column masses)
3. S = D_r^-1/2 (P - r cᵀ) D_c^-1/2            (standardized residuals)
4. S = U Σ Vᵀ                                  (SVD)
5. F = D_r^-1/2 U Σ,  G = D_c^-1/2 V Σ         (principal coordinates)
6. λ_k = σ_k²,  total inertia = Σ λ_k = χ² / n

Zero-mass rows and columns are removed before step 1, never masked after,
so no NaN can reach the divisions in steps 3 and 5.
"""

from __future__ import annotations

import logging

import numpy as np

from speechlens.analysis.models import CAResult, ContingencyMatrix
from speechlens.errors import DegenerateInputError, DivisionGuardError

logger = logging.getLogger(__name__)

DEFAULT_DIMENSIONS = 2

# Eigenvalues at or below this are numerical noise, not axes.
EIGENVALUE_THRESHOLD = 1e-12


def analyze_correspondence(matrix: ContingencyMatrix, dims: int = DEFAULT_DIMENSIONS) -> CAResult:
    """Project rows and columns of *matrix* into a shared principal-coordinate space.

    Returns at most *dims* dimensions; fewer when the table has fewer
    non-degenerate axes (never more than ``min(rows, cols) - 1``).

    Raises:
        ValueError: *dims* < 1 or the matrix holds negative counts.
        DegenerateInputError: the total mass is zero, fewer than two rows or
            columns carry mass, or rows and columns are fully independent.
    """
    if dims < 1:
        raise ValueError(f"Number of dimensions must be at least 1, got {dims}")

    observed = np.asarray(matrix.values, dtype=float)
    if observed.ndim != 2:
        raise ValueError(f"Contingency matrix must be 2-D, got shape {observed.shape}")
    if observed.size and observed.min() < 0:
        raise ValueError("Contingency matrix holds negative counts")
    if observed.size == 0 or observed.sum() <= 0:
        raise DegenerateInputError("Contingency matrix has zero total mass")

    row_keep = observed.sum(axis=1) > 0
    col_keep = observed.sum(axis=0) > 0
    excluded_rows = tuple(label for label, keep in zip(matrix.row_labels, row_keep) if not keep)
    excluded_columns = tuple(label for label, keep in zip(matrix.column_labels, col_keep) if not keep)
    if excluded_rows:
        logger.warning("Excluding %d zero-mass row(s): %s", len(excluded_rows), ", ".join(excluded_rows))
    if excluded_columns:
        logger.warning(
            "Excluding %d zero-mass column(s): %s", len(excluded_columns), ", ".join(excluded_columns)
        )

    if row_keep.sum() < 2 or col_keep.sum() < 2:
        raise DegenerateInputError(
            f"Correspondence analysis needs at least 2 rows and 2 columns with mass; "
            f"got {int(row_keep.sum())} x {int(col_keep.sum())}"
        )

    row_labels = [label for label, keep in zip(matrix.row_labels, row_keep) if keep]
    column_labels = [label for label, keep in zip(matrix.column_labels, col_keep) if keep]
    observed = observed[row_keep][:, col_keep]

    P = _normalize_to_correspondence_matrix(observed)
    r, c = _compute_masses(P)
    _guard_masses(r, c)
    S = _standardized_residual_matrix(P, r, c)
    U, singular_vals, VT, all_eigenvals, n_axes = _compute_svd(S)

    total_inertia = float(all_eigenvals.sum())
    if n_axes == 0:
        raise DegenerateInputError(
            "Rows and columns are independent: no axis carries inertia"
        )

    row_coords, col_coords = _principal_coordinates(U, VT, singular_vals, r, c, n_axes)
    eigenvals = all_eigenvals[:n_axes]
    row_contrib = _contributions(row_coords, r, eigenvals)
    col_contrib = _contributions(col_coords, c, eigenvals)
    row_cos2 = _cos2(row_coords)
    col_cos2 = _cos2(col_coords)

    k = min(dims, n_axes)
    if k < dims:
        logger.info("Requested %d dimensions, only %d available", dims, k)
    logger.debug(
        "CA on %d x %d table: total inertia %.6g, first axes %s",
        len(row_labels), len(column_labels), total_inertia, eigenvals[:k],
    )

    return CAResult(
        row_coordinates=_by_label(row_labels, row_coords[:, :k]),
        column_coordinates=_by_label(column_labels, col_coords[:, :k]),
        eigenvalues=tuple(float(e) for e in eigenvals[:k]),
        explained_inertia=tuple(float(e / total_inertia) for e in eigenvals[:k]),
        total_inertia=total_inertia,
        row_masses={label: float(m) for label, m in zip(row_labels, r)},
        column_masses={label: float(m) for label, m in zip(column_labels, c)},
        row_contributions=_by_label(row_labels, row_contrib[:, :k]),
        column_contributions=_by_label(column_labels, col_contrib[:, :k]),
        row_cos2=_by_label(row_labels, row_cos2[:, :k]),
        column_cos2=_by_label(column_labels, col_cos2[:, :k]),
        excluded_rows=excluded_rows,
        excluded_columns=excluded_columns,
    )


def _normalize_to_correspondence_matrix(observed: np.ndarray) -> np.ndarray:
    """Convert counts to proportions of the grand total: P = N / n."""
    return observed / observed.sum()


def _compute_masses(P: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Row masses r[i] and column masses c[j] of the correspondence matrix."""
    return P.sum(axis=1), P.sum(axis=0)


def _guard_masses(r: np.ndarray, c: np.ndarray) -> None:
    if np.any(r <= 0) or np.any(c <= 0):
        raise DivisionGuardError("Zero mass survived degenerate row/column exclusion")


def _standardized_residual_matrix(P: np.ndarray, r: np.ndarray, c: np.ndarray) -> np.ndarray:
    """How far each cell is from what independence predicts.

    S[i, j] = (P[i, j] - r[i] c[j]) / sqrt(r[i] c[j])
    """
    expected = np.outer(r, c)
    return (P - expected) / np.sqrt(expected)


def _compute_svd(S: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, int]:
    """SVD of the residual matrix plus the number of non-degenerate axes.

    Returns ``(U, singular_vals, VT, all_eigenvals, n_axes)``.  All
    eigenvalues are kept so the total inertia is exact; ``n_axes`` counts
    the leading ones above the noise threshold, capped at the rank bound
    ``min(rows, cols) - 1``.
    """
    U, singular_vals, VT = np.linalg.svd(S, full_matrices=False)
    all_eigenvals = singular_vals**2
    max_rank = min(S.shape) - 1
    n_axes = int(np.sum(all_eigenvals[:max_rank] > EIGENVALUE_THRESHOLD))
    return U, singular_vals, VT, all_eigenvals, n_axes


def _principal_coordinates(
    U: np.ndarray,
    VT: np.ndarray,
    singular_vals: np.ndarray,
    r: np.ndarray,
    c: np.ndarray,
    n_axes: int,
) -> tuple[np.ndarray, np.ndarray]:
    """Row coordinates σ_k U[i, k] / sqrt(r[i]); column coordinates σ_k V[j, k] / sqrt(c[j])."""
    sv = singular_vals[:n_axes]
    row_coords = U[:, :n_axes] * sv / np.sqrt(r)[:, np.newaxis]
    col_coords = VT[:n_axes, :].T * sv / np.sqrt(c)[:, np.newaxis]
    return row_coords, col_coords


def _contributions(coords: np.ndarray, masses: np.ndarray, eigenvals: np.ndarray) -> np.ndarray:
    """Share of each axis's inertia due to each point: mass * coord² / λ_k.

    Each column sums to 1.
    """
    return masses[:, np.newaxis] * coords**2 / eigenvals


def _cos2(coords: np.ndarray) -> np.ndarray:
    """Quality of representation: coord² over the squared distance to the centroid.

    A point sitting on the centroid gets 0 on every axis.
    """
    squared = coords**2
    dist2 = squared.sum(axis=1, keepdims=True)
    return np.divide(squared, dist2, out=np.zeros_like(squared), where=dist2 > 0)


def _by_label(labels: list[str], values: np.ndarray) -> dict[str, tuple[float, ...]]:
    return {label: tuple(float(v) for v in row) for label, row in zip(labels, values)}
