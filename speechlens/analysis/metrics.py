"""Low-level statistical functions for the analysis engine.

These are pure arithmetic: no I/O, no numpy, no model types.  Higher-level
code (tf-idf engine, correspondence analysis) calls these.
"""

from __future__ import annotations

import math
from collections.abc import Sequence


def term_frequency(count: int, group_total: int) -> float:
    """Share of a group's tokens taken by one term.

    Returns 0 when the group has no tokens at all.
    """
    if group_total <= 0:
        return 0.0
    return count / group_total


def inverse_document_frequency(total_groups: int, groups_containing: int) -> float:
    """Natural-log idf: ln(total_groups / groups_containing).

    A term present in every group scores exactly 0.  Returns 0 for a term
    no group contains, rather than dividing by zero.
    """
    if total_groups <= 0 or groups_containing <= 0:
        return 0.0
    if groups_containing >= total_groups:
        return 0.0
    return math.log(total_groups / groups_containing)


def chi_square_statistic(observed: Sequence[Sequence[float]]) -> float:
    """Pearson's chi-square statistic for a two-way contingency table.

    Cells whose expected count is zero (an empty row or column) contribute
    nothing.  Returns 0 for an empty table.
    """
    row_totals = [sum(row) for row in observed]
    if not row_totals:
        return 0.0
    n_cols = len(observed[0])
    col_totals = [sum(row[j] for row in observed) for j in range(n_cols)]
    grand_total = sum(row_totals)
    if grand_total == 0:
        return 0.0

    chi2 = 0.0
    for i, row in enumerate(observed):
        for j, value in enumerate(row):
            expected = row_totals[i] * col_totals[j] / grand_total
            if expected == 0:
                continue
            chi2 += (value - expected) ** 2 / expected
    return chi2
