"""Build a dense group x term contingency matrix from a count table."""

from __future__ import annotations

import numpy as np

from speechlens.analysis.models import ContingencyMatrix, CountTable, GroupBy, Vocabulary


def check_grouping(count_table: CountTable, group_by: GroupBy | None) -> None:
    """Raise if *count_table* was counted for a different grouping than *group_by*."""
    if group_by is None or count_table.group_by is None:
        return
    if count_table.group_by != group_by:
        raise ValueError(
            f"Count table is grouped by {count_table.group_by.value!r}, "
            f"not {GroupBy(group_by).value!r}"
        )


def build_matrix(
    count_table: CountTable,
    vocabulary: Vocabulary,
    group_by: GroupBy | None = None,
) -> ContingencyMatrix:
    """Pivot *count_table* into a zero-filled matrix over *vocabulary*.

    Rows are every group in the table sorted by key; a group with no mass in
    the vocabulary stays as an all-zero row (correspondence analysis flags
    it).  Columns follow vocabulary order.
    """
    check_grouping(count_table, group_by)
    restricted = count_table.restrict(vocabulary.terms)

    row_labels = tuple(restricted.groups)
    column_labels = tuple(vocabulary.terms)
    row_index = {label: i for i, label in enumerate(row_labels)}
    col_index = {label: j for j, label in enumerate(column_labels)}

    values = np.zeros((len(row_labels), len(column_labels)), dtype=np.int64)
    for (group, term), n in restricted.counts.items():
        values[row_index[group], col_index[term]] = n

    return ContingencyMatrix(
        values=values,
        row_labels=row_labels,
        column_labels=column_labels,
        group_by=group_by if group_by is not None else count_table.group_by,
    )
