"""Rank the terms that distinguish each group by tf-idf."""

from __future__ import annotations

import logging

from speechlens.analysis.matrix import check_grouping
from speechlens.analysis.metrics import inverse_document_frequency, term_frequency
from speechlens.analysis.models import CountTable, GroupBy, TfIdfRow

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 15

# Render-size guard for the ranked tables, not a statistical requirement.
TFIDF_TOP_N_CAP = 15


def compute_tfidf(
    count_table: CountTable,
    group_by: GroupBy,
    top_n: int = DEFAULT_TOP_N,
    *,
    top_n_cap: int = TFIDF_TOP_N_CAP,
) -> dict[str, list[TfIdfRow]]:
    """Score every (group, term) pair and keep the best *top_n* per group.

    ``idf`` is computed over groups, not documents: a term used by every
    group scores 0.  The number of rows per group is ``min(top_n, top_n_cap)``;
    rows are ordered by descending tf-idf, then by term.

    Returns a dict keyed by group (sorted).  A group with no tokens maps to
    an empty list.
    """
    if top_n < 1:
        raise ValueError(f"top_n must be at least 1, got {top_n}")
    if top_n_cap < 1:
        raise ValueError(f"top_n_cap must be at least 1, got {top_n_cap}")
    check_grouping(count_table, group_by)

    limit = min(top_n, top_n_cap)
    if limit < top_n:
        logger.debug("tf-idf top_n %d clamped to cap %d", top_n, top_n_cap)

    total_groups = sum(1 for total in count_table.group_totals.values() if total > 0)
    groups_containing: dict[str, int] = {}
    for (_, term), n in count_table.counts.items():
        if n > 0:
            groups_containing[term] = groups_containing.get(term, 0) + 1
    idf = {
        term: inverse_document_frequency(total_groups, containing)
        for term, containing in groups_containing.items()
    }

    rows_by_group: dict[str, list[TfIdfRow]] = {g: [] for g in count_table.groups}
    for (group, term), n in count_table.counts.items():
        group_total = count_table.group_totals.get(group, 0)
        if n <= 0 or group_total <= 0:
            continue
        tf = term_frequency(n, group_total)
        rows_by_group[group].append(
            TfIdfRow(
                group_key=group,
                term=term,
                count=n,
                tf=tf,
                idf=idf[term],
                tf_idf=tf * idf[term],
            )
        )

    for group, rows in rows_by_group.items():
        rows.sort(key=lambda r: (-r.tf_idf, r.term))
        rows_by_group[group] = rows[:limit]

    return rows_by_group
