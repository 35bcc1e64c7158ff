"""Fold token observations into a sparse count table."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from speechlens.analysis.models import CountTable, GroupBy, Observation

logger = logging.getLogger(__name__)

StopwordPredicate = Callable[[str], bool]


def count_terms(
    observations: Iterable[Observation],
    is_stopword: StopwordPredicate | None = None,
    *,
    group_by: GroupBy | None = None,
) -> CountTable:
    """Count (group, term) occurrences, skipping stopwords when a predicate is given.

    Counting is a commutative fold: any permutation of *observations* yields
    an equal table.  Only ``term_order`` (first-seen order, used as a stable
    tiebreak by vocabulary selection) depends on input order.
    """
    counts: dict[tuple[str, str], int] = {}
    group_totals: dict[str, int] = {}
    documents: dict[str, set[str]] = {}
    term_order: list[str] = []
    dropped = 0

    for obs in observations:
        if is_stopword is not None and is_stopword(obs.term):
            dropped += 1
            continue
        key = (obs.group_key, obs.term)
        counts[key] = counts.get(key, 0) + 1
        group_totals[obs.group_key] = group_totals.get(obs.group_key, 0) + 1
        docs = documents.get(obs.term)
        if docs is None:
            docs = documents[obs.term] = set()
            term_order.append(obs.term)
        docs.add(obs.document_id)

    if dropped:
        logger.debug("Dropped %d stopword observations", dropped)

    return CountTable(
        counts=counts,
        group_totals=group_totals,
        document_frequency={term: len(docs) for term, docs in documents.items()},
        term_order=tuple(term_order),
        group_by=group_by,
    )
