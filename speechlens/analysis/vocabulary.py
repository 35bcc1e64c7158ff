"""Top-K vocabulary selection by corpus-wide frequency."""

from __future__ import annotations

from speechlens.analysis.models import CountTable, Vocabulary

DEFAULT_VOCABULARY_SIZE = 200


def select_vocabulary(count_table: CountTable, k: int = DEFAULT_VOCABULARY_SIZE) -> Vocabulary:
    """Return the *k* most frequent terms across all groups.

    Ties are broken by first-seen position, so identical input order always
    gives the same vocabulary.  With fewer than *k* distinct terms, all of
    them are returned.
    """
    if k < 1:
        raise ValueError(f"Vocabulary size must be at least 1, got {k}")

    totals = count_table.term_totals()
    # Tables built by hand may lack term_order; unseen terms rank after, alphabetically
    seen = set(count_table.term_order)
    order = [*count_table.term_order, *sorted(t for t in totals if t not in seen)]
    ranked = sorted(
        ((totals.get(term, 0), position, term) for position, term in enumerate(order)),
        key=lambda item: (-item[0], item[1]),
    )
    return Vocabulary(terms=tuple(term for total, _, term in ranked[:k] if total > 0))
