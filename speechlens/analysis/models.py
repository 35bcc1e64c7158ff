"""Data structures for the analysis engine.

These are plain dataclasses (not Pydantic): they're ephemeral, computed per
call from a filtered corpus, and handed straight to the presentation layer.
Every structure is frozen; each processing step builds a new one.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

import numpy as np


class GroupBy(str, Enum):
    """Which speech attribute a group key is taken from."""

    SPEAKER = "speaker"
    PARTY = "party"


@dataclass(frozen=True)
class Observation:
    """One surviving token occurrence: a term spoken in a document by a group."""

    document_id: str
    group_key: str
    term: str


@dataclass(frozen=True)
class CountTable:
    """Sparse (group, term) -> count table with derived totals.

    ``term_order`` records the order in which terms were first seen and is
    only used as a stable tiebreak; it does not take part in equality, so two
    tables folded from permutations of the same observations compare equal.
    """

    counts: dict[tuple[str, str], int] = field(default_factory=dict)
    group_totals: dict[str, int] = field(default_factory=dict)
    document_frequency: dict[str, int] = field(default_factory=dict)
    term_order: tuple[str, ...] = field(default=(), compare=False)
    group_by: GroupBy | None = None

    @property
    def groups(self) -> list[str]:
        """Group keys, sorted."""
        return sorted(self.group_totals)

    @property
    def terms(self) -> list[str]:
        """Terms in first-seen order."""
        return list(self.term_order)

    @property
    def grand_total(self) -> int:
        return sum(self.group_totals.values())

    def is_empty(self) -> bool:
        return not self.counts

    def count(self, group_key: str, term: str) -> int:
        return self.counts.get((group_key, term), 0)

    def term_totals(self) -> dict[str, int]:
        """Corpus-wide count of each term, summed across groups."""
        totals: dict[str, int] = {}
        for (_, term), n in self.counts.items():
            totals[term] = totals.get(term, 0) + n
        return totals

    def restrict(self, terms: Iterable[str]) -> CountTable:
        """Return a new table keeping only *terms*.

        Every group survives, even when its whole mass falls outside *terms*
        (its total becomes 0).
        """
        keep = set(terms)
        counts = {key: n for key, n in self.counts.items() if key[1] in keep}
        group_totals = {g: 0 for g in self.group_totals}
        for (group, _), n in counts.items():
            group_totals[group] += n
        return CountTable(
            counts=counts,
            group_totals=group_totals,
            document_frequency={
                t: df for t, df in self.document_frequency.items() if t in keep
            },
            term_order=tuple(t for t in self.term_order if t in keep),
            group_by=self.group_by,
        )


@dataclass(frozen=True)
class Vocabulary:
    """Ordered set of the terms retained for analysis."""

    terms: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.terms)

    def __iter__(self) -> Iterator[str]:
        return iter(self.terms)

    def __contains__(self, term: object) -> bool:
        return term in self.terms


@dataclass(frozen=True, eq=False)
class ContingencyMatrix:
    """A dense group x term table of counts with aligned labels."""

    values: np.ndarray
    row_labels: tuple[str, ...]
    column_labels: tuple[str, ...]
    group_by: GroupBy | None = None

    @property
    def shape(self) -> tuple[int, int]:
        return (len(self.row_labels), len(self.column_labels))

    def row_sums(self) -> dict[str, int]:
        sums = self.values.sum(axis=1)
        return {label: int(s) for label, s in zip(self.row_labels, sums)}

    def cell(self, row_label: str, column_label: str) -> int:
        i = self.row_labels.index(row_label)
        j = self.column_labels.index(column_label)
        return int(self.values[i, j])


@dataclass(frozen=True)
class TfIdfRow:
    """tf-idf score for one (group, term) pair with a non-zero count."""

    group_key: str
    term: str
    count: int
    tf: float
    idf: float
    tf_idf: float


@dataclass(frozen=True)
class CAResult:
    """Correspondence analysis output, consumed by the presentation layer.

    Coordinate, contribution and cos² vectors all hold one entry per
    retained dimension, in decreasing order of eigenvalue.
    """

    row_coordinates: dict[str, tuple[float, ...]]
    column_coordinates: dict[str, tuple[float, ...]]
    eigenvalues: tuple[float, ...]
    explained_inertia: tuple[float, ...]
    total_inertia: float
    row_masses: dict[str, float] = field(default_factory=dict)
    column_masses: dict[str, float] = field(default_factory=dict)
    row_contributions: dict[str, tuple[float, ...]] = field(default_factory=dict)
    column_contributions: dict[str, tuple[float, ...]] = field(default_factory=dict)
    row_cos2: dict[str, tuple[float, ...]] = field(default_factory=dict)
    column_cos2: dict[str, tuple[float, ...]] = field(default_factory=dict)
    excluded_rows: tuple[str, ...] = ()
    excluded_columns: tuple[str, ...] = ()

    @property
    def dimensions(self) -> int:
        return len(self.eigenvalues)

    @property
    def cumulative_inertia(self) -> tuple[float, ...]:
        running = 0.0
        out: list[float] = []
        for share in self.explained_inertia:
            running += share
            out.append(running)
        return tuple(out)
