"""Explicit end-to-end analysis of a speech corpus.

Each call runs the whole flow from the speeches it is given; nothing is
cached between calls.  Callers re-run it whenever a filter (year range,
grouping, vocabulary size) changes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from speechlens.analysis import (
    CAResult,
    ContingencyMatrix,
    CountTable,
    GroupBy,
    TfIdfRow,
    Vocabulary,
    analyze_correspondence,
    build_matrix,
    compute_tfidf,
    count_terms,
    select_vocabulary,
)
from speechlens.config import SpeechlensSettings
from speechlens.corpus import Speech, filter_by_years, iter_observations
from speechlens.errors import DegenerateInputError, EmptyInputError
from speechlens.stopwords import ENGLISH_STOPWORDS, load_stopwords, stopword_predicate

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Everything the presentation layer renders for one filter setting."""

    group_by: GroupBy
    speech_count: int = 0
    count_table: CountTable = field(default_factory=CountTable)
    vocabulary: Vocabulary = field(default_factory=Vocabulary)
    matrix: ContingencyMatrix | None = None
    correspondence: CAResult | None = None
    tfidf: dict[str, list[TfIdfRow]] = field(default_factory=dict)
    # Why correspondence is None after it was requested, e.g. a single speaker in range
    correspondence_error: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.count_table.is_empty()


def build_stopword_predicate(settings: SpeechlensSettings) -> Callable[[str], bool] | None:
    """The stopword filter *settings* ask for, or None when filtering is off."""
    if not settings.remove_stopwords:
        return None
    if settings.stopwords_file is not None:
        return stopword_predicate(load_stopwords(settings.stopwords_file))
    return stopword_predicate(ENGLISH_STOPWORDS)


def run_analysis(
    speeches: Iterable[Speech],
    settings: SpeechlensSettings,
    group_by: GroupBy,
    *,
    year_from: int | None = None,
    year_to: int | None = None,
    correspondence: bool = True,
) -> AnalysisResult:
    """Filter, count, and score *speeches*; optionally run correspondence analysis.

    An empty selection is not an error: the result comes back with
    ``is_empty`` set.  A selection that still has terms but cannot be mapped
    (one group, or groups that use the vocabulary identically) keeps its
    tf-idf rows; ``correspondence`` stays None and ``correspondence_error``
    says why.
    """
    selected = filter_by_years(speeches, year_from, year_to)
    try:
        return _analyze(selected, settings, group_by, correspondence=correspondence)
    except EmptyInputError as exc:
        logger.warning("%s", exc)
        return AnalysisResult(group_by=group_by, speech_count=len(selected))


def _analyze(
    speeches: list[Speech],
    settings: SpeechlensSettings,
    group_by: GroupBy,
    *,
    correspondence: bool,
) -> AnalysisResult:
    table = count_terms(
        iter_observations(speeches, group_by),
        build_stopword_predicate(settings),
        group_by=group_by,
    )
    if table.is_empty():
        raise EmptyInputError(
            f"No terms left to analyze ({len(speeches)} speeches after filtering)"
        )
    logger.info(
        "Counted %d tokens over %d groups and %d distinct terms",
        table.grand_total, len(table.group_totals), len(table.term_order),
    )

    tfidf = compute_tfidf(
        table, group_by, settings.tfidf_top_n, top_n_cap=settings.tfidf_top_n_cap,
    )
    result = AnalysisResult(
        group_by=group_by,
        speech_count=len(speeches),
        count_table=table,
        tfidf=tfidf,
    )
    if not correspondence:
        return result

    result.vocabulary = select_vocabulary(table, settings.vocabulary_size)
    result.matrix = build_matrix(table, result.vocabulary, group_by)
    try:
        result.correspondence = analyze_correspondence(result.matrix, settings.ca_dimensions)
    except DegenerateInputError as exc:
        logger.warning("Correspondence analysis skipped: %s", exc)
        result.correspondence_error = str(exc)
    return result
