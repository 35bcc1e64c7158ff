"""End-to-end tests: observations through counting, tf-idf and CA."""

from __future__ import annotations

import math

import pytest

from speechlens.analysis import (
    GroupBy,
    Observation,
    analyze_correspondence,
    build_matrix,
    compute_tfidf,
    count_terms,
    select_vocabulary,
)

_SCENARIO = [
    Observation("d1", "Pres1", "war"),
    Observation("d1", "Pres1", "war"),
    Observation("d1", "Pres1", "peace"),
    Observation("d2", "Pres2", "peace"),
    Observation("d2", "Pres2", "peace"),
]


class TestScenario:

    def test_count_table(self) -> None:
        """Two speakers over two documents, counted by hand."""
        table = count_terms(_SCENARIO)
        assert table.counts == {
            ("Pres1", "war"): 2,
            ("Pres1", "peace"): 1,
            ("Pres2", "peace"): 2,
        }

    def test_tfidf(self) -> None:
        """A term one speaker alone uses scores tf times ln 2; a shared term scores 0."""
        result = compute_tfidf(count_terms(_SCENARIO, group_by=GroupBy.SPEAKER), GroupBy.SPEAKER)
        pres1 = {r.term: r for r in result["Pres1"]}
        pres2 = {r.term: r for r in result["Pres2"]}

        assert pres1["war"].tf_idf == pytest.approx((2 / 3) * math.log(2))
        assert pres1["war"].tf_idf > 0
        assert pres2["peace"].tf_idf == 0.0
        assert [r.term for r in result["Pres1"]] == ["war", "peace"]

    def test_correspondence(self) -> None:
        """Two speakers give one axis holding all the inertia."""
        table = count_terms(_SCENARIO)
        vocab = select_vocabulary(table, k=200)
        assert vocab.terms == ("peace", "war")

        matrix = build_matrix(table, vocab)
        assert matrix.row_sums() == {"Pres1": 3, "Pres2": 2}

        result = analyze_correspondence(matrix)
        assert result.dimensions == 1
        # The two speakers sit on opposite sides of the single axis
        (p1,), (p2,) = result.row_coordinates["Pres1"], result.row_coordinates["Pres2"]
        assert p1 * p2 < 0
        # war is used only by Pres1, so it sits on Pres1's side
        (war,) = result.column_coordinates["war"]
        assert war * p1 > 0


class TestRepeatedCalls:

    def test_no_state_between_calls(self) -> None:
        """Running the flow twice gives identical results."""
        table = count_terms(_SCENARIO)
        matrix = build_matrix(table, select_vocabulary(table))
        first = analyze_correspondence(matrix)
        second = analyze_correspondence(matrix)
        assert first.eigenvalues == second.eigenvalues
        assert first.total_inertia == second.total_inertia
        assert compute_tfidf(table, GroupBy.SPEAKER) == compute_tfidf(table, GroupBy.SPEAKER)
