"""Analysis engine: term counting, vocabulary, tf-idf and correspondence analysis."""

from speechlens.analysis.correspondence import analyze_correspondence
from speechlens.analysis.counting import count_terms
from speechlens.analysis.matrix import build_matrix
from speechlens.analysis.metrics import chi_square_statistic
from speechlens.analysis.models import (
    CAResult,
    ContingencyMatrix,
    CountTable,
    GroupBy,
    Observation,
    TfIdfRow,
    Vocabulary,
)
from speechlens.analysis.tfidf import TFIDF_TOP_N_CAP, compute_tfidf
from speechlens.analysis.vocabulary import select_vocabulary

__all__ = [
    "CAResult",
    "ContingencyMatrix",
    "CountTable",
    "GroupBy",
    "Observation",
    "TFIDF_TOP_N_CAP",
    "TfIdfRow",
    "Vocabulary",
    "analyze_correspondence",
    "build_matrix",
    "chi_square_statistic",
    "compute_tfidf",
    "count_terms",
    "select_vocabulary",
]
