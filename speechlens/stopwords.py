"""Stopword lists and the membership predicate injected into term counting."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

from speechlens.errors import CorpusError

ENGLISH_STOPWORDS: frozenset[str] = frozenset(
    """
    a about above after again against all also am an and any are as at
    be because been before being below between both but by
    can could did do does doing down during each few for from further
    had has have having he her here hers herself him himself his how
    i if in into is it it's its itself just let me more most must my myself
    no nor not now of off on once only or other ought our ours ourselves out over own
    same shall she should so some such than that that's the their theirs them
    themselves then there there's these they this those through to too
    under until up upon us very was we were what when where which while who
    whom why will with would you your yours yourself yourselves
    """.split()
)


def load_stopwords(path: Path) -> frozenset[str]:
    """Read one stopword per line; blank lines and ``#`` comments are skipped."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CorpusError(f"Cannot read stopword list {path}: {exc}") from exc
    words = set()
    for line in text.splitlines():
        word = line.split("#", 1)[0].strip().lower()
        if word:
            words.add(word)
    return frozenset(words)


def stopword_predicate(words: Iterable[str] = ENGLISH_STOPWORDS) -> Callable[[str], bool]:
    """Return ``is_stopword(term)``, case-insensitive membership in *words*."""
    lookup = frozenset(w.lower() for w in words)

    def is_stopword(term: str) -> bool:
        return term.lower() in lookup

    return is_stopword
