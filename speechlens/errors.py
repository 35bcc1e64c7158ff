"""Exception hierarchy for speechlens.

Aggregation and selection never fail on empty input; only correspondence
analysis can refuse a table outright.
"""

from __future__ import annotations


class SpeechlensError(Exception):
    """Base class for all speechlens errors."""


class EmptyInputError(SpeechlensError):
    """No observations survived filtering.

    Recoverable: callers return empty results instead of failing.
    """


class DegenerateInputError(SpeechlensError):
    """A contingency table has no usable mass (or no non-trivial axis)."""


class DivisionGuardError(SpeechlensError):
    """A zero mass reached a division that should have been pre-filtered.

    Only raised on an internal bug: zero-mass rows and columns are excluded
    before any division happens.
    """


class CorpusError(SpeechlensError):
    """A corpus file could not be read or contains an invalid record."""
