"""Shared test fixtures for speechlens tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from speechlens.corpus import Speech


@pytest.fixture
def sample_speeches() -> list[Speech]:
    """Four short inaugural-style speeches: two parties, four speakers."""
    return [
        Speech(
            document_id="1933-roosevelt",
            year=1933,
            speaker="Roosevelt",
            party="Democratic",
            text="The only thing we have to fear is fear itself. "
            "The nation asks for action, and action now.",
        ),
        Speech(
            document_id="1961-kennedy",
            year=1961,
            speaker="Kennedy",
            party="Democratic",
            text="Ask not what your country can do for you; ask what you can do "
            "for your country. The torch has been passed to a new generation.",
        ),
        Speech(
            document_id="1981-reagan",
            year=1981,
            speaker="Reagan",
            party="Republican",
            text="Government is not the solution to our problem; government is "
            "the problem. Freedom and liberty for the nation.",
        ),
        Speech(
            document_id="2001-bush",
            year=2001,
            speaker="Bush",
            party="Republican",
            text="Freedom and fear are at war. Freedom will be defended. "
            "The nation stands with liberty.",
        ),
    ]


@pytest.fixture
def corpus_file(tmp_path: Path, sample_speeches: list[Speech]) -> Path:
    """The sample speeches written as a .jsonl corpus."""
    path = tmp_path / "speeches.jsonl"
    path.write_text(
        "\n".join(json.dumps(s.model_dump()) for s in sample_speeches) + "\n",
        encoding="utf-8",
    )
    return path
