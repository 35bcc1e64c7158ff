"""Tests for the speechlens command-line interface."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from speechlens import __version__
from speechlens.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """No .env or SPEECHLENS_ vars leak in; logging reset afterwards."""
    monkeypatch.chdir(tmp_path)
    for var in ("SPEECHLENS_VOCABULARY_SIZE", "SPEECHLENS_CA_DIMENSIONS", "SPEECHLENS_TFIDF_TOP_N"):
        monkeypatch.delenv(var, raising=False)
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    logging.basicConfig(level=logging.WARNING, force=True)


class TestVersion:

    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestTfidfCommand:

    def test_by_party(self, corpus_file: Path) -> None:
        """One table per party, titled with the party name."""
        result = runner.invoke(app, ["tfidf", str(corpus_file), "--by", "party"])
        assert result.exit_code == 0, result.output
        assert "Party: Democratic" in result.output
        assert "Party: Republican" in result.output

    def test_by_speaker_top_n(self, corpus_file: Path) -> None:
        """--top-n 1 keeps only the winning term of a tie."""
        result = runner.invoke(app, ["tfidf", str(corpus_file), "--top-n", "1"])
        assert result.exit_code == 0, result.output
        assert "Speaker: Reagan" in result.output
        assert "government" in result.output
        assert "problem" not in result.output

    def test_empty_year_range(self, corpus_file: Path) -> None:
        """A range with no speeches is reported, not treated as a failure."""
        result = runner.invoke(app, ["tfidf", str(corpus_file), "--from-year", "1800", "--to-year", "1850"])
        assert result.exit_code == 0
        assert "No terms to analyze" in result.output

    def test_invalid_group(self, corpus_file: Path) -> None:
        result = runner.invoke(app, ["tfidf", str(corpus_file), "--by", "decade"])
        assert result.exit_code != 0

    def test_bad_corpus(self, tmp_path: Path) -> None:
        """Malformed JSONL prints an error and exits 1."""
        bad = tmp_path / "bad.jsonl"
        bad.write_text("{broken\n", encoding="utf-8")
        result = runner.invoke(app, ["tfidf", str(bad)])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_single_speaker_still_scored(self, corpus_file: Path) -> None:
        """tf-idf does not need a second group, so one speaker in range is fine."""
        result = runner.invoke(
            app, ["tfidf", str(corpus_file), "--from-year", "1981", "--to-year", "1981"],
        )
        assert result.exit_code == 0, result.output
        assert "Speaker: Reagan" in result.output


class TestCaCommand:

    def test_by_speaker(self, corpus_file: Path) -> None:
        """Inertia, group and term tables all render."""
        result = runner.invoke(app, ["ca", str(corpus_file), "--dims", "2"])
        assert result.exit_code == 0, result.output
        assert "Explained inertia" in result.output
        assert "Speaker coordinates" in result.output
        assert "Term coordinates" in result.output
        assert "Kennedy" in result.output

    def test_degenerate_selection(self, corpus_file: Path) -> None:
        """A single speaker cannot be mapped; the reason is printed and exit is 1."""
        result = runner.invoke(
            app, ["ca", str(corpus_file), "--from-year", "1981", "--to-year", "1981"],
        )
        assert result.exit_code == 1
        assert "Error" in result.output
        assert "at least 2 rows" in result.output

    def test_log_file(self, corpus_file: Path, tmp_path: Path) -> None:
        """--log-dir writes speechlens.log under a hidden folder."""
        logs = tmp_path / "logs"
        result = runner.invoke(app, ["ca", str(corpus_file), "--log-dir", str(logs)])
        assert result.exit_code == 0, result.output
        assert (logs / ".speechlens" / "speechlens.log").exists()


class TestInvalidSettings:

    def test_env_value_out_of_range(self, corpus_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A bad SPEECHLENS_ value is reported without a traceback."""
        monkeypatch.setenv("SPEECHLENS_VOCABULARY_SIZE", "0")
        result = runner.invoke(app, ["ca", str(corpus_file)])
        assert result.exit_code == 1
        assert "Invalid settings" in result.output
        assert "vocabulary_size" in result.output
        assert isinstance(result.exception, SystemExit)

    def test_env_value_not_a_number(self, corpus_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPEECHLENS_TFIDF_TOP_N", "many")
        result = runner.invoke(app, ["tfidf", str(corpus_file)])
        assert result.exit_code == 1
        assert "Invalid settings" in result.output

    def test_dotenv_value_out_of_range(self, corpus_file: Path, tmp_path: Path) -> None:
        """Values read from .env in the working directory are checked the same way."""
        (tmp_path / ".env").write_text("SPEECHLENS_CA_DIMENSIONS=0\n", encoding="utf-8")
        result = runner.invoke(app, ["ca", str(corpus_file)])
        assert result.exit_code == 1
        assert "Invalid settings" in result.output
