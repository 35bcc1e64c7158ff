"""Speech records: loading, year filtering, tokenization into observations."""

from __future__ import annotations

import csv
import json
import logging
import re
from collections.abc import Iterable, Iterator
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from speechlens.analysis.models import GroupBy, Observation
from speechlens.errors import CorpusError

logger = logging.getLogger(__name__)

# Letters with optional inner apostrophes ("don't", "nation's").
_WORD_RE = re.compile(r"[a-z]+(?:'[a-z]+)*")


class Speech(BaseModel):
    """One labeled document of the corpus."""

    # Numeric ids (row numbers in exported datasets) are kept as strings
    model_config = ConfigDict(coerce_numbers_to_str=True)

    document_id: str
    year: int
    speaker: str
    party: str
    text: str

    @field_validator("speaker", "party")
    @classmethod
    def _strip_label(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    def group_key(self, group_by: GroupBy) -> str:
        if group_by == GroupBy.SPEAKER:
            return self.speaker
        return self.party


def tokenize(text: str) -> list[str]:
    """Lower-case *text* and split it into words; digits and punctuation go."""
    return _WORD_RE.findall(text.lower().replace("’", "'"))


def iter_observations(speeches: Iterable[Speech], group_by: GroupBy) -> Iterator[Observation]:
    """Yield one observation per token, keyed by *group_by*."""
    for speech in speeches:
        key = speech.group_key(group_by)
        for term in tokenize(speech.text):
            yield Observation(document_id=speech.document_id, group_key=key, term=term)


def filter_by_years(
    speeches: Iterable[Speech],
    year_from: int | None = None,
    year_to: int | None = None,
) -> list[Speech]:
    """Keep speeches whose year lies in the inclusive range."""
    return [
        s for s in speeches
        if (year_from is None or s.year >= year_from)
        and (year_to is None or s.year <= year_to)
    ]


def load_speeches(path: Path) -> list[Speech]:
    """Read a corpus from ``.jsonl``, ``.json`` (list of objects) or ``.csv``.

    Records without a ``document_id`` get one from their position
    (``doc-0001``...).  Raises CorpusError for unreadable files, unknown
    formats, and invalid records.
    """
    suffix = path.suffix.lower()
    try:
        if suffix == ".jsonl":
            raw = _read_jsonl(path)
        elif suffix == ".json":
            raw = _read_json(path)
        elif suffix == ".csv":
            raw = _read_csv(path)
        else:
            raise CorpusError(f"Unsupported corpus format: {path.name} (expected .jsonl, .json or .csv)")
    except OSError as exc:
        raise CorpusError(f"Cannot read corpus {path}: {exc}") from exc

    speeches: list[Speech] = []
    for position, record in enumerate(raw, start=1):
        if not isinstance(record, dict):
            raise CorpusError(f"{path.name}: record {position} is not an object")
        if record.get("document_id") in (None, ""):
            record = {**record, "document_id": f"doc-{position:04d}"}
        try:
            speeches.append(Speech.model_validate(record))
        except ValidationError as exc:
            raise CorpusError(f"{path.name}: invalid record {position}: {exc}") from exc

    logger.info("Loaded %d speeches from %s", len(speeches), path)
    return speeches


def _read_jsonl(path: Path) -> list[dict]:
    records: list[dict] = []
    with path.open(encoding="utf-8") as fh:
        for line_no, line in enumerate(fh, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as exc:
                raise CorpusError(f"{path.name}: line {line_no} is not valid JSON: {exc}") from exc
    return records


def _read_json(path: Path) -> list[dict]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CorpusError(f"{path.name}: not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise CorpusError(f"{path.name}: expected a JSON list of speech objects")
    return data


def _read_csv(path: Path) -> list[dict]:
    with path.open(encoding="utf-8", newline="") as fh:
        return list(csv.DictReader(fh))
