"""Command-line interface for speechlens."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from speechlens import __version__
from speechlens.analysis import CAResult, GroupBy, TfIdfRow
from speechlens.config import load_settings
from speechlens.errors import CorpusError
from speechlens.logging import setup_logging

if TYPE_CHECKING:
    from speechlens.pipeline import AnalysisResult

app = typer.Typer(
    name="speechlens",
    help="Distinctive terms and correspondence maps for labeled speech corpora.",
    no_args_is_help=True,
)
console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"speechlens {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version", "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Distinctive terms and correspondence maps for labeled speech corpora."""


# ---------------------------------------------------------------------------
# Shared options
# ---------------------------------------------------------------------------

CorpusArg = Annotated[
    Path,
    typer.Argument(
        help="Corpus file: .jsonl, .json or .csv with year, speaker, party and text fields.",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
]
GroupByOpt = Annotated[
    GroupBy,
    typer.Option("--by", "-b", help="Group terms by speaker or by party."),
]
YearFromOpt = Annotated[
    int | None,
    typer.Option("--from-year", help="First year to include."),
]
YearToOpt = Annotated[
    int | None,
    typer.Option("--to-year", help="Last year to include."),
]
KeepStopwordsOpt = Annotated[
    bool,
    typer.Option("--keep-stopwords", help="Count stopwords instead of dropping them."),
]
StopwordsFileOpt = Annotated[
    Path | None,
    typer.Option("--stopwords", help="Stopword list (one word per line) replacing the built-in list.", exists=True),
]
LogDirOpt = Annotated[
    Path | None,
    typer.Option("--log-dir", help="Also write a log file under this directory."),
]
VerboseOpt = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable verbose logging."),
]


def _run(
    corpus: Path,
    group_by: GroupBy,
    *,
    year_from: int | None,
    year_to: int | None,
    correspondence: bool,
    **overrides: object,
) -> AnalysisResult:
    from speechlens.corpus import load_speeches
    from speechlens.pipeline import run_analysis

    try:
        settings = load_settings(**overrides)
        speeches = load_speeches(corpus)
        result = run_analysis(
            speeches, settings, group_by,
            year_from=year_from, year_to=year_to, correspondence=correspondence,
        )
    except ValidationError as exc:
        console.print(f"[red]Invalid settings:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc
    except CorpusError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc

    if result.is_empty:
        console.print(
            f"No terms to analyze ({result.speech_count} speeches in the selected range)."
        )
        raise typer.Exit(0)
    return result


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def tfidf(
    corpus: CorpusArg,
    group_by: GroupByOpt = GroupBy.SPEAKER,
    top_n: Annotated[
        int | None,
        typer.Option("--top-n", "-n", help="Terms per group (capped by SPEECHLENS_TFIDF_TOP_N_CAP).", min=1),
    ] = None,
    year_from: YearFromOpt = None,
    year_to: YearToOpt = None,
    keep_stopwords: KeepStopwordsOpt = False,
    stopwords: StopwordsFileOpt = None,
    log_dir: LogDirOpt = None,
    verbose: VerboseOpt = False,
) -> None:
    """Show the terms that most distinguish each speaker or party."""
    setup_logging(log_dir=log_dir, verbose=verbose)
    result = _run(
        corpus, group_by,
        year_from=year_from, year_to=year_to, correspondence=False,
        tfidf_top_n=top_n,
        remove_stopwords=False if keep_stopwords else None,
        stopwords_file=stopwords,
    )
    _print_tfidf(result.tfidf, group_by)


@app.command()
def ca(
    corpus: CorpusArg,
    group_by: GroupByOpt = GroupBy.SPEAKER,
    dims: Annotated[
        int | None,
        typer.Option("--dims", "-d", help="Dimensions to report.", min=1),
    ] = None,
    vocab_size: Annotated[
        int | None,
        typer.Option("--vocab-size", "-k", help="Most frequent terms kept as columns.", min=1),
    ] = None,
    year_from: YearFromOpt = None,
    year_to: YearToOpt = None,
    keep_stopwords: KeepStopwordsOpt = False,
    stopwords: StopwordsFileOpt = None,
    log_dir: LogDirOpt = None,
    verbose: VerboseOpt = False,
) -> None:
    """Run correspondence analysis of groups against the top terms."""
    setup_logging(log_dir=log_dir, verbose=verbose)
    result = _run(
        corpus, group_by,
        year_from=year_from, year_to=year_to, correspondence=True,
        ca_dimensions=dims,
        vocabulary_size=vocab_size,
        remove_stopwords=False if keep_stopwords else None,
        stopwords_file=stopwords,
    )
    if result.correspondence is None:
        reason = result.correspondence_error or "no correspondence result"
        console.print(f"[red]Error:[/red] {escape(reason)}")
        raise typer.Exit(1)
    _print_correspondence(result.correspondence, group_by)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def _print_tfidf(rows_by_group: dict[str, list[TfIdfRow]], group_by: GroupBy) -> None:
    for group, rows in rows_by_group.items():
        table = Table(title=f"{group_by.value.title()}: {escape(group)}", title_justify="left")
        table.add_column("Term")
        table.add_column("Count", justify="right")
        table.add_column("tf", justify="right")
        table.add_column("idf", justify="right")
        table.add_column("tf-idf", justify="right")
        for row in rows:
            table.add_row(
                row.term, str(row.count), f"{row.tf:.4f}", f"{row.idf:.4f}", f"{row.tf_idf:.5f}",
            )
        console.print(table)


def _print_correspondence(result: CAResult, group_by: GroupBy) -> None:
    inertia = Table(title="Explained inertia", title_justify="left")
    inertia.add_column("Dimension", justify="right")
    inertia.add_column("Eigenvalue", justify="right")
    inertia.add_column("Share", justify="right")
    inertia.add_column("Cumulative", justify="right")
    for k, (eig, share, cum) in enumerate(
        zip(result.eigenvalues, result.explained_inertia, result.cumulative_inertia), start=1,
    ):
        inertia.add_row(str(k), f"{eig:.5f}", f"{share:.1%}", f"{cum:.1%}")
    console.print(inertia)
    console.print(f"[dim]Total inertia: {result.total_inertia:.5f}[/dim]")

    _print_coordinates(f"{group_by.value.title()} coordinates", result.row_coordinates, result.dimensions)
    _print_coordinates("Term coordinates", result.column_coordinates, result.dimensions)

    excluded = [*result.excluded_rows, *result.excluded_columns]
    if excluded:
        console.print(f"[yellow]Excluded (no mass): {escape(', '.join(excluded))}[/yellow]")


def _print_coordinates(title: str, coords: dict[str, tuple[float, ...]], dims: int) -> None:
    table = Table(title=title, title_justify="left")
    table.add_column("Label")
    for k in range(dims):
        table.add_column(f"Dim {k + 1}", justify="right")
    for label, vector in coords.items():
        table.add_row(escape(label), *(f"{v:+.4f}" for v in vector))
    console.print(table)
