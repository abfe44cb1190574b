"""
gapforge CLI - fill-in-the-blank practice from JavaScript files.

Usage:
    gapforge generate app.js                  # Show a gapped exercise
    gapforge generate app.js -d hard --key    # Hard preset, print answers
    gapforge generate app.js -o result.json   # Save the exercise
    gapforge check result.json -a 1=map       # Check answers to a saved exercise
    gapforge practice app.js                  # Answer gaps interactively
"""

from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from .config import configure_logging
from .engine import (
    Difficulty,
    GapEngine,
    GapResult,
    GapSegment,
    GapSettings,
    ValidationResult,
    apply_difficulty_preset,
    validate_answers,
)
from .engine.validator import HintKind

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="gapforge",
    help="Fill-in-the-blank exercises from JavaScript snippets",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


@app.callback()
def main(
    log_level: Annotated[
        Optional[str], typer.Option("--log-level", help="DEBUG, INFO, WARNING, ...")
    ] = None,
) -> None:
    configure_logging(log_level)


# =============================================================================
# Helpers
# =============================================================================


def _read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        console.print(f"[red]Cannot read {path}: {exc.strerror}[/red]")
        raise typer.Exit(1)


def _generate(path: Path, difficulty: Difficulty, seed: int | None) -> GapResult:
    source = _read_source(path)
    rng = random.Random(seed)
    settings = apply_difficulty_preset(difficulty, GapSettings())
    return GapEngine().generate(source, settings, rng)


def render_exercise(result: GapResult) -> Text:
    """Gapped code with each blank shown as ``[__N__]``."""
    text = Text()
    for seg in result.segments:
        if isinstance(seg, GapSegment):
            text.append(f"[__{seg.id}__]", style="bold yellow")
        else:
            text.append(seg.value)
    return text


def _print_answer_key(result: GapResult) -> None:
    table = Table(title="Answer Key", show_header=True)
    table.add_column("Gap", justify="right", style="cyan")
    table.add_column("Category", style="dim")
    table.add_column("Answer", style="green")
    for gap_id in sorted(result.answer_key):
        category = result.categories.get(gap_id)
        table.add_row(
            str(gap_id), category.value if category else "-", Text(result.answer_key[gap_id])
        )
    console.print(table)


def _parse_answers(pairs: list[str]) -> dict[int, str]:
    answers: dict[int, str] = {}
    for pair in pairs:
        gap_id, sep, value = pair.partition("=")
        if not sep or not gap_id.strip().isdigit():
            raise typer.BadParameter(f"Expected ID=TEXT, got {pair!r}", param_hint="--answer")
        answers[int(gap_id)] = value
    return answers


def _print_validation(result: GapResult, answers: dict[int, str], outcome: ValidationResult) -> None:
    table = Table(show_header=True)
    table.add_column("Gap", justify="right", style="cyan")
    table.add_column("Your answer")
    table.add_column("Status")
    for gap_id in sorted(result.answer_key):
        if gap_id in outcome.correct_gaps:
            status = "[green]correct[/green]"
        elif gap_id in outcome.incorrect_gaps:
            status = "[red]incorrect[/red]"
        else:
            status = "[dim]empty[/dim]"
        table.add_row(str(gap_id), Text(answers.get(gap_id, "")), status)
    console.print(table)

    style = "green" if outcome.hint_kind is HintKind.PERFECT else "yellow"
    console.print(
        f"[{style}]{outcome.correct_count}/{outcome.total_count} correct. {outcome.hint}[/{style}]"
    )


# =============================================================================
# Commands
# =============================================================================


@app.command()
def generate(
    file: Annotated[Path, typer.Argument(help="JavaScript source file")],
    difficulty: Annotated[
        Difficulty, typer.Option("--difficulty", "-d", help="Gap preset")
    ] = Difficulty.MEDIUM,
    seed: Annotated[
        Optional[int], typer.Option("--seed", "-s", help="Seed for reproducible gaps")
    ] = None,
    output: Annotated[
        Optional[Path], typer.Option("--output", "-o", help="Write the result as JSON")
    ] = None,
    show_key: Annotated[
        bool, typer.Option("--key", "-k", help="Print the answer key")
    ] = False,
) -> None:
    """
    Generate a gapped exercise from a source file.

    Examples:
        gapforge generate app.js
        gapforge generate app.js --difficulty hard --seed 7
    """
    result = _generate(file, difficulty, seed)

    if result.fallback:
        console.print(f"[yellow]No gaps generated: {escape(result.message or '')}[/yellow]")

    console.print(Panel(render_exercise(result), title=f"{file.name} ({result.gap_count} gaps)"))

    if show_key and result.gap_count:
        _print_answer_key(result)

    if output:
        output.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")
        console.print(f"[dim]Saved to {output}[/dim]")


@app.command()
def check(
    result_file: Annotated[Path, typer.Argument(help="JSON written by 'generate --output'")],
    answer: Annotated[
        Optional[list[str]], typer.Option("--answer", "-a", help="Answer as ID=TEXT")
    ] = None,
) -> None:
    """Check answers against a saved exercise."""
    try:
        result = GapResult.from_dict(json.loads(result_file.read_text(encoding="utf-8")))
    except (OSError, ValueError, KeyError, TypeError) as exc:
        console.print(f"[red]Cannot load {result_file}: {escape(str(exc))}[/red]")
        raise typer.Exit(1)

    answers = _parse_answers(answer or [])
    outcome = validate_answers(result.answer_key, answers)
    _print_validation(result, answers, outcome)

    if outcome.hint_kind is not HintKind.PERFECT:
        raise typer.Exit(1)


@app.command()
def practice(
    file: Annotated[Path, typer.Argument(help="JavaScript source file")],
    difficulty: Annotated[
        Difficulty, typer.Option("--difficulty", "-d", help="Gap preset")
    ] = Difficulty.MEDIUM,
    seed: Annotated[
        Optional[int], typer.Option("--seed", "-s", help="Seed for reproducible gaps")
    ] = None,
) -> None:
    """Fill in the gaps one by one, then see how you did."""
    result = _generate(file, difficulty, seed)

    if not result.gap_count:
        console.print(f"[yellow]Nothing to practice: {escape(result.message or '')}[/yellow]")
        return

    console.print(Panel(render_exercise(result), title=f"{file.name}"))
    console.print("[dim]Press Enter to skip a gap[/dim]")

    answers: dict[int, str] = {}
    for gap_id in result.gap_ids:
        answers[gap_id] = Prompt.ask(f"[cyan]Gap {gap_id}[/cyan]", default="", show_default=False)

    outcome = validate_answers(result.answer_key, answers)
    _print_validation(result, answers, outcome)

    if outcome.hint_kind is not HintKind.PERFECT:
        _print_answer_key(result)


def run() -> None:
    """Entry point for the console script."""
    app()


if __name__ == "__main__":
    run()
