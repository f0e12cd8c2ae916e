"""
Quiz Grader CLI Application.

Provides a command-line interface for grading quiz submissions,
validating authored quizzes and summarizing attempt histories.
"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from quiz_grader.config import get_settings
from quiz_grader.grading import calculate_quiz_stats, grade_quiz
from quiz_grader.loaders import LoaderError, load_answers, load_attempts, load_quiz
from quiz_grader.logging import configure_logging
from quiz_grader.models import AttemptResult, Quiz
from quiz_grader.validation import QuizValidator

# Create Typer app
app = typer.Typer(
    name="quiz-grader",
    help="Auto-grading for LMS quizzes",
    add_completion=False,
)

console = Console()


@app.callback()
def main() -> None:
    """Configure logging before any command runs."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)


@app.command()
def grade(
    quiz_file: Annotated[Path, typer.Argument(help="Path to the quiz (.json or .xlsx)")],
    answers_file: Annotated[Path, typer.Argument(help="Path to the answers JSON file")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the attempt result as JSON"),
    ] = None,
    reveal: Annotated[
        Optional[bool],
        typer.Option("--reveal/--no-reveal", help="Show per-question correctness"),
    ] = None,
) -> None:
    """
    Grade a submission against a quiz's answer key.

    Per-question correctness is shown when the quiz reveals answers,
    unless overridden with --reveal/--no-reveal.
    """
    try:
        quiz = load_quiz(quiz_file)
        answers = load_answers(answers_file)
    except LoaderError as e:
        console.print(f"[red]Load Error:[/red] {e}")
        raise typer.Exit(1)

    result = grade_quiz(quiz, answers)
    show_answers = quiz.settings.show_answers if reveal is None else reveal

    _display_result(quiz, result, show_answers)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.model_dump_json(indent=2), encoding="utf-8")
        console.print(f"\n[green]Result saved to:[/green] {output}")


@app.command()
def validate(
    quiz_file: Annotated[Path, typer.Argument(help="Path to the quiz (.json or .xlsx)")],
) -> None:
    """
    Validate a quiz file without grading anything.

    Checks that every question has an answer key that can be graded.
    """
    try:
        quiz = load_quiz(quiz_file)
    except LoaderError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    is_valid, issues = QuizValidator().validate(quiz)

    console.print(Panel(f"[bold]{quiz.title}[/bold]", title="Quiz"))

    table = Table(title="Questions")
    table.add_column("#", justify="right")
    table.add_column("Type", style="cyan")
    table.add_column("Points", justify="right")
    table.add_column("Prompt")

    for i, question in enumerate(quiz.questions, start=1):
        table.add_row(str(i), question.type, str(question.points), question.prompt[:50])

    console.print(table)
    console.print(
        f"\n[bold]Total Points:[/bold] {quiz.total_points}   "
        f"[bold]Passing Score:[/bold] {quiz.settings.passing_score}%"
    )

    if is_valid:
        console.print("\n[green]✓ Quiz is valid[/green]")
    else:
        console.print("\n[yellow]⚠ Validation issues found:[/yellow]")
        for issue in issues:
            console.print(f"  • {issue}")
        raise typer.Exit(1)


@app.command()
def stats(
    attempts_file: Annotated[Path, typer.Argument(help="JSON list of attempt results")],
) -> None:
    """Summarize a list of attempt results."""
    try:
        attempts = load_attempts(attempts_file)
    except LoaderError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    summary = calculate_quiz_stats(attempts)

    table = Table(title="Attempt Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Total attempts", str(summary.total_attempts))
    table.add_row("Average score", f"{summary.average_score}%")
    table.add_row("Highest score", f"{summary.highest_score}%")
    table.add_row("Lowest score", f"{summary.lowest_score}%")
    table.add_row("Pass rate", f"{summary.pass_rate}%")
    console.print(table)


@app.command()
def config() -> None:
    """Show the effective configuration."""
    settings = get_settings()
    console.print("[bold]Quiz Grader Configuration[/bold]\n")
    console.print(f"  Tutor API Base URL: {settings.openai_base_url}")
    console.print(f"  Tutor Model: {settings.tutor_model}")
    console.print(f"  Tutor API Key: {'set' if settings.openai_api_key else 'not set'}")
    console.print(
        f"  AI Rate Limit: {settings.ai_rate_limit_per_hour} requests / "
        f"{settings.ai_rate_window_seconds}s"
    )
    console.print(f"  AI Daily Token Limit: {settings.ai_daily_token_limit}")
    console.print(f"  Log Level: {settings.log_level}")


def _display_result(quiz: Quiz, result: AttemptResult, show_answers: bool) -> None:
    """Display an attempt result in a formatted panel and table."""

    score_color = "green" if result.passed else "red"
    verdict = "PASSED" if result.passed else "FAILED"
    console.print(
        Panel(
            f"[{score_color}][bold]{result.earned_points} / {result.total_points}[/bold] "
            f"({result.score}%) {verdict}[/{score_color}]\n"
            f"Passing score: {quiz.settings.passing_score}%",
            title=quiz.title,
        )
    )

    if show_answers:
        table = Table(title="Answers")
        table.add_column("#", justify="right")
        table.add_column("Type", style="cyan")
        table.add_column("Points", justify="right")
        table.add_column("Status")

        for graded, question in zip(result.answers, quiz.questions):
            status = "✅" if graded.is_correct else "❌"
            table.add_row(
                str(graded.question_index + 1),
                graded.question_type,
                f"{graded.points_awarded}/{question.points}",
                status,
            )

        console.print(table)


if __name__ == "__main__":
    app()
