"""Rich-rendered terminal loop around :class:`QuizSession`.

The runner owns the countdown on behalf of the session: terminal input
blocks, so after every line it reads it checks the session clock and expires
the question when the answer arrived too late.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import AnswerRecord, Question, QuizResult
from .session import Clock, QuizSession

__all__ = [
    "QuizCommand",
    "QuizRunOutcome",
    "parse_quiz_command",
    "run_quiz",
]

InputProvider = Callable[[], str]
SpeakCallback = Callable[[str], None]
ExitAction = Literal["completed", "quit"]


@dataclass(frozen=True)
class QuizCommand:
    """Normalized user command parsed from console input."""

    type: Literal["select", "speak", "quit"]
    option_index: Optional[int] = None


@dataclass(frozen=True)
class QuizRunOutcome:
    """Return value from :func:`run_quiz`; ``result`` is ``None`` on quit."""

    result: Optional[QuizResult]
    exit_action: ExitAction
    answered: int


def parse_quiz_command(raw: Optional[str]) -> Optional[QuizCommand]:
    """Parse console input.

    Options are chosen by 1-based number or by letter (``a`` is the first
    option). ``s``/``speak`` vocalizes the prompt and ``q``/``quit`` exits.
    """
    if raw is None:
        return None
    text = raw.strip().lower()
    if not text:
        return None
    if text in {"q", "quit", "exit"}:
        return QuizCommand("quit")
    if text in {"s", "speak", "say"}:
        return QuizCommand("speak")
    if text.isdigit():
        return QuizCommand("select", int(text) - 1)
    if len(text) == 1 and "a" <= text <= "z":
        return QuizCommand("select", ord(text) - ord("a"))
    return None


def run_quiz(
    questions: Sequence[Question],
    console: Console,
    input_provider: InputProvider,
    *,
    time_budget_seconds: int = 30,
    speak: Optional[SpeakCallback] = None,
    show_explanations: bool = True,
    clock: Clock = time.monotonic,
) -> QuizRunOutcome:
    """Run a timed quiz session in the terminal until completion or quit."""

    session = QuizSession(questions, time_budget_seconds, clock=clock)

    while not session.is_complete:
        question = session.current_question
        assert question is not None
        _render_question(console, session, question, speak is not None)
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Session interrupted.[/]")
            return QuizRunOutcome(None, "quit", len(session.records))

        command = parse_quiz_command(raw)
        if command is not None and command.type == "quit":
            console.print("\n[bold yellow]Ending quiz early.[/]")
            return QuizRunOutcome(None, "quit", len(session.records))

        if session.is_time_up():
            record = session.expire_current_question()
            console.print("[bold red]Time's up![/]")
        else:
            if command is None:
                console.print("[red]Unrecognized command. Try again.[/]")
                continue
            if command.type == "speak":
                _speak_prompt(console, question, speak)
                continue
            index = command.option_index
            if index is None or not 0 <= index < len(question.options):
                console.print(
                    f"[red]'{raw.strip()}' is not a valid option for this "
                    "question.[/red]"
                )
                continue
            record = session.select_answer(index)

        _render_feedback(console, question, record, show_explanations)
        session.advance()

    result = session.get_result()
    _render_summary(console, result)
    return QuizRunOutcome(result, "completed", result.total_questions)


def _speak_prompt(
    console: Console,
    question: Question,
    speak: Optional[SpeakCallback],
) -> None:
    if speak is None:
        console.print("[dim]Speech is not enabled for this session.[/]")
        return
    speak(question.speakable_text or question.prompt)


def _render_question(
    console: Console,
    session: QuizSession,
    question: Question,
    can_speak: bool,
) -> None:
    header = Text.assemble(
        (f"Question {session.current_index + 1}", "bold cyan"),
        (f" / {session.total_questions}", "dim"),
    )
    console.print()
    console.rule(header)
    console.print(Text(question.prompt, style="bold"))

    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("Key", justify="center", style="cyan")
    table.add_column("Option")
    for idx, option in enumerate(question.options):
        table.add_row(f"{idx + 1}", option)
    console.print(table)

    remaining = session.time_remaining()
    style = "red" if remaining <= 5 else "yellow" if remaining <= 10 else "dim"
    hints = "number or letter to answer"
    if can_speak:
        hints += ", s (speak)"
    hints += ", q (quit)"
    console.print(
        Text(f"Time left: {_format_time(remaining)} | {hints}", style=style)
    )


def _render_feedback(
    console: Console,
    question: Question,
    record: AnswerRecord,
    show_explanations: bool,
) -> None:
    if record.is_correct:
        console.print("[bold green]Correct![/]")
    else:
        console.print(
            f"[bold red]Incorrect.[/] The answer was "
            f"[bold]{question.correct_option}[/]."
        )
    if show_explanations and question.explanation:
        border = "green" if record.is_correct else "red"
        console.print(
            Panel(question.explanation, title="Explanation", border_style=border)
        )


def _render_summary(console: Console, result: QuizResult) -> None:
    console.print()
    console.rule(Text("Quiz Complete", style="bold magenta"))

    overview = Table(show_header=False, box=box.MINIMAL_DOUBLE_HEAD)
    overview.add_column("Metric", style="bold")
    overview.add_column("Value", justify="right")
    overview.add_row("Score", f"{result.score}%")
    overview.add_row("Correct", str(result.correct_count))
    overview.add_row("Incorrect", str(result.incorrect_count))
    overview.add_row(
        "Average time", _format_time(result.average_elapsed_seconds)
    )
    console.print(overview)

    responses = Table(title="Responses", box=box.SIMPLE, expand=True)
    responses.add_column("#", justify="right")
    responses.add_column("Question")
    responses.add_column("Answer")
    responses.add_column("Time", justify="right")
    responses.add_column("Result", justify="center")
    for idx, record in enumerate(result.records, start=1):
        answer = (
            "timed out"
            if record.timed_out
            else str(record.selected_option_index + 1)
        )
        responses.add_row(
            str(idx),
            record.question_id,
            answer,
            f"{record.elapsed_seconds}s",
            "✅" if record.is_correct else "❌",
        )
    console.print(responses)


def _format_time(seconds: int) -> str:
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes}:{secs:02d}"
