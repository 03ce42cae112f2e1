"""``lingo quiz``: run timed quizzes and generate new ones."""

from __future__ import annotations

import argparse
import random
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional, Sequence

from rich.console import Console

from ..bootstrap import (
    add_common_arguments,
    blocking_speaker,
    build_speech_client,
    load_runtime,
)
from ..core.ai import load_client
from ..core.files import append_jsonl, write_jsonl
from .generate import DIFFICULTIES, generate_vocabulary_quiz
from .loader import load_questions, question_to_dict
from .runner import run_quiz

HISTORY_FILENAME = "quiz_history.jsonl"


def _cmd_run(
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
    *,
    console: Console,
    input_provider: Callable[[], str],
) -> int:
    if args.time_limit is not None and args.time_limit <= 0:
        parser.error("--time-limit must be a positive number of seconds")
    runtime = load_runtime(args, parser)
    try:
        questions = load_questions(args.path)
    except FileNotFoundError:
        console.print(f"[red]Question file not found: {args.path}[/]")
        return 1
    except ValueError as exc:
        console.print(f"[red]Invalid question file: {exc}[/]")
        return 1
    if not questions:
        console.print("Question bank is empty.")
        return 1

    if args.shuffle:
        random.Random().shuffle(questions)
    if args.num and args.num > 0:
        questions = questions[: args.num]

    time_limit = args.time_limit or runtime.config.quiz.time_limit_seconds
    show_explanations = (
        runtime.config.quiz.show_explanations
        if args.explain is None
        else args.explain
    )
    speak = None
    if args.speak:
        speak = blocking_speaker(build_speech_client(runtime))

    runtime.logger.info(
        "Starting quiz",
        extra={
            "source": str(args.path),
            "questions": len(questions),
            "time_limit": time_limit,
        },
    )
    outcome = run_quiz(
        questions,
        console,
        input_provider,
        time_budget_seconds=time_limit,
        speak=speak,
        show_explanations=show_explanations,
    )
    if outcome.result is None:
        runtime.logger.info(
            "Quiz ended early", extra={"answered": outcome.answered}
        )
        return 0

    runtime.logger.info(
        "Quiz complete",
        extra={
            "score": outcome.result.score,
            "correct": outcome.result.correct_count,
        },
    )
    if args.save:
        history = runtime.layout.path_for("sessions") / HISTORY_FILENAME
        append_jsonl(
            history,
            {
                "finished_at": datetime.now(timezone.utc).isoformat(),
                "source": str(Path(args.path).resolve()),
                "time_limit_seconds": time_limit,
                **outcome.result.to_dict(),
            },
        )
        console.print(f"[dim]Saved result to {history}[/]")
    return 0


def _cmd_generate(
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
    *,
    console: Console,
) -> int:
    runtime = load_runtime(args, parser)
    try:
        client = load_client()
    except RuntimeError as exc:
        console.print(f"[red]{exc}[/]")
        return 2
    generation = runtime.config.generation
    try:
        questions = generate_vocabulary_quiz(
            args.topic,
            args.difficulty,
            args.count,
            client=client,
            language=args.language,
            model=generation.model,
            temperature=generation.temperature,
            max_tokens=generation.max_tokens,
        )
    except ValueError as exc:
        parser.error(str(exc))
    if not questions:
        console.print("No questions generated.")
        return 1
    write_jsonl(args.out, [question_to_dict(q) for q in questions])
    console.print(f"Wrote {len(questions)} question(s) -> {args.out}")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="lingo quiz",
        description="Timed multiple-choice vocabulary quizzes",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    sub = p.add_subparsers(dest="command", required=True)

    sp_run = sub.add_parser("run", help="Take a quiz from a JSON/JSONL file")
    sp_run.add_argument("path", type=Path)
    sp_run.add_argument(
        "--time-limit",
        type=int,
        help="Seconds per question (defaults to quiz.time_limit_seconds)",
    )
    sp_run.add_argument("--num", type=int, default=0, help="0 = all questions")
    sp_run.add_argument("--shuffle", action="store_true")
    sp_run.add_argument(
        "--speak",
        action="store_true",
        help="Allow 's' to read questions aloud",
    )
    sp_run.add_argument("--explain", dest="explain", action="store_true")
    sp_run.add_argument("--no-explain", dest="explain", action="store_false")
    sp_run.add_argument(
        "--save",
        action="store_true",
        help="Append the result to the workspace quiz history",
    )
    sp_run.set_defaults(explain=None)
    add_common_arguments(sp_run)

    sp_gen = sub.add_parser("generate", help="Write a quiz with OpenAI")
    sp_gen.add_argument("topic")
    sp_gen.add_argument("--out", type=Path, required=True)
    sp_gen.add_argument(
        "--difficulty", choices=DIFFICULTIES, default="beginner"
    )
    sp_gen.add_argument("--count", type=int, default=8)
    sp_gen.add_argument("--language", default="English")
    add_common_arguments(sp_gen)
    return p


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    console: Optional[Console] = None,
    input_provider: Optional[Callable[[], str]] = None,
) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    console = console or Console()
    if args.command == "run":
        provider = input_provider or (lambda: console.input("> "))
        return _cmd_run(
            args, parser, console=console, input_provider=provider
        )
    if args.command == "generate":
        return _cmd_generate(args, parser, console=console)
    parser.print_help()  # pragma: no cover - argparse enforces a command
    return 2


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
