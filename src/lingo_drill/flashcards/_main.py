"""``lingo flashcards``: study and generate flashcard decks."""

from __future__ import annotations

import argparse
import random
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
from ..core.files import write_jsonl
from ..quiz.generate import DIFFICULTIES
from .generate import generate_flashcard_set
from .loader import flashcard_to_dict, load_flashcards
from .runner import run_flashcards


def _cmd_study(
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
    *,
    console: Console,
    input_provider: Callable[[], str],
) -> int:
    runtime = load_runtime(args, parser)
    try:
        cards = load_flashcards(args.path)
    except FileNotFoundError:
        console.print(f"[red]Deck not found: {args.path}[/]")
        return 1
    except ValueError as exc:
        console.print(f"[red]Invalid deck: {exc}[/]")
        return 1
    if not cards:
        console.print("Deck is empty.")
        return 1
    if args.shuffle:
        random.Random().shuffle(cards)

    speak = None
    if args.speak:
        speak = blocking_speaker(build_speech_client(runtime))
    progress = run_flashcards(cards, console, input_provider, speak=speak)
    runtime.logger.info(
        "Flashcard session finished",
        extra={
            "deck": str(args.path),
            "known": progress.known,
            "unknown": progress.unknown,
        },
    )
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
        cards = generate_flashcard_set(
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
    if not cards:
        console.print("No flashcards generated.")
        return 1
    out = args.out or runtime.layout.path_for("decks") / f"{_slug(args.topic)}.jsonl"
    write_jsonl(out, [flashcard_to_dict(card) for card in cards])
    console.print(f"Wrote {len(cards)} flashcard(s) -> {out}")
    return 0


def _slug(text: str) -> str:
    cleaned = "".join(ch if ch.isalnum() else "-" for ch in text.lower())
    return "-".join(part for part in cleaned.split("-") if part) or "deck"


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="lingo flashcards",
        description="Vocabulary flashcards",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    sub = p.add_subparsers(dest="command", required=True)

    sp_study = sub.add_parser("study", help="Study a deck from JSON/JSONL")
    sp_study.add_argument("path", type=Path)
    sp_study.add_argument("--shuffle", action="store_true")
    sp_study.add_argument(
        "--speak", action="store_true", help="Allow 's' to read cards aloud"
    )
    add_common_arguments(sp_study)

    sp_gen = sub.add_parser("generate", help="Write a deck with OpenAI")
    sp_gen.add_argument("topic")
    sp_gen.add_argument(
        "--out",
        type=Path,
        help="Destination JSONL (defaults to the workspace decks directory)",
    )
    sp_gen.add_argument(
        "--difficulty", choices=DIFFICULTIES, default="beginner"
    )
    sp_gen.add_argument("--count", type=int, default=10)
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
    if args.command == "study":
        provider = input_provider or (lambda: console.input("> "))
        return _cmd_study(
            args, parser, console=console, input_provider=provider
        )
    if args.command == "generate":
        return _cmd_generate(args, parser, console=console)
    parser.print_help()  # pragma: no cover - argparse enforces a command
    return 2


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
