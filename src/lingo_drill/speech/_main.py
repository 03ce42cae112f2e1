"""``lingo speak``, ``lingo voices`` and ``lingo quota`` commands."""

from __future__ import annotations

import argparse
import asyncio
from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table

from ..bootstrap import add_common_arguments, build_speech_client, load_runtime


def _parser(prog: str, description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description=description)
    parser.add_argument(
        "--api-key",
        help="Provider API key (defaults to speech.api_key or ELEVENLABS_API_KEY).",
    )
    add_common_arguments(parser)
    return parser


def build_speak_parser() -> argparse.ArgumentParser:
    parser = _parser("lingo speak", "Read text aloud.")
    parser.add_argument("text", nargs="+", help="Text to speak")
    parser.add_argument("--voice", help="Voice id for this phrase only")
    parser.add_argument("--model", help="Model id for this phrase only")
    return parser


def speak_main(
    argv: Optional[Sequence[str]] = None,
    *,
    console: Optional[Console] = None,
) -> int:
    parser = build_speak_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    console = console or Console()
    text = " ".join(args.text).strip()
    if not text:
        parser.error("text must not be empty")
    runtime = load_runtime(args, parser)
    client = build_speech_client(runtime, api_key=args.api_key)
    if not client.is_remote_enabled():
        console.print("[dim]No provider key configured; using the local voice.[/]")
    asyncio.run(client.speak(text, voice_id=args.voice, model_id=args.model))
    return 0


def voices_main(
    argv: Optional[Sequence[str]] = None,
    *,
    console: Optional[Console] = None,
) -> int:
    parser = _parser("lingo voices", "List the provider's voices.")
    args = parser.parse_args(list(argv) if argv is not None else None)
    console = console or Console()
    runtime = load_runtime(args, parser)
    client = build_speech_client(runtime, api_key=args.api_key)
    if not client.is_remote_enabled():
        console.print("[red]No provider key configured.[/]")
        return 1
    voices = asyncio.run(client.list_voices())
    if not voices:
        console.print("No voices available.")
        return 1

    table = Table(title="Voices")
    table.add_column("Voice ID", style="cyan")
    table.add_column("Name")
    table.add_column("Category", style="dim")
    for voice in voices:
        table.add_row(
            str(voice.get("voice_id", "")),
            str(voice.get("name", "")),
            str(voice.get("category", "")),
        )
    console.print(table)
    return 0


def quota_main(
    argv: Optional[Sequence[str]] = None,
    *,
    console: Optional[Console] = None,
) -> int:
    parser = _parser("lingo quota", "Show remaining synthesis characters.")
    args = parser.parse_args(list(argv) if argv is not None else None)
    console = console or Console()
    runtime = load_runtime(args, parser)
    client = build_speech_client(runtime, api_key=args.api_key)
    if not client.is_remote_enabled():
        console.print("[red]No provider key configured.[/]")
        return 1
    remaining = asyncio.run(client.remaining_quota())
    console.print(f"Remaining characters: {remaining}")
    return 0
