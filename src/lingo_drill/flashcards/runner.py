"""Interactive flashcard study loop rendered with Rich."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Callable, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from .deck import DeckProgress, Flashcard, FlashcardDeck

__all__ = ["run_flashcards"]

InputProvider = Callable[[], str]
SpeakCallback = Callable[[str], None]

_COMMANDS = {
    "f": "flip",
    "flip": "flip",
    "": "flip",
    "n": "next",
    "next": "next",
    "p": "prev",
    "prev": "prev",
    "k": "known",
    "known": "known",
    "u": "unknown",
    "unknown": "unknown",
    "s": "speak",
    "speak": "speak",
    "q": "quit",
    "quit": "quit",
}


def run_flashcards(
    cards: Sequence[Flashcard],
    console: Console,
    input_provider: InputProvider,
    *,
    speak: Optional[SpeakCallback] = None,
) -> DeckProgress:
    """Study ``cards`` until the user quits or input runs out.

    Marking a card known or unknown moves on to the next card.
    """
    deck = FlashcardDeck(cards)
    while True:
        _render_card(console, deck)
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            break
        action = _COMMANDS.get(raw.strip().lower())
        if action is None:
            console.print("[red]Unrecognized command. Try again.[/]")
        elif action == "quit":
            break
        elif action == "flip":
            deck.flip()
        elif action == "next":
            if deck.is_last:
                console.print("[dim]Already at the last card.[/]")
            deck.next()
        elif action == "prev":
            if deck.is_first:
                console.print("[dim]Already at the first card.[/]")
            deck.previous()
        elif action == "speak":
            if speak is None:
                console.print("[dim]Speech is not enabled for this session.[/]")
            else:
                speak(deck.current.front)
        else:
            if action == "known":
                deck.mark_known()
            else:
                deck.mark_unknown()
            deck.next()

    progress = deck.progress()
    console.print(
        f"\n[bold]Known:[/] {progress.known}  [bold]Still learning:[/] "
        f"{progress.unknown}  [bold]Unseen:[/] {progress.unseen}"
    )
    review = deck.unknown_cards()
    if review:
        console.print(
            "[bold]Review next time:[/] "
            + escape(", ".join(card.front for card in review))
        )
    return progress


def _render_card(console: Console, deck: FlashcardDeck) -> None:
    card = deck.current
    title = f"Card {deck.index + 1} / {len(deck.cards)}"
    if card.difficulty:
        title += f" · {card.difficulty}"
    status = deck.status_of(card)
    if status:
        title += f" · {status}"

    if deck.is_flipped:
        body = Text(card.back, style="bold green")
        if card.part_of_speech:
            body.append(f"\n({card.part_of_speech})", style="italic")
        if card.example:
            body.append(f"\n\n{card.example}", style="dim")
    else:
        body = Text(card.front, style="bold")
        if card.pronunciation:
            body.append(f"\n{card.pronunciation}", style="cyan")

    console.print()
    console.print(Panel(body, title=title, expand=False))
    console.print(
        Text(
            "f (flip), n (next), p (prev), k (known), u (still learning), "
            "s (speak), q (quit)",
            style="dim",
        )
    )
