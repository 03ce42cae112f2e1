"""Flashcard data and the deck navigation state machine."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

__all__ = ["Flashcard", "FlashcardDeck", "DeckProgress"]

_DIFFICULTIES = {"beginner", "intermediate", "advanced"}


@dataclass(frozen=True)
class Flashcard:
    """A vocabulary card: ``front`` is the prompt, ``back`` the meaning."""

    id: str
    front: str
    back: str
    pronunciation: Optional[str] = None
    example: Optional[str] = None
    difficulty: Optional[str] = None
    part_of_speech: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.id.strip():
            raise ValueError("flashcard id must be non-empty")
        if not self.front.strip() or not self.back.strip():
            raise ValueError(f"flashcard {self.id!r} needs front and back text")
        if self.difficulty is not None and self.difficulty not in _DIFFICULTIES:
            raise ValueError(
                f"flashcard {self.id!r} has unknown difficulty "
                f"{self.difficulty!r}"
            )


@dataclass(frozen=True)
class DeckProgress:
    total: int
    known: int
    unknown: int

    @property
    def unseen(self) -> int:
        return self.total - self.known - self.unknown


class FlashcardDeck:
    """Step through cards, flip them, and sort them into known/unknown.

    Navigation clamps at both ends and always shows the front of the card it
    lands on.
    """

    def __init__(self, cards: Sequence[Flashcard]) -> None:
        if not cards:
            raise ValueError("a deck needs at least one card")
        ids = [card.id for card in cards]
        if len(set(ids)) != len(ids):
            raise ValueError("flashcard ids must be unique within a deck")
        self._cards = tuple(cards)
        self._index = 0
        self._flipped = False
        self._known: set[str] = set()
        self._unknown: set[str] = set()

    @property
    def cards(self) -> tuple[Flashcard, ...]:
        return self._cards

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> Flashcard:
        return self._cards[self._index]

    @property
    def is_flipped(self) -> bool:
        return self._flipped

    @property
    def is_first(self) -> bool:
        return self._index == 0

    @property
    def is_last(self) -> bool:
        return self._index == len(self._cards) - 1

    def flip(self) -> bool:
        self._flipped = not self._flipped
        return self._flipped

    def next(self) -> Flashcard:
        return self._move_to(min(self._index + 1, len(self._cards) - 1))

    def previous(self) -> Flashcard:
        return self._move_to(max(self._index - 1, 0))

    def mark_known(self) -> None:
        card_id = self.current.id
        self._unknown.discard(card_id)
        self._known.add(card_id)

    def mark_unknown(self) -> None:
        card_id = self.current.id
        self._known.discard(card_id)
        self._unknown.add(card_id)

    def status_of(self, card: Flashcard) -> Optional[str]:
        if card.id in self._known:
            return "known"
        if card.id in self._unknown:
            return "unknown"
        return None

    def unknown_cards(self) -> list[Flashcard]:
        """Cards marked unknown, in deck order, for a review pass."""
        return [card for card in self._cards if card.id in self._unknown]

    def progress(self) -> DeckProgress:
        return DeckProgress(
            total=len(self._cards),
            known=len(self._known),
            unknown=len(self._unknown),
        )

    def _move_to(self, index: int) -> Flashcard:
        if index != self._index:
            self._index = index
            self._flipped = False
        return self.current
