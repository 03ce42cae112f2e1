from __future__ import annotations

import pytest

from lingo_drill.flashcards.deck import Flashcard, FlashcardDeck


def make_deck(count: int = 3) -> FlashcardDeck:
    return FlashcardDeck(
        [Flashcard(f"c{i}", f"front {i}", f"back {i}") for i in range(count)]
    )


def test_flip_toggles_current_card():
    deck = make_deck()

    assert deck.is_flipped is False
    assert deck.flip() is True
    assert deck.flip() is False


def test_navigation_clamps_and_resets_flip():
    deck = make_deck(2)
    assert deck.is_first

    deck.flip()
    deck.previous()
    assert deck.index == 0
    assert deck.is_flipped is True

    deck.next()
    assert deck.index == 1
    assert deck.is_last
    assert deck.is_flipped is False

    deck.flip()
    deck.next()
    assert deck.index == 1
    assert deck.is_flipped is True

    assert deck.previous().id == "c0"
    assert deck.is_flipped is False


def test_marks_are_mutually_exclusive():
    deck = make_deck()

    deck.mark_known()
    assert deck.status_of(deck.current) == "known"
    deck.mark_unknown()
    assert deck.status_of(deck.current) == "unknown"

    deck.next()
    deck.mark_known()
    progress = deck.progress()
    assert (progress.total, progress.known, progress.unknown) == (3, 1, 1)
    assert progress.unseen == 1
    assert [card.id for card in deck.unknown_cards()] == ["c0"]


def test_deck_requires_cards():
    with pytest.raises(ValueError):
        FlashcardDeck([])


@pytest.mark.parametrize(
    "kwargs",
    [
        {"id": " ", "front": "a", "back": "b"},
        {"id": "x", "front": "", "back": "b"},
        {"id": "x", "front": "a", "back": "  "},
        {"id": "x", "front": "a", "back": "b", "difficulty": "expert"},
    ],
)
def test_flashcard_validation(kwargs):
    with pytest.raises(ValueError):
        Flashcard(**kwargs)


def test_deck_rejects_duplicate_ids():
    cards = [Flashcard("same", "a", "b"), Flashcard("same", "c", "d")]

    with pytest.raises(ValueError, match="unique"):
        FlashcardDeck(cards)
