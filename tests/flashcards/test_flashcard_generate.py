from __future__ import annotations

import pytest

from fakes import FakeOpenAI
from lingo_drill.flashcards.generate import generate_flashcard_set


def _card(idx: int, **overrides):
    card = {
        "id": f"card{idx}",
        "front": f"word {idx}",
        "back": f"meaning {idx}",
        "difficulty": "beginner",
        "partOfSpeech": "noun",
    }
    card.update(overrides)
    return card


def test_generates_cards_with_prompt():
    client = FakeOpenAI.returning_json([_card(i) for i in range(1, 6)])

    cards = generate_flashcard_set("kitchen", "Beginner", 5, client=client, language="Spanish")

    assert [card.front for card in cards] == [f"word {i}" for i in range(1, 6)]
    assert cards[0].part_of_speech == "noun"
    prompt = client.completions.calls[0]["messages"][1]["content"]
    assert "5 Spanish flashcards" in prompt
    assert '"kitchen"' in prompt


def test_invalid_cards_skipped_and_ids_made_unique():
    items = [
        _card(1),
        _card(2, id="card1"),
        {"id": "", "front": "x", "back": "y"},
        _card(3, back=""),
        {"front": "z", "back": "w", "id": "card2"},
        [1, 2],
    ]
    client = FakeOpenAI.returning_json(items)

    cards = generate_flashcard_set("kitchen", "beginner", 5, client=client)

    ids = [card.id for card in cards]
    assert len(ids) == 4
    assert len(set(ids)) == 4
    assert ids[0] == "card1"


def test_card_count_bounds():
    client = FakeOpenAI("[]")

    with pytest.raises(ValueError):
        generate_flashcard_set("kitchen", "beginner", 4, client=client)
    with pytest.raises(ValueError):
        generate_flashcard_set("kitchen", "beginner", 21, client=client)
    assert generate_flashcard_set("kitchen", "beginner", 20, client=client) == []
