from .deck import DeckProgress, Flashcard, FlashcardDeck
from .generate import generate_flashcard_set
from .loader import flashcard_from_dict, flashcard_to_dict, load_flashcards
from .runner import run_flashcards

__all__ = [
    "Flashcard",
    "FlashcardDeck",
    "DeckProgress",
    "flashcard_from_dict",
    "flashcard_to_dict",
    "load_flashcards",
    "generate_flashcard_set",
    "run_flashcards",
]
