"""Language drill toolkit: timed quizzes, flashcards, and spoken prompts."""

__all__ = ["__version__"]

__version__ = "0.1.0"
