"""cardwise — spaced-repetition scheduling for generated flashcards."""

from cardwise.consts import VERSION

__version__ = VERSION
