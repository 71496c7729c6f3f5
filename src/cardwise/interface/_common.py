"""Helpers shared by CLI command modules."""

from typing import Any

from cardwise.application.config import AppConfig, resolve_config
from cardwise.domain.errors import CardNotFoundError, DeckFormatError, InvalidQualityError


def _resolve_with_overrides(**overrides: Any) -> AppConfig:
    """Resolve config, letting only explicitly passed CLI values win."""
    return resolve_config({k: v for k, v in overrides.items() if v is not None})


def humanize_error(error: Exception) -> str:
    """Turn a domain or storage error into a one-line message for the terminal."""
    if isinstance(error, InvalidQualityError):
        return f"{error}. Use 0 (blackout) to 5 (perfect recall)."
    if isinstance(error, CardNotFoundError):
        return f"No card with id '{error.card_id}' for this user."
    if isinstance(error, DeckFormatError):
        return f"Deck file problem: {error}"
    if isinstance(error, FileNotFoundError):
        return f"File not found: {error.filename}"
    return f"{type(error).__name__}: {error}"
