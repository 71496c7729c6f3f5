"""Error taxonomy shared by every layer."""


class CardwiseError(Exception):
    """Base class for all cardwise errors."""


class InvalidQualityError(CardwiseError, ValueError):
    """A review quality rating outside 0-5, or not an integer."""

    def __init__(self, quality: object):
        self.quality = quality
        super().__init__(f"Quality must be an integer between 0 and 5, got {quality!r}")


class CardNotFoundError(CardwiseError, LookupError):
    """The card does not exist or is not owned by the requesting user."""

    def __init__(self, card_id: str, user_id: str | None = None):
        self.card_id = card_id
        self.user_id = user_id
        super().__init__(f"Card not found: {card_id}")


class DeckFormatError(CardwiseError, ValueError):
    """An import file could not be turned into card records."""
