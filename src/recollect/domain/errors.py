"""Error hierarchy for recollect.

The scheduling algorithms themselves never fail on well-formed input; these
errors mark programming mistakes (bad quality values, bad deck names) and
lookups that the session layer cannot satisfy.
"""


class RecollectError(Exception):
    """Base class for every error raised by recollect."""


class InvalidQualityError(RecollectError, ValueError):
    def __init__(self, quality: object):
        super().__init__(f"quality must be an integer in 0..5, got {quality!r}")
        self.quality = quality


class InvalidDeckNameError(RecollectError, ValueError):
    pass


class CardNotFoundError(RecollectError, LookupError):
    def __init__(self, card_id: str):
        super().__init__(f"card not found: {card_id}")
        self.card_id = card_id


class DeckNotFoundError(RecollectError, LookupError):
    def __init__(self, deck_id: str):
        super().__init__(f"deck not found: {deck_id}")
        self.deck_id = deck_id


class CollectionFormatError(RecollectError):
    """A collection snapshot could not be read back into domain records."""
