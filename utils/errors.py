"""Exception types raised by the flashcard library."""


class FlashcardError(Exception):
    """Base class for library errors."""


class ValidationError(FlashcardError, ValueError):
    """Raised when card or deck input fails validation."""


class InvalidOperationError(FlashcardError):
    """Raised when an operation would break a deck hierarchy invariant."""


class NotFoundError(FlashcardError, KeyError):
    """Raised when a card or deck id does not exist."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


__all__ = ["FlashcardError", "InvalidOperationError", "NotFoundError", "ValidationError"]
