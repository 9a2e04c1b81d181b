"""Exceptions raised by the macro tracker services."""


class MacroTrackerError(Exception):
    """Base error for the application."""


class InvalidAmountError(MacroTrackerError):
    """Raised when a scaling amount is non-positive or non-finite."""

    def __init__(self, amount: float) -> None:
        self.amount = amount
        super().__init__(f"Amount must be a positive finite number, got {amount!r}")


class InvalidInputError(MacroTrackerError):
    """Raised when a metabolic calculation receives an unusable value."""


class ValidationError(MacroTrackerError):
    """Raised when a record violates a schema constraint."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class DuplicateKeyError(MacroTrackerError):
    """Raised when a second day entry is written for the same user and date."""


class UnauthorizedError(MacroTrackerError):
    """Raised when a request carries no valid identity."""


class NotFoundError(MacroTrackerError):
    """Raised when a requested record does not exist."""


class CatalogError(MacroTrackerError):
    """Recoverable failure from an external food catalog."""


class FoodNotFoundError(CatalogError):
    """Raised when the catalog has no food for an id."""


class RateLimitedError(CatalogError):
    """Raised when the catalog quota is exhausted."""


class CatalogUnavailableError(CatalogError):
    """Raised when the catalog cannot be reached."""
