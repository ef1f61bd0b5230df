"""Error types shared across services and the HTTP layer."""

from collections.abc import Iterable


class RecipeFinderError(Exception):
    """Base error carrying a message that is safe to show to the user."""

    user_message = "Something went wrong. Please try again."

    def __init__(self, message: str, *, user_message: str | None = None) -> None:
        super().__init__(message)
        if user_message is not None:
            self.user_message = user_message


class NetworkError(RecipeFinderError):
    """Raised when the remote recipe catalog cannot be reached."""

    user_message = "Failed to load recipe details."


class StorageError(RecipeFinderError):
    """Raised when the key-value store or file storage fails."""

    user_message = "Failed to access local storage. Please try again."


class ValidationError(RecipeFinderError):
    """Raised when a user recipe is missing required fields."""

    user_message = "Please fill in all fields and add an image"

    def __init__(self, missing_fields: Iterable[str]) -> None:
        self.missing_fields = tuple(missing_fields)
        super().__init__(f"Missing required fields: {', '.join(self.missing_fields)}")
