"""Custom exceptions for profile operations.

Everything in this module is a configuration error: it is detected while a
profile is being loaded, before any media file is touched, and aborts the
whole run.
"""


class ProfileError(Exception):
    """Base class for profile-related errors."""

    pass


class ProfileValidationError(ProfileError):
    """Error during profile validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)


class ConversionParamsError(ProfileError):
    """Raised when conversion parameters are invalid for the target codec."""

    def __init__(self, errors: list[str]) -> None:
        """Initialize the error.

        Args:
            errors: Individual validation failures.
        """
        self.errors = errors
        super().__init__("Invalid conversion parameters: " + "; ".join(errors))
