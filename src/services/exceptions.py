"""Shared exceptions for service layer operations."""


class ServiceError(Exception):
    """
    Base class for recoverable service-layer errors.

    Each subclass is mapped to an HTTP status code by an exception handler in
    api.main. The message is safe to show to the client.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DuplicateEmailError(ServiceError):
    """Raised when an email is already registered to another account."""

    def __init__(self) -> None:
        super().__init__("Email already exists")


class InvalidCredentialsError(ServiceError):
    """
    Raised when sign-in fails.

    Unknown email and wrong password both raise this with the same message so
    callers cannot enumerate registered emails.
    """

    def __init__(self) -> None:
        super().__init__("Credentials incorrect")


class NotFoundError(ServiceError):
    """Raised when a referenced resource does not exist."""


class ForbiddenError(ServiceError):
    """Raised when the caller is authenticated but does not own the resource."""


class UserNotFoundError(NotFoundError):
    """Raised when a user id does not match any account."""

    def __init__(self) -> None:
        super().__init__("User not found")


class BookmarkNotFoundError(NotFoundError):
    """Raised when a bookmark id does not match any bookmark."""

    def __init__(self) -> None:
        super().__init__("Bookmark not found")


class BookmarkForbiddenError(ForbiddenError):
    """Raised when a bookmark exists but belongs to another user."""

    def __init__(self) -> None:
        super().__init__("Access denied to this bookmark")


class InvalidTokenError(ServiceError):
    """Raised when a bearer token fails signature or claim validation."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class ExpiredTokenError(InvalidTokenError):
    """Raised when a bearer token is past its expiry."""

    def __init__(self) -> None:
        super().__init__("Token has expired")
