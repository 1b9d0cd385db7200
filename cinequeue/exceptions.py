"""CineQueue exception classes."""


class CineQueueError(Exception):
    """Base class for all CineQueue exceptions."""

    # Default HTTP status for API responses
    status_code: int = 500
    # Whether str(exc) may be shown to API clients outside development mode
    expose_message: bool = True


# Request errors
class ValidationError(CineQueueError, ValueError):
    """A required field is missing or a supplied value is invalid."""

    status_code = 400


# Authentication errors
class AuthError(CineQueueError):
    """Base class for authentication failures."""

    status_code = 401


class MissingTokenError(AuthError):
    """No bearer token was supplied, or the Authorization header is malformed."""

    status_code = 401


class TokenExpiredError(AuthError):
    """The bearer token was well-formed but has expired."""

    status_code = 401


class InvalidTokenError(AuthError):
    """The bearer token failed signature or claim verification."""

    status_code = 403


class InvalidCredentialsError(AuthError):
    """Username/password combination did not match a registered user."""

    status_code = 401


# Lookup errors
class NotFoundError(CineQueueError, LookupError):
    """Base class for missing records or provider results."""

    status_code = 404


class UserNotFoundError(NotFoundError):
    """The referenced user does not exist."""

    status_code = 404


class WatchlistEntryNotFoundError(NotFoundError):
    """The referenced watchlist entry does not exist for this user."""

    status_code = 404


class MediaNotFoundError(NotFoundError):
    """The metadata provider has no title matching the request."""

    status_code = 404


class NoBasisForRecommendationError(NotFoundError):
    """The user has no completed watchlist entries to recommend from."""

    status_code = 404


# Uniqueness errors
class ConflictError(CineQueueError):
    """Base class for uniqueness violations."""

    status_code = 409


class UsernameTakenError(ConflictError):
    """A user with the requested username already exists."""

    status_code = 409


class DuplicateWatchlistEntryError(ConflictError):
    """The title is already on the user's watchlist."""

    status_code = 409


# Metadata provider errors
class UpstreamError(CineQueueError):
    """The metadata provider could not be reached or returned an error."""

    status_code = 502
    expose_message = False


class ProviderError(UpstreamError):
    """The provider answered successfully but reported an error in the body.

    Provider errors are definitive answers and are never retried.
    """

    status_code = 502

    NOT_FOUND_MARKERS = ("not found", "incorrect imdb id", "too many results")

    def __init__(self, message: str) -> None:
        """Store the provider's error message.

        Args:
            message (str): Error text reported by the provider
        """
        super().__init__(message)
        self.message = message

    @property
    def is_not_found(self) -> bool:
        """Whether the provider is reporting absence of results."""
        lowered = self.message.lower()
        return any(marker in lowered for marker in self.NOT_FOUND_MARKERS)


class TransportError(UpstreamError):
    """The request failed in transit (connection, timeout or server error)."""

    status_code = 502


class RateLimitedError(TransportError):
    """The provider responded with HTTP 429."""


class ExhaustedRetriesError(UpstreamError):
    """All retry attempts failed; wraps the last underlying error."""

    status_code = 502

    def __init__(self, attempts: int, last_error: BaseException) -> None:
        """Record the attempt count and the final failure.

        Args:
            attempts (int): Total number of attempts made
            last_error (BaseException): The error raised by the final attempt
        """
        super().__init__(f"Failed after {attempts} attempts. Last error: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


# Application errors
class InternalError(CineQueueError):
    """Unexpected failure; details are hidden outside development mode."""

    status_code = 500
    expose_message = False


class ConfigError(CineQueueError):
    """Base class for configuration-related errors."""

    status_code = 500


class MissingSecretError(ConfigError, ValueError):
    """A required secret (API key, JWT secret) is not configured."""

    status_code = 500
