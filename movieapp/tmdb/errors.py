"""TMDB client error taxonomy.

Every failure of the API client is one of the classes below. The client
never retries; callers decide whether to re-issue a request.
"""


class TMDBClientError(Exception):
    """Base exception for TMDB client errors.

    Attributes:
        user_message: Text suitable for showing next to a retry action.
    """

    user_message = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.user_message)


class TMDBInvalidRequestError(TMDBClientError):
    """Raised when endpoint and parameters do not form a valid URL."""

    user_message = "Invalid URL"


class TMDBUnauthorizedError(TMDBClientError):
    """Raised on HTTP 401: the API key is missing or rejected."""

    user_message = "Invalid API key. Please check your TMDb API key."


class TMDBUpstreamError(TMDBClientError):
    """Raised on any non-200 status other than 401."""

    def __init__(self, status_code: int, endpoint: str = "") -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(f"TMDB API error {status_code}: {endpoint}")

    @property
    def user_message(self) -> str:  # type: ignore[override]
        return f"Network error: HTTP {self.status_code}"


class TMDBDecodingError(TMDBClientError):
    """Raised when a response body does not match the expected schema."""

    user_message = "Failed to decode response"


class TMDBTransportError(TMDBClientError):
    """Raised when no response was obtained (connect, timeout, reset)."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Transport failure: {detail}")

    @property
    def user_message(self) -> str:  # type: ignore[override]
        return f"Network error: {self.detail}"
