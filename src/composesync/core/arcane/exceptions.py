"""
Exceptions raised by the Arcane API client.

Exception Hierarchy:
    ArcaneError (base)
    ├── ArcaneAPIError (non-2xx response)
    ├── ArcaneNetworkError (transport failure, timeout)
    └── ArcaneParseError (undecodable response body)

Example:
    >>> try:
    ...     client.redeploy_project("abc")
    ... except ArcaneAPIError as e:
    ...     print(e.status_code, e.body)
"""


class ArcaneError(Exception):
    """
    Base exception for all Arcane client errors.

    Attributes:
        message: Human-readable error message
        context: Optional dictionary of additional context
    """

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class ArcaneAPIError(ArcaneError):
    """
    The API answered with a non-2xx status.

    The raw response body is preserved so the operator can see what
    Arcane complained about.
    """

    def __init__(self, status_code: int, body: str, **context: object) -> None:
        super().__init__(
            f"API error (status {status_code}): {body}",
            status_code=status_code,
            **context,
        )
        self.status_code = status_code
        self.body = body


class ArcaneNetworkError(ArcaneError):
    """
    The request never produced a response (connection refused, timeout).

    The underlying httpx exception is available via ``__cause__``.
    """


class ArcaneParseError(ArcaneError):
    """The response body could not be decoded into the expected shape."""


__all__ = [
    "ArcaneError",
    "ArcaneAPIError",
    "ArcaneNetworkError",
    "ArcaneParseError",
]
