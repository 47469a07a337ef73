"""
Exceptions shared across the pusher configuration, client and pipeline.
"""

from __future__ import annotations


class NumerXPusherError(Exception):
    """Base exception for pusher failures."""


class ConfigurationError(NumerXPusherError):
    """Raised when settings are unusable; fatal before the pipeline starts."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        super().__init__("Invalid configuration:\n" + "\n".join(f"  - {p}" for p in self.problems))


class UnknownRequestKindError(ConfigurationError):
    """Raised when a request kind selector token is not recognised."""

    def __init__(self, token: str, valid_tokens: list[str]) -> None:
        self.token = token
        self.valid_tokens = list(valid_tokens)
        super().__init__(
            [f"Wrong request type parameter value provided: {token!r}. Valid values are: {', '.join(valid_tokens)}"]
        )


class NumerXTransportError(NumerXPusherError):
    """
    Raised when a request never produced a complete response.

    ``retryable`` is False for request errors that another attempt cannot
    fix, such as a malformed URL or a redirect loop.
    """

    def __init__(self, url: str, attempts: int, last_error: Exception, *, retryable: bool = True) -> None:
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        self.retryable = retryable
        super().__init__(f"Request to {url} failed after {attempts} attempt(s): {last_error}")


class ResponseParseError(NumerXPusherError):
    """Raised when a response body does not match the expected payload."""
