"""
Request context management using contextvars.

Holds the correlation ID of the request being served so that log records
and error bodies can carry it without threading it through every call.

Usage:
    token = set_correlation_id("abc")   # in middleware
    get_correlation_id()                # anywhere below it -> "abc"
    reset_correlation_id(token)
"""

from contextvars import ContextVar, Token

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def set_correlation_id(correlation_id: str) -> Token[str]:
    return _correlation_id.set(correlation_id)


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)


def get_correlation_id() -> str:
    """Correlation ID of the current request, or "" outside a request"""
    return _correlation_id.get()
