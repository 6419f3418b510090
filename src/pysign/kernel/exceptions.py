"""Unified exception hierarchy for PySign.

All library exceptions inherit from PySignException, enabling unified
error handling across modules.

Categories:
- ConfigurationException: Misuse of the hook layer or the client setup
- BusinessException: Invalid arguments passed to client operations

HTTP failures are deliberately absent: errors raised by httpx propagate
with their original type so callers can tell a failed API call apart
from a misconfigured client.
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class PySignException(Exception):
    """Base exception for all PySign errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "HOOKS_001").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(PySignException):
    """The library was wired or configured incorrectly."""


class HooksNotInitialized(ConfigurationException):
    """An instrumented operation was invoked on an instance without a HookRegistry."""


class InvalidHandler(ConfigurationException):
    """A non-callable value was registered as a hook handler."""


class EventNameCollision(ConfigurationException):
    """Two operations of one class derive the same hook event name."""


class MissingApiKeyException(ConfigurationException):
    """The API client was created without an API key."""


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(PySignException):
    """Domain rule violations and invalid operation arguments."""


class ValidationException(BusinessException):
    """Input validation failures."""
