"""
Custom exceptions for permitted.

This module defines the exception hierarchy for the library. Only two
errors are raised during normal operation: AccessDenied from
Ability.authorize, and AuthorizationNotPerformed from the request
boundary when a unit of work finishes without ever authorizing.
"""

from __future__ import annotations

from typing import Any

from permitted.keys import is_subject_key


def describe_subject(subject: Any) -> str:
    """Return a short human-readable label for a subject."""
    if isinstance(subject, type):
        return subject.__name__
    if is_subject_key(subject):
        return str(subject)
    return f"{type(subject).__name__} instance"


class PermittedError(Exception):
    """
    Root of the permitted error hierarchy.

    Rule lookups never raise; these errors come from enforcement
    (AccessDenied, AuthorizationNotPerformed) or from a bad
    BoundaryConfig (ConfigurationError). A request boundary can catch
    this one class and translate it into a response.

    Attributes:
        message: The denial or failure, phrased for a log line.
        details: Structured fields (action, subject label, unit name,
            config key) for serialization via ``to_dict``.

    Example:
        >>> try:
        ...     handler.show(comment)
        ... except AccessDenied:
        ...     return 403
        ... except PermittedError as e:
        ...     log.error("authorization misconfigured", extra=e.to_dict())
        ...     return 500
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class AccessDenied(PermittedError):
    """
    Raised when an ability fails a call to ``authorize``.

    Attributes:
        action: The action that was attempted (e.g., "read", "update").
        subject: The subject the action was attempted on. This is the
            object passed to ``authorize``, not a copy.
        reason: Explanation of the denial.

    Example:
        >>> raise AccessDenied(action="delete", subject=comment)
    """

    def __init__(
        self,
        action: Any,
        subject: Any,
        reason: str | None = None,
    ) -> None:
        self.action = action
        self.subject = subject
        self.reason = reason or "No grant matched"

        message = (
            f"Access denied: cannot perform '{action}' on "
            f"{describe_subject(subject)}"
        )
        details = {
            "action": action,
            "subject": describe_subject(subject),
            "reason": self.reason,
        }
        super().__init__(message, details)


class AuthorizationNotPerformed(PermittedError):
    """
    Raised when a unit of work completes without authorizing anything.

    A boundary that enforces authorization expects every unit of work to
    call ``authorize`` at least once, or to skip the check explicitly.

    Attributes:
        unit: Name of the unit of work (handler) that was not authorized.
    """

    def __init__(self, unit: str | None = None) -> None:
        self.unit = unit

        target = f"'{unit}'" if unit else "This unit of work"
        message = (
            f"{target} failed the authorization check because it did not "
            "authorize a subject. Call skip_authorization() or decorate the "
            "handler with skip_authorization_check to bypass this check."
        )
        details = {"unit": unit} if unit else None
        super().__init__(message, details)


class ConfigurationError(PermittedError):
    """
    Raised when boundary configuration is invalid.

    Attributes:
        config_key: The configuration key that has an issue.
        expected: What was expected for this configuration.
        received: What was actually provided.

    Example:
        >>> raise ConfigurationError(
        ...     config_key="require_authorization",
        ...     expected="bool",
        ...     received="yes"
        ... )
    """

    def __init__(
        self,
        config_key: str,
        expected: str | None = None,
        received: Any = None,
    ) -> None:
        self.config_key = config_key
        self.expected = expected
        self.received = received

        message = f"Configuration error for '{config_key}'"
        if expected:
            message += f": expected {expected}"
            if received is not None:
                message += f", got {received!r}"

        details = {
            "config_key": config_key,
            "expected": expected,
            "received": repr(received) if received is not None else None,
        }
        super().__init__(message, details)
