"""
Grants and subject rules for permitted.

A SubjectRule holds the grants recorded for one subject key, one grant
per action. Lookups that find no SubjectRule fall back to the shared
NULL_RULE, which denies everything.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Sequence
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

# Wildcard action. A grant stored under it matches every action.
MANAGE = "manage"

Predicate = Callable[..., Any]


class AlwaysAllow:
    """Grant that allows the action without inspecting the subject."""

    __slots__ = ()

    def allows(self, subject: Any, args: Sequence[Any]) -> bool:
        return True

    def __repr__(self) -> str:
        return "ALWAYS_ALLOW"


ALWAYS_ALLOW = AlwaysAllow()


@dataclass(frozen=True)
class Conditional:
    """
    Grant gated by a caller-supplied predicate.

    The predicate is called as ``predicate(subject, *args)`` and its
    result is coerced to a bool, so any truthy value allows the action.

    Attributes:
        predicate: The matching function.
    """
    predicate: Predicate

    def allows(self, subject: Any, args: Sequence[Any]) -> bool:
        return bool(self.predicate(subject, *args))


Grant = AlwaysAllow | Conditional


class SubjectRule:
    """
    Actions performable on one subject key.

    Each action maps to exactly one grant. Adding a grant for an action
    that already has one replaces it.

    Example:
        >>> rule = SubjectRule()
        >>> rule.add_grant("read")
        >>> rule.add_grant("update", lambda post, uid: post.author_id == uid)
        >>> rule.authorized("read", post, ())
        True
    """

    def __init__(self) -> None:
        self._grants: dict[Hashable, Grant] = {}

    def add_grant(self, action: Hashable, predicate: Predicate | None = None) -> None:
        """
        Add a granting rule for an action.

        Args:
            action: The action, usually a string such as "read".
            predicate: Optional callable for per-subject matching. Without
                one, the action is always allowed.
        """
        grant: Grant = ALWAYS_ALLOW if predicate is None else Conditional(predicate)
        if action in self._grants:
            logger.debug(f"Replacing grant for action '{action}': {grant!r}")
        self._grants[action] = grant

    def authorized(self, action: Hashable, subject: Any, args: Sequence[Any]) -> bool:
        """
        Return whether an action may be performed on a subject.

        A grant under MANAGE takes precedence over a grant for the
        specific action. The predicate of a conditional grant is only
        called once a grant has been found.

        Args:
            action: The action.
            subject: The subject, passed to the predicate.
            args: Extra arguments for the predicate.

        Returns:
            True or False.
        """
        grant = self._grants.get(MANAGE) or self._grants.get(action)
        if grant is None:
            return False
        return grant.allows(subject, args)

    def actions(self) -> list[Hashable]:
        """Return the actions that have a grant."""
        return list(self._grants)

    def __len__(self) -> int:
        return len(self._grants)

    def __repr__(self) -> str:
        return f"SubjectRule(actions={self.actions()!r})"


class NullRule:
    """Rule returned when nothing matched a subject. Denies everything."""

    __slots__ = ()

    def authorized(self, *args: Any, **kwargs: Any) -> bool:
        return False

    def __repr__(self) -> str:
        return "NULL_RULE"


NULL_RULE = NullRule()
