"""
Ability class for permitted.

An Ability describes what one actor may do. Subclass it and declare
grants in ``__init__``, then ask it questions with ``can``/``cannot`` or
enforce it with ``authorize``.

Example:
    >>> class AppAbility(Ability):
    ...     def __init__(self, user):
    ...         super().__init__()
    ...         if user is not None and user.admin:
    ...             # Admins may do anything.
    ...             self.allow_anything()
    ...             return
    ...
    ...         # Always true for can("read", comment).
    ...         self.grant("read", Comment)
    ...
    ...         # Only true when the message belongs to the user.
    ...         @self.grant("read", PrivateMessage)
    ...         def owns_message(msg):
    ...             return user is not None and msg.user_id == user.id
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable
from typing import Any, overload

from permitted.exceptions import AccessDenied
from permitted.rules import Predicate
from permitted.store import PolicyStore

logger = logging.getLogger(__name__)


class Ability:
    """
    Actor-facing authorization facade.

    An Ability starts restricted: ``can`` consults the grants recorded
    in its PolicyStore. ``allow_anything`` moves it to the unrestricted
    state, where every check passes. There is no way back.

    The constructor accepts and ignores arbitrary arguments so that
    subclasses can take whatever identity objects they need.

    Thread Safety:
        Grants and the unrestricted transition are unsynchronized writes.
        Build the ability completely, then share it for read-only checks.
    """

    _unrestricted: bool = False

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        pass

    @property
    def _store(self) -> PolicyStore:
        # Created on first use so subclasses may grant before super().__init__().
        store = self.__dict__.get("_policy_store")
        if store is None:
            store = self.__dict__["_policy_store"] = PolicyStore()
        return store

    @property
    def unrestricted(self) -> bool:
        """Whether allow_anything() has been called on this instance."""
        return self._unrestricted

    def can(self, action: Hashable, subject: Any, *args: Any) -> bool:
        """
        Check whether the actor can perform an action on a subject.

        Args:
            action: The action, e.g. "read".
            subject: A subject instance, a type, or a tag.
            *args: Extra arguments handed to a conditional grant's predicate.

        Returns:
            True or False.

        Example:
            >>> ability.can("read", private_message, user.id)
        """
        if self._unrestricted:
            return True
        return self._store.lookup_rule(subject).authorized(action, subject, args)

    def cannot(self, action: Hashable, subject: Any, *args: Any) -> bool:
        """Inverse of can()."""
        return not self.can(action, subject, *args)

    @overload
    def grant(self, action: Hashable, subject: Any) -> Callable[[Predicate], Predicate]: ...

    @overload
    def grant(self, action: Hashable, subject: Any, predicate: Predicate) -> Predicate: ...

    def grant(
        self,
        action: Hashable,
        subject: Any,
        predicate: Predicate | None = None,
    ) -> Any:
        """
        Add an access-granting rule.

        Called with a predicate, the grant is conditional on it. Called
        without one, the grant is unconditional; the return value can
        still be used as a decorator to attach a predicate instead.

        Args:
            action: The action, e.g. "read", or MANAGE for every action.
            subject: A type, a tag, or an instance whose type is used.
            predicate: Optional callable taking (subject, *args).

        Returns:
            The predicate when one was given, otherwise a decorator.

        Example:
            >>> ability.grant("read", Comment)
            >>> ability.grant("update", Comment, lambda c, uid: c.author_id == uid)
            >>>
            >>> @ability.grant("delete", Comment)
            ... def is_author(comment, uid):
            ...     return comment.author_id == uid
        """
        rule = self._store.rule_for(subject)
        rule.add_grant(action, predicate)
        if predicate is not None:
            logger.debug(f"Granted '{action}' on '{subject!r}' (conditional)")
            return predicate

        logger.debug(
            f"Granted '{action}' on '{subject!r}' "
            "(unconditional unless a predicate is attached)"
        )

        def decorator(func: Predicate) -> Predicate:
            rule.add_grant(action, func)
            logger.debug(
                f"Attached predicate '{getattr(func, '__name__', func)}' "
                f"to '{action}' on '{subject!r}'"
            )
            return func

        return decorator

    def allow_anything(self) -> None:
        """
        Allow the actor to perform any action on any subject.

        Overrides every grant, past and future, for this instance only.
        """
        if not self._unrestricted:
            logger.warning(f"{type(self).__name__}: escalated to unrestricted access")
        self._unrestricted = True

    def authorize(self, action: Hashable, subject: Any, *args: Any) -> None:
        """
        Check authorization and raise if denied.

        Args:
            action: The intended action.
            subject: The subject of the action.
            *args: Extra arguments handed to a conditional grant's predicate.

        Raises:
            AccessDenied: If the actor cannot perform the action.
        """
        if self.cannot(action, subject, *args):
            logger.info(f"{type(self).__name__}: denied '{action}' on {subject!r}")
            raise AccessDenied(action, subject)
