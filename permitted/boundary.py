"""
Request boundary integration for permitted.

Request handlers opt in by inheriting AuthorizationBoundary. The mixin
memoizes one Ability per unit of work, records whether ``authorize``
ran, and fails the unit of work with AuthorizationNotPerformed when it
did not and no skip was declared.

Example:
    >>> class DocumentHandler(AuthorizationBoundary):
    ...     ability_class = AppAbility
    ...
    ...     def __init__(self, request):
    ...         self.request = request
    ...
    ...     def current_user(self):
    ...         return self.request.user
    ...
    ...     @check_authorization
    ...     def show(self, document):
    ...         self.authorize("read", document)
    ...         return document
    ...
    ...     @skip_authorization_check
    ...     def health(self):
    ...         return "ok"
"""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable, Hashable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, ParamSpec, TypeVar

from permitted.ability import Ability
from permitted.exceptions import AuthorizationNotPerformed, ConfigurationError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

_CHECK_MARK = "__check_authorization__"
_SKIP_MARK = "__skip_authorization__"


@dataclass(frozen=True)
class BoundaryConfig:
    """
    Configuration for an authorization boundary.

    Attributes:
        require_authorization: If True, a unit of work that neither
            authorized nor skipped raises AuthorizationNotPerformed.
            If False, it is only logged as a warning.
        unit_name: Default name reported for units of work that are
            entered without an explicit name.
    """

    require_authorization: bool = True
    unit_name: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.require_authorization, bool):
            raise ConfigurationError(
                config_key="require_authorization",
                expected="bool",
                received=self.require_authorization,
            )
        if self.unit_name is not None and not isinstance(self.unit_name, str):
            raise ConfigurationError(
                config_key="unit_name",
                expected="str or None",
                received=self.unit_name,
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "require_authorization": self.require_authorization,
            "unit_name": self.unit_name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BoundaryConfig:
        """Create config from dictionary."""
        return cls(
            require_authorization=data.get("require_authorization", True),
            unit_name=data.get("unit_name"),
        )


class AuthorizationBoundary:
    """
    Mixin for request handlers that enforce authorization.

    The handler must be scoped to a single unit of work (one request,
    one job). State lives on the handler instance: the memoized Ability
    and a flag recording that authorization was attempted or skipped.

    Override ``current_user`` to supply the actor, or ``build_ability``
    when the Ability needs different constructor arguments:

        >>> def build_ability(self):
        ...     return AppAbility(self.current_admin(), self.request.remote_ip)
    """

    ability_class: type[Ability] = Ability
    authorization_config: BoundaryConfig = BoundaryConfig()

    _current_ability: Ability | None = None
    _authorized: bool = False
    _unit_depth: int = 0

    def current_user(self) -> Any:
        """Return the actor for this unit of work. Defaults to None."""
        return None

    def build_ability(self) -> Ability:
        """Construct the Ability for this unit of work."""
        return self.ability_class(self.current_user())

    def current_ability(self) -> Ability:
        """
        Return the Ability for this unit of work, building it on first use.

        The Ability is memoized so that rule declarations run once per
        unit of work.
        """
        if self._current_ability is None:
            self._current_ability = self.build_ability()
            logger.debug(
                f"{type(self).__name__}: built {type(self._current_ability).__name__}"
            )
        return self._current_ability

    def can(self, action: Hashable, subject: Any, *args: Any) -> bool:
        """Check the current ability. See Ability.can."""
        return self.current_ability().can(action, subject, *args)

    def cannot(self, action: Hashable, subject: Any, *args: Any) -> bool:
        """Inverse of can(). See Ability.cannot."""
        return self.current_ability().cannot(action, subject, *args)

    def authorize(self, action: Hashable, subject: Any, *args: Any) -> None:
        """
        Authorize against the current ability.

        The unit of work is marked as authorized before the check, so a
        denied attempt still satisfies the enforcement check.

        Raises:
            AccessDenied: If the current ability cannot perform the action.
        """
        self._authorized = True
        self.current_ability().authorize(action, subject, *args)

    def skip_authorization(self) -> None:
        """Declare that this unit of work intentionally skips authorization."""
        self._authorized = True

    @property
    def authorization_performed(self) -> bool:
        """Whether authorize() or skip_authorization() ran in this unit of work."""
        return self._authorized

    def verify_authorized(self, unit: str | None = None) -> None:
        """
        Check that this unit of work authorized something.

        Args:
            unit: Name reported in the error, e.g. the handler name.

        Raises:
            AuthorizationNotPerformed: If neither authorize() nor
                skip_authorization() ran and enforcement is required.
        """
        if self._authorized:
            return

        unit = unit or self.authorization_config.unit_name
        if self.authorization_config.require_authorization:
            raise AuthorizationNotPerformed(unit)
        logger.warning(
            f"{type(self).__name__}: unit of work '{unit or 'unnamed'}' "
            "completed without authorization"
        )

    def reset_authorization(self) -> None:
        """Drop the memoized Ability and clear the authorization flag."""
        self._current_ability = None
        self._authorized = False

    @contextmanager
    def unit_of_work(self, name: str | None = None) -> Iterator[AuthorizationBoundary]:
        """
        Scope a unit of work and verify it authorized something.

        State is reset on entry and on exit. Verification only runs when
        the body completes normally; exceptions raised in the body
        propagate unchanged. Nested units join the outermost one.

        Args:
            name: Name reported if verification fails.

        Example:
            >>> with handler.unit_of_work("documents.show"):
            ...     handler.authorize("read", document)
        """
        if self._unit_depth:
            self._unit_depth += 1
            try:
                yield self
            finally:
                self._unit_depth -= 1
            return

        self.reset_authorization()
        self._unit_depth = 1
        try:
            yield self
            self.verify_authorized(name)
        finally:
            self._unit_depth = 0
            self.reset_authorization()


def check_authorization(func: Callable[P, T]) -> Callable[P, T]:
    """
    Decorator that enforces authorization on a handler method.

    The method runs inside ``unit_of_work`` named after it. If it returns
    without calling ``authorize`` or ``skip_authorization``,
    AuthorizationNotPerformed is raised. Works with both sync and async
    methods.

    Example:
        >>> class Handler(AuthorizationBoundary):
        ...     @check_authorization
        ...     def update(self, post):
        ...         self.authorize("update", post)
    """
    unit = func.__qualname__

    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            boundary = _boundary_from_args(args, func)
            with boundary.unit_of_work(unit):
                if _skips_authorization(async_wrapper):
                    boundary.skip_authorization()
                return await func(*args, **kwargs)
        setattr(async_wrapper, _CHECK_MARK, True)
        return async_wrapper  # type: ignore

    @functools.wraps(func)
    def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        boundary = _boundary_from_args(args, func)
        with boundary.unit_of_work(unit):
            if _skips_authorization(sync_wrapper):
                boundary.skip_authorization()
            return func(*args, **kwargs)
    setattr(sync_wrapper, _CHECK_MARK, True)
    return sync_wrapper


def skip_authorization_check(func: Callable[P, T]) -> Callable[P, T]:
    """
    Decorator that marks a handler method as not needing authorization.

    Works above or below ``check_authorization``; either way the
    handler is exempt from enforcement:

        >>> @skip_authorization_check
        ... @check_authorization
        ... def health(self):
        ...     return "ok"
    """
    # check_authorization reads this mark after resetting the unit of work.
    if getattr(func, _CHECK_MARK, False):
        setattr(func, _SKIP_MARK, True)

    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            _boundary_from_args(args, func).skip_authorization()
            return await func(*args, **kwargs)
        setattr(async_wrapper, _SKIP_MARK, True)
        return async_wrapper  # type: ignore

    @functools.wraps(func)
    def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        _boundary_from_args(args, func).skip_authorization()
        return func(*args, **kwargs)
    setattr(sync_wrapper, _SKIP_MARK, True)
    return sync_wrapper


def _skips_authorization(func: Callable[..., Any]) -> bool:
    return getattr(func, _SKIP_MARK, False)


def _boundary_from_args(args: tuple[Any, ...], func: Callable[..., Any]) -> AuthorizationBoundary:
    if not args or not isinstance(args[0], AuthorizationBoundary):
        raise TypeError(
            f"{func.__qualname__} must be a method of an AuthorizationBoundary subclass"
        )
    return args[0]
