"""
permitted: per-actor authorization rules for Python applications.

An Ability records which actions an actor may perform on which kinds of
subjects, and answers "may this actor do A to S?" with a boolean or by
raising AccessDenied.

Basic Usage:
    >>> from permitted import Ability, MANAGE
    >>>
    >>> class AppAbility(Ability):
    ...     def __init__(self, user):
    ...         super().__init__()
    ...         if user.admin:
    ...             self.allow_anything()
    ...             return
    ...         self.grant("read", Comment)
    ...         self.grant("read", PrivateMessage, lambda msg: msg.owner_id == user.id)
    ...         self.grant(MANAGE, Draft, lambda draft: draft.author_id == user.id)
    >>>
    >>> ability = AppAbility(user)
    >>> ability.can("read", comment)
    True
    >>> ability.authorize("delete", comment)
    Traceback (most recent call last):
        ...
    permitted.exceptions.AccessDenied: Access denied: cannot perform 'delete' on Comment instance ...

Request handlers can enforce that every unit of work authorizes
something by inheriting AuthorizationBoundary; see permitted.boundary.
"""

__version__ = "0.1.0"

from permitted.ability import Ability
from permitted.boundary import (
    AuthorizationBoundary,
    BoundaryConfig,
    check_authorization,
    skip_authorization_check,
)
from permitted.exceptions import (
    AccessDenied,
    AuthorizationNotPerformed,
    ConfigurationError,
    PermittedError,
)
from permitted.keys import SubjectKey, Tag, TypeRef, is_subject_key, key_of
from permitted.rules import (
    ALWAYS_ALLOW,
    MANAGE,
    NULL_RULE,
    AlwaysAllow,
    Conditional,
    Grant,
    NullRule,
    SubjectRule,
)
from permitted.store import PolicyStore

__all__ = [
    # Version
    "__version__",
    # Main class
    "Ability",
    # Rules
    "MANAGE",
    "Grant",
    "AlwaysAllow",
    "ALWAYS_ALLOW",
    "Conditional",
    "SubjectRule",
    "NullRule",
    "NULL_RULE",
    "PolicyStore",
    # Subject keys
    "SubjectKey",
    "Tag",
    "TypeRef",
    "key_of",
    "is_subject_key",
    # Boundary
    "AuthorizationBoundary",
    "BoundaryConfig",
    "check_authorization",
    "skip_authorization_check",
    # Exceptions
    "PermittedError",
    "AccessDenied",
    "AuthorizationNotPerformed",
    "ConfigurationError",
]
