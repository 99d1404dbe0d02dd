"""
Subject keys for permitted.

A subject key identifies the class of thing an action is performed on.
It is either an explicit tag (a string, an enum member, or a ``Tag``) or
a reference to a type. Concrete objects are never keys themselves; they
resolve to the key of their runtime type, so rules declared against
``Comment`` apply to every ``Comment`` instance.
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


@dataclass(frozen=True)
class Tag:
    """
    An explicit, type-free subject key.

    Tags are useful for subjects that have no backing class, such as
    "dashboard" or "reports".

    Attributes:
        value: The tag value, normally a string or an enum member.

    Example:
        >>> ability.grant("view", Tag("dashboard"))
        >>> ability.can("view", "dashboard")
        True
    """
    value: Hashable

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class TypeRef:
    """A subject key referring to a type."""
    type: type

    def __str__(self) -> str:
        return self.type.__name__


SubjectKey = Union[Tag, TypeRef]


def is_subject_key(value: Any) -> bool:
    """
    Check whether a value is already a subject key.

    Strings, enum members and ``Tag`` objects count as tags; classes and
    ``TypeRef`` objects count as type references. Everything else is a
    concrete subject instance.
    """
    return isinstance(value, (Tag, TypeRef, type, str, Enum))


def key_of(value: Any) -> SubjectKey:
    """
    Resolve a value to its subject key.

    Args:
        value: A tag, a type, or a concrete subject instance.

    Returns:
        The value itself wrapped as a key, or the key of its exact
        runtime type. ``None`` resolves to ``TypeRef(NoneType)``.

    Example:
        >>> key_of(Comment) == key_of(Comment(body="hi"))
        True
        >>> key_of("reports")
        Tag(value='reports')
    """
    if isinstance(value, (Tag, TypeRef)):
        return value
    if isinstance(value, type):
        return TypeRef(value)
    if isinstance(value, (str, Enum)):
        return Tag(value)
    return TypeRef(type(value))
