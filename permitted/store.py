"""
Policy store for permitted.

Maps subject keys to their SubjectRule. Rules are created on the write
path the first time a grant is added for a key; the read path never
creates entries and answers misses with NULL_RULE.
"""

from __future__ import annotations

import logging
from typing import Any

from permitted.keys import SubjectKey, key_of
from permitted.rules import NULL_RULE, NullRule, SubjectRule

logger = logging.getLogger(__name__)


class PolicyStore:
    """
    Subject key to SubjectRule mapping owned by an Ability.

    Both paths resolve subjects with ``key_of``: tags and types are used
    as given, concrete instances resolve to their runtime type. Rules can
    therefore be declared against a type and checked against instances.

    Thread Safety:
        Not synchronized. Populate the store before sharing it; concurrent
        reads after that are safe.
    """

    def __init__(self) -> None:
        self._rules: dict[SubjectKey, SubjectRule] = {}

    def rule_for(self, subject: Any) -> SubjectRule:
        """
        Find or create the rule for a subject.

        Args:
            subject: A tag, a type, or an instance whose type is used.

        Returns:
            The SubjectRule stored for the subject's key.
        """
        key = key_of(subject)
        rule = self._rules.get(key)
        if rule is None:
            rule = SubjectRule()
            self._rules[key] = rule
            logger.debug(f"Created rule for subject '{key}'")
        return rule

    def lookup_rule(self, subject: Any) -> SubjectRule | NullRule:
        """
        Look up the rule for a subject without creating one.

        Args:
            subject: A tag, a type, or a concrete subject instance.

        Returns:
            The stored SubjectRule, or NULL_RULE if there is none.
        """
        return self._rules.get(key_of(subject), NULL_RULE)

    def __contains__(self, subject: Any) -> bool:
        return key_of(subject) in self._rules

    def __len__(self) -> int:
        return len(self._rules)
