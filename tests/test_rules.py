"""
Tests for grants and subject rules.

Tests cover:
- Grant variants (AlwaysAllow, Conditional)
- SubjectRule grant insertion and replacement
- Wildcard (manage) resolution order
- NullRule fallback
"""

from __future__ import annotations

import pytest

from permitted import (
    ALWAYS_ALLOW,
    MANAGE,
    NULL_RULE,
    Conditional,
    NullRule,
    SubjectRule,
)
from tests.models import Comment, PrivateMessage


class TestGrants:
    """Tests for the grant variants."""

    def test_always_allow_ignores_subject(self):
        """Test that ALWAYS_ALLOW allows regardless of subject or args."""
        assert ALWAYS_ALLOW.allows(None, ()) is True
        assert ALWAYS_ALLOW.allows(Comment(body="x"), (1, 2)) is True

    def test_conditional_passes_subject_and_args(self):
        """Test that the predicate receives the subject followed by args."""
        calls = []

        def predicate(subject, *args):
            calls.append((subject, args))
            return True

        grant = Conditional(predicate)
        grant.allows("subject", ("a", "b"))

        assert calls == [("subject", ("a", "b"))]

    @pytest.mark.parametrize(
        "result,expected",
        [(1, True), ("yes", True), ([0], True), (0, False), ("", False), (None, False)],
    )
    def test_conditional_coerces_result_to_bool(self, result, expected):
        """Test that truthy predicate results become True."""
        grant = Conditional(lambda subject: result)
        assert grant.allows(object(), ()) is expected


class TestSubjectRule:
    """Tests for SubjectRule."""

    def test_unknown_action_is_denied(self, subject_rule: SubjectRule):
        """Test that an action without a grant is denied."""
        subject_rule.add_grant("read")
        assert subject_rule.authorized("delete", Comment(body="x"), ()) is False

    def test_unconditional_grant(self, subject_rule: SubjectRule):
        """Test that a grant without a predicate always allows."""
        subject_rule.add_grant("read")
        assert subject_rule.authorized("read", Comment(body="x"), ()) is True

    def test_conditional_grant(self, subject_rule: SubjectRule):
        """Test that a predicate decides a conditional grant."""
        subject_rule.add_grant("read", lambda msg, uid: msg.owner_id == uid)
        message = PrivateMessage(owner_id=7)

        assert subject_rule.authorized("read", message, (7,)) is True
        assert subject_rule.authorized("read", message, (8,)) is False

    def test_predicate_not_called_without_grant(self, subject_rule: SubjectRule):
        """Test that no predicate runs when the action has no grant."""
        called = []
        subject_rule.add_grant("update", lambda s: called.append(s) or True)

        assert subject_rule.authorized("read", "subject", ()) is False
        assert called == []

    def test_grant_is_replaced(self, subject_rule: SubjectRule):
        """Test that the last grant for an action wins."""
        subject_rule.add_grant("read")
        subject_rule.add_grant("read", lambda s: False)

        assert subject_rule.authorized("read", "subject", ()) is False
        assert len(subject_rule) == 1

    def test_replacing_conditional_with_unconditional(self, subject_rule: SubjectRule):
        """Test that an unconditional grant replaces a predicate."""
        subject_rule.add_grant("read", lambda s: False)
        subject_rule.add_grant("read")

        assert subject_rule.authorized("read", "subject", ()) is True

    def test_manage_matches_any_action(self, subject_rule: SubjectRule):
        """Test that a manage grant allows every action."""
        subject_rule.add_grant(MANAGE)

        for action in ("read", "update", "destroy", "anything"):
            assert subject_rule.authorized(action, "subject", ()) is True

    def test_manage_wins_over_specific_grant_added_later(self, subject_rule: SubjectRule):
        """Test that manage takes precedence regardless of insertion order."""
        subject_rule.add_grant(MANAGE)
        subject_rule.add_grant("read", lambda s: False)

        assert subject_rule.authorized("read", "subject", ()) is True

    def test_manage_wins_over_specific_grant_added_earlier(self, subject_rule: SubjectRule):
        """Test that a conditional manage grant overrides a specific allow."""
        subject_rule.add_grant("read")
        subject_rule.add_grant(MANAGE, lambda s: False)

        assert subject_rule.authorized("read", "subject", ()) is False

    def test_any_action_identifier_is_accepted(self, subject_rule: SubjectRule):
        """Test that actions are not validated."""
        subject_rule.add_grant(("custom", 1))
        assert subject_rule.authorized(("custom", 1), "subject", ()) is True

    def test_actions_lists_granted_actions(self, subject_rule: SubjectRule):
        """Test listing granted actions."""
        subject_rule.add_grant("read")
        subject_rule.add_grant("update", lambda s: True)

        assert subject_rule.actions() == ["read", "update"]

    def test_predicate_errors_propagate(self, subject_rule: SubjectRule):
        """Test that a predicate receiving unexpected args raises."""
        subject_rule.add_grant("read", lambda msg: True)

        with pytest.raises(TypeError):
            subject_rule.authorized("read", "subject", ("unexpected",))


class TestNullRule:
    """Tests for the NullRule sentinel."""

    def test_denies_everything(self):
        """Test that NULL_RULE denies any input."""
        assert NULL_RULE.authorized("read", Comment(body="x"), ()) is False
        assert NULL_RULE.authorized(MANAGE, None, (1, 2, 3)) is False
        assert NULL_RULE.authorized() is False

    def test_is_stateless(self):
        """Test that NullRule instances hold no attributes."""
        with pytest.raises(AttributeError):
            NULL_RULE.grants = {}  # type: ignore[attr-defined]

    def test_shared_instance(self):
        """Test that NULL_RULE is a NullRule."""
        assert isinstance(NULL_RULE, NullRule)
