"""
Pytest fixtures for permitted tests.

Provides users, subjects and abilities built from the sample domain in
tests/models.py.
"""

from __future__ import annotations

import pytest

from permitted import Ability, PolicyStore, SubjectRule
from tests.models import AppAbility, Comment, PrivateMessage, User


# ============================================================================
# User Fixtures
# ============================================================================


@pytest.fixture
def basic_user() -> User:
    """Create a regular user."""
    return User(id=7)


@pytest.fixture
def admin_user() -> User:
    """Create an admin user."""
    return User(id=1, admin=True)


# ============================================================================
# Subject Fixtures
# ============================================================================


@pytest.fixture
def comment() -> Comment:
    """Create a comment written by user 7."""
    return Comment(body="first!", author_id=7)


@pytest.fixture
def other_comment() -> Comment:
    """Create a comment written by someone else."""
    return Comment(body="second", author_id=8)


@pytest.fixture
def private_message() -> PrivateMessage:
    """Create a private message owned by user 7."""
    return PrivateMessage(owner_id=7, body="secret")


# ============================================================================
# Ability Fixtures
# ============================================================================


@pytest.fixture
def ability() -> Ability:
    """Create an empty ability with no grants."""
    return Ability()


@pytest.fixture
def app_ability(basic_user: User) -> AppAbility:
    """Create the sample application ability for a regular user."""
    return AppAbility(basic_user)


@pytest.fixture
def admin_ability(admin_user: User) -> AppAbility:
    """Create the sample application ability for an admin."""
    return AppAbility(admin_user)


@pytest.fixture
def subject_rule() -> SubjectRule:
    """Create an empty subject rule."""
    return SubjectRule()


@pytest.fixture
def policy_store() -> PolicyStore:
    """Create an empty policy store."""
    return PolicyStore()
