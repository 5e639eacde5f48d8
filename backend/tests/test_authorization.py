"""
CatTrack Backend — Authorization Evaluator Unit Tests
======================================================

What:  Tests for the rule table behind every mutating operation.
How:   Pure function calls; no stores, no HTTP.

What we test:
    ✅ Owner-only actions allow the owner and deny everyone else
    ✅ Admin deletion ignores ownership
    ✅ Owner reassignment allows admins and the current owner
    ✅ Reads are always allowed
    ✅ Decisions are deterministic and every action has a rule
    ✅ authorize() raises ForbiddenError carrying message and reason
"""

import itertools

import pytest

from cattrack.exceptions import ForbiddenError
from cattrack.models.user import Role
from cattrack.services.authorization import (
    ADMIN_REQUIRED,
    ALLOW,
    OWNER_REQUIRED,
    RULES,
    Action,
    Decision,
    authorize,
    decide,
)

OWNER = "owner-id"
STRANGER = "stranger-id"


class TestOwnerOnlyActions:
    @pytest.mark.parametrize("action", [Action.UPDATE_OWN, Action.DELETE_OWN])
    def test_owner_allowed(self, action):
        assert decide(OWNER, Role.USER, OWNER, action) == ALLOW

    @pytest.mark.parametrize("action", [Action.UPDATE_OWN, Action.DELETE_OWN])
    def test_other_user_denied(self, action):
        decision = decide(STRANGER, Role.USER, OWNER, action)
        assert decision == Decision(allowed=False, reason=OWNER_REQUIRED)

    @pytest.mark.parametrize("action", [Action.UPDATE_OWN, Action.DELETE_OWN])
    def test_admin_is_not_owner(self, action):
        """Admins go through the admin routes; the owner-only rule does not bend."""
        assert decide(STRANGER, Role.ADMIN, OWNER, action).allowed is False

    def test_missing_owner_denied(self):
        assert decide(OWNER, Role.USER, None, Action.UPDATE_OWN).allowed is False


class TestAdminDeletion:
    def test_admin_allowed_regardless_of_owner(self):
        assert decide(STRANGER, Role.ADMIN, OWNER, Action.DELETE_ANY) == ALLOW
        assert decide(OWNER, Role.ADMIN, OWNER, Action.DELETE_ANY) == ALLOW

    def test_plain_user_denied(self):
        decision = decide(STRANGER, Role.USER, OWNER, Action.DELETE_ANY)
        assert decision == Decision(allowed=False, reason=ADMIN_REQUIRED)

    def test_owner_without_admin_role_denied(self):
        """delete-any does not share reassign-owner's owner exception."""
        assert decide(OWNER, Role.USER, OWNER, Action.DELETE_ANY).allowed is False


class TestOwnerReassignment:
    def test_admin_allowed(self):
        assert decide(STRANGER, Role.ADMIN, OWNER, Action.REASSIGN_OWNER) == ALLOW

    def test_current_owner_allowed(self):
        assert decide(OWNER, Role.USER, OWNER, Action.REASSIGN_OWNER) == ALLOW

    def test_stranger_denied(self):
        decision = decide(STRANGER, Role.USER, OWNER, Action.REASSIGN_OWNER)
        assert decision == Decision(allowed=False, reason=ADMIN_REQUIRED)


class TestReads:
    @pytest.mark.parametrize("role", [Role.USER, Role.ADMIN])
    def test_read_always_allowed(self, role):
        assert decide(STRANGER, role, OWNER, Action.READ) == ALLOW
        assert decide(STRANGER, role, None, Action.READ) == ALLOW


class TestTotality:
    def test_every_action_has_a_rule(self):
        assert set(RULES) == set(Action)

    def test_decisions_are_deterministic(self):
        actors = [OWNER, STRANGER]
        for actor_id, role, owner_id, action in itertools.product(
            actors, list(Role), actors + [None], list(Action)
        ):
            first = decide(actor_id, role, owner_id, action)
            second = decide(actor_id, role, owner_id, action)
            assert isinstance(first, Decision)
            assert first == second

    def test_accepts_string_values(self):
        assert decide(OWNER, "user", OWNER, "update-own") == ALLOW
        assert decide(STRANGER, "admin", OWNER, "delete-any") == ALLOW


class TestAuthorize:
    def test_allowed_returns_none(self, alice):
        assert authorize(alice, alice.id, Action.DELETE_OWN, "Only owner can delete cat") is None

    def test_denied_raises_with_reason(self, alice, bob):
        with pytest.raises(ForbiddenError) as exc_info:
            authorize(bob, alice.id, Action.DELETE_OWN, "Only owner can delete cat")
        assert exc_info.value.message == "Only owner can delete cat"
        assert exc_info.value.reason == OWNER_REQUIRED
        assert exc_info.value.status_code == 403
