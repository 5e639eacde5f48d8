"""
CatTrack Backend — Authorization Evaluator
===========================================

What:  The single decision point for "may this actor do this to that record?".
How:   A table maps each Action to one rule (a predicate over actor id, actor
       role and resource owner id) plus the reason reported on denial.
Who:   Every mutating operation in UserService and CatService calls
       `authorize()` after fetching the current record.

Rules:
    ┌────────────────┬──────────────────────────────────┬────────────────┐
    │ Action         │ Allowed when                     │ Deny reason    │
    ├────────────────┼──────────────────────────────────┼────────────────┤
    │ delete-any     │ actor is admin                   │ admin required │
    │ reassign-owner │ actor is admin OR actor is owner │ admin required │
    │ delete-own     │ actor is owner                   │ owner required │
    │ update-own     │ actor is owner                   │ owner required │
    │ read           │ always                           │ –              │
    └────────────────┴──────────────────────────────────┴────────────────┘

    `reassign-owner` and `delete-any` are both admin-gated but have different
    allowed-actor sets, so each has its own row.

`decide` is pure: no I/O, no state, same inputs give the same Decision.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, NamedTuple, Optional

from cattrack.exceptions import ForbiddenError
from cattrack.models.user import Actor, Role

logger = logging.getLogger(__name__)

ADMIN_REQUIRED = "admin required"
OWNER_REQUIRED = "owner required"


class Action(str, Enum):
    READ = "read"
    UPDATE_OWN = "update-own"
    DELETE_OWN = "delete-own"
    DELETE_ANY = "delete-any"
    REASSIGN_OWNER = "reassign-owner"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None


ALLOW = Decision(allowed=True)

Predicate = Callable[[str, Role, Optional[str]], bool]


class Rule(NamedTuple):
    check: Predicate
    deny_reason: Optional[str]


def _always(actor_id: str, actor_role: Role, owner_id: Optional[str]) -> bool:
    return True


def _is_admin(actor_id: str, actor_role: Role, owner_id: Optional[str]) -> bool:
    return actor_role == Role.ADMIN


def _is_owner(actor_id: str, actor_role: Role, owner_id: Optional[str]) -> bool:
    return owner_id is not None and actor_id == owner_id


def _is_admin_or_owner(actor_id: str, actor_role: Role, owner_id: Optional[str]) -> bool:
    return _is_admin(actor_id, actor_role, owner_id) or _is_owner(actor_id, actor_role, owner_id)


RULES: Dict[Action, Rule] = {
    Action.DELETE_ANY: Rule(_is_admin, ADMIN_REQUIRED),
    Action.REASSIGN_OWNER: Rule(_is_admin_or_owner, ADMIN_REQUIRED),
    Action.DELETE_OWN: Rule(_is_owner, OWNER_REQUIRED),
    Action.UPDATE_OWN: Rule(_is_owner, OWNER_REQUIRED),
    Action.READ: Rule(_always, None),
}


def decide(
    actor_id: str,
    actor_role: Role,
    resource_owner_id: Optional[str],
    action: Action,
) -> Decision:
    """
    Evaluate one action against the rule table.

    Args:
        actor_id: Identifier of the authenticated user.
        actor_role: Role claimed in the actor's token.
        resource_owner_id: `owner._id` for cats, the user's own `_id` for users.
        action: What the actor wants to do.

    Returns:
        ALLOW, or a denied Decision carrying the rule's reason.
    """
    rule = RULES[Action(action)]
    if rule.check(actor_id, Role(actor_role), resource_owner_id):
        return ALLOW
    return Decision(allowed=False, reason=rule.deny_reason)


def authorize(
    actor: Actor,
    resource_owner_id: Optional[str],
    action: Action,
    message: str,
) -> None:
    """
    Raise ForbiddenError(message, reason) unless `decide` allows the action.

    `message` is the operation's user-facing text ("Only owner can update cat").
    """
    decision = decide(actor.id, actor.role, resource_owner_id, action)
    if not decision.allowed:
        logger.warning(
            "Denied %s for actor %s on resource owned by %s: %s",
            action.value,
            actor.id,
            resource_owner_id,
            decision.reason,
        )
        raise ForbiddenError(
            message=message,
            reason=decision.reason,
            context={"action": action.value, "actor_id": actor.id},
        )
