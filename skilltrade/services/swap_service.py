# skilltrade/services/swap_service.py
"""
Swap Lifecycle Manager

pending -> accepted | rejected, accepted -> completed. Rejected and completed
are terminal. Status writes are compare-and-swap updates so two concurrent
transitions from the same state cannot both succeed.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from skilltrade import models
from skilltrade.crud import skill as skill_crud
from skilltrade.crud import user as user_crud
from skilltrade.crud.user import user_brief
from skilltrade.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from skilltrade.models.swap import SWAP_STATUSES
from skilltrade.services.participants import other_participant, require_participant
from skilltrade.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


# =====================================
# STATE MACHINE
# =====================================

SWAP_TRANSITIONS = {
    "pending": frozenset({"accepted", "rejected"}),
    "accepted": frozenset({"completed"}),
    "rejected": frozenset(),
    "completed": frozenset(),
}

# Only the provider answers a proposal; either side may complete.
PROVIDER_ONLY_STATUSES = frozenset({"accepted", "rejected"})


def can_transition_swap(current: str, requested: str) -> bool:
    return requested in SWAP_TRANSITIONS.get(current, frozenset())


def is_terminal(status: str) -> bool:
    return not SWAP_TRANSITIONS.get(status)


# =====================================
# VIEWS
# =====================================

def _skill_brief(skill: Optional[models.Skill]) -> Optional[Dict[str, Any]]:
    if skill is None:
        return None
    return {"id": skill.id, "name": skill.name}


def serialize_swap(swap: models.Swap, viewer_id: str) -> Dict[str, Any]:
    """Swap as seen by one of its participants."""
    return {
        "id": swap.id,
        "status": swap.status,
        "message": swap.message,
        "requester_id": swap.requester_id,
        "provider_id": swap.provider_id,
        "is_requester": swap.requester_id == viewer_id,
        "partner": user_brief(other_participant(swap, viewer_id)),
        "requester_skill": _skill_brief(swap.requester_skill),
        "provider_skill": _skill_brief(swap.provider_skill),
        "created_at": swap.created_at,
        "updated_at": swap.updated_at,
    }


# =====================================
# QUERIES
# =====================================

def require_swap(db: Session, swap_id: int) -> models.Swap:
    swap = db.query(models.Swap).filter(models.Swap.id == swap_id).first()
    if not swap:
        raise NotFoundError(f"Swap {swap_id} not found")
    return swap


def get_swap_for_participant(db: Session, swap_id: int, user_id: str) -> models.Swap:
    swap = require_swap(db, swap_id)
    require_participant(swap, user_id, "swap")
    return swap


def swaps_for_user(db: Session, user_id: str) -> List[Dict[str, Any]]:
    swaps = (
        db.query(models.Swap)
        .options(
            joinedload(models.Swap.requester),
            joinedload(models.Swap.provider),
            joinedload(models.Swap.requester_skill),
            joinedload(models.Swap.provider_skill),
        )
        .filter(or_(models.Swap.requester_id == user_id, models.Swap.provider_id == user_id))
        .order_by(models.Swap.updated_at.desc(), models.Swap.id.desc())
        .all()
    )
    return [serialize_swap(swap, user_id) for swap in swaps]


# =====================================
# CREATE
# =====================================

def validate_swap_skills(
    db: Session,
    requester_id: str,
    provider_id: str,
    requester_skill_id: int,
    provider_skill_id: int,
) -> None:
    """Boundary check: each side must have declared the skill it will teach."""
    if not skill_crud.user_declares(db, requester_id, requester_skill_id, "teach"):
        raise ValidationError("You do not teach the offered skill")
    if not skill_crud.user_declares(db, provider_id, provider_skill_id, "teach"):
        raise ValidationError("The provider does not teach the requested skill")


def create_swap(
    db: Session,
    requester_id: str,
    provider_id: str,
    requester_skill_id: int,
    provider_skill_id: int,
    message: Optional[str] = None,
    validate_skills: bool = False,
) -> models.Swap:
    """
    Propose a swap in ``pending`` state.

    With ``validate_skills`` each side must also have declared the skill it
    is offering to teach.

    Raises:
        ValidationError: If requester and provider are the same user, or a
            side does not teach its skill
        NotFoundError: If the provider or either skill does not exist
    """
    if requester_id == provider_id:
        raise ValidationError("Cannot propose a swap with yourself")

    user_crud.require_user(db, provider_id)
    skill_crud.require_skill(db, requester_skill_id)
    skill_crud.require_skill(db, provider_skill_id)
    if validate_skills:
        validate_swap_skills(db, requester_id, provider_id, requester_skill_id, provider_skill_id)

    now = utcnow()
    swap = models.Swap(
        requester_id=requester_id,
        provider_id=provider_id,
        requester_skill_id=requester_skill_id,
        provider_skill_id=provider_skill_id,
        status="pending",
        message=(message or "").strip() or None,
        created_at=now,
        updated_at=now,
    )
    db.add(swap)
    db.commit()
    db.refresh(swap)

    logger.info("Swap %s proposed by %s to %s", swap.id, requester_id, provider_id)
    return swap


# =====================================
# TRANSITIONS
# =====================================

def authorize_swap_transition(swap: models.Swap, actor_id: str, new_status: str) -> None:
    require_participant(swap, actor_id, "swap")
    if new_status in PROVIDER_ONLY_STATUSES and actor_id != swap.provider_id:
        raise UnauthorizedError(f"Only the provider can mark a swap as {new_status}")


def transition_swap(
    db: Session,
    swap: models.Swap,
    new_status: str,
    now: Optional[datetime] = None,
) -> models.Swap:
    """
    Move ``swap`` from its loaded status to ``new_status``.

    Raises:
        ValidationError: Unknown status value
        InvalidTransitionError: Edge not in SWAP_TRANSITIONS
        ConflictError: The row changed since ``swap`` was loaded
    """
    if new_status not in SWAP_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(SWAP_STATUSES)}")

    current = swap.status
    if not can_transition_swap(current, new_status):
        raise InvalidTransitionError(f"Cannot move swap from {current} to {new_status}")

    updated = (
        db.query(models.Swap)
        .filter(models.Swap.id == swap.id, models.Swap.status == current)
        .update(
            {"status": new_status, "updated_at": now or utcnow()},
            synchronize_session=False,
        )
    )
    if updated != 1:
        db.rollback()
        raise ConflictError(f"Swap {swap.id} was changed by another request")

    db.commit()
    db.refresh(swap)
    logger.info("Swap %s: %s -> %s", swap.id, current, new_status)
    return swap


def update_swap_status(db: Session, swap_id: int, actor_id: str, new_status: str) -> models.Swap:
    swap = require_swap(db, swap_id)
    authorize_swap_transition(swap, actor_id, new_status)
    return transition_swap(db, swap, new_status)
