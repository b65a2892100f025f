# skilltrade/services/session_service.py
"""
Session Lifecycle Manager

Learning sessions hang off an accepted swap. Allowed edges:
scheduled -> in_progress | cancelled | completed, in_progress -> completed.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from skilltrade import models
from skilltrade.config import settings
from skilltrade.crud import skill as skill_crud
from skilltrade.crud.user import user_brief
from skilltrade.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from skilltrade.models.session import SESSION_STATUSES
from skilltrade.services import swap_service
from skilltrade.services.meeting_links import MeetingLinkProvisioner, default_provisioner
from skilltrade.services.participants import (
    other_participant,
    participant_ids,
    require_participant,
)
from skilltrade.utils.timeutils import to_naive_utc, utcnow

logger = logging.getLogger(__name__)


SESSION_TRANSITIONS = {
    "scheduled": frozenset({"in_progress", "cancelled", "completed"}),
    "in_progress": frozenset({"completed"}),
    "completed": frozenset(),
    "cancelled": frozenset(),
}


def can_transition_session(current: str, requested: str) -> bool:
    return requested in SESSION_TRANSITIONS.get(current, frozenset())


# ======================
# VIEWS
# ======================

def serialize_session(session: models.LearningSession, viewer_id: str) -> Dict[str, Any]:
    return {
        "id": session.id,
        "swap_id": session.swap_id,
        "teacher_id": session.teacher_id,
        "student_id": session.student_id,
        "title": session.title,
        "description": session.description,
        "scheduled_at": session.scheduled_at,
        "duration": session.duration,
        "status": session.status,
        "meeting_link": session.meeting_link,
        "notes": session.notes,
        "is_teacher": session.teacher_id == viewer_id,
        "partner": user_brief(other_participant(session, viewer_id)),
        "skill": {"id": session.skill.id, "name": session.skill.name} if session.skill else None,
        "created_at": session.created_at,
        "updated_at": session.updated_at,
    }


def _participant_query(db: Session, user_id: str):
    return (
        db.query(models.LearningSession)
        .options(
            joinedload(models.LearningSession.teacher),
            joinedload(models.LearningSession.student),
            joinedload(models.LearningSession.skill),
        )
        .filter(or_(
            models.LearningSession.teacher_id == user_id,
            models.LearningSession.student_id == user_id,
        ))
    )


def require_session(db: Session, session_id: int) -> models.LearningSession:
    session = db.query(models.LearningSession).filter(
        models.LearningSession.id == session_id
    ).first()
    if not session:
        raise NotFoundError(f"Session {session_id} not found")
    return session


def sessions_for_user(db: Session, user_id: str) -> List[Dict[str, Any]]:
    sessions = (
        _participant_query(db, user_id)
        .order_by(models.LearningSession.scheduled_at.desc(), models.LearningSession.id.desc())
        .all()
    )
    return [serialize_session(s, user_id) for s in sessions]


def upcoming_sessions(
    db: Session,
    user_id: str,
    now: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Scheduled sessions still ahead of ``now``, earliest first."""
    now = to_naive_utc(now) or utcnow()
    if limit is None:
        limit = settings.UPCOMING_SESSIONS_LIMIT

    sessions = (
        _participant_query(db, user_id)
        .filter(
            models.LearningSession.scheduled_at > now,
            models.LearningSession.status == "scheduled",
        )
        .order_by(models.LearningSession.scheduled_at.asc(), models.LearningSession.id.asc())
        .limit(limit)
        .all()
    )
    return [serialize_session(s, user_id) for s in sessions]


# ======================
# CREATE
# ======================

def create_session(
    db: Session,
    actor_id: str,
    swap_id: int,
    teacher_id: str,
    student_id: str,
    skill_id: int,
    title: str,
    scheduled_at: datetime,
    duration: int,
    description: Optional[str] = None,
    meeting_link: Optional[str] = None,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
    provisioner: Optional[MeetingLinkProvisioner] = None,
) -> models.LearningSession:
    """
    Schedule a learning session for an accepted swap.

    The teacher must be the participant who offered ``skill_id`` in the swap
    and the student the other participant.

    Raises:
        NotFoundError: Swap or skill missing
        UnauthorizedError: Caller is not a swap participant
        PreconditionFailedError: Swap is not accepted
        ValidationError: Bad pair, skill, time, duration or title
    """
    swap = swap_service.require_swap(db, swap_id)
    require_participant(swap, actor_id, "swap")

    if swap.status != "accepted":
        raise PreconditionFailedError(
            f"Sessions can only be scheduled for accepted swaps (swap is {swap.status})"
        )

    if teacher_id == student_id or {teacher_id, student_id} != set(participant_ids(swap)):
        raise ValidationError("Teacher and student must be the two swap participants")

    skill_crud.require_skill(db, skill_id)
    taught_skill_id = (
        swap.requester_skill_id if teacher_id == swap.requester_id else swap.provider_skill_id
    )
    if skill_id != taught_skill_id:
        raise ValidationError("Skill must be the one the teacher offers in this swap")

    now = to_naive_utc(now) or utcnow()
    scheduled_at = to_naive_utc(scheduled_at)
    if scheduled_at is None or scheduled_at < now:
        raise ValidationError("scheduled_at must be now or in the future")

    if not isinstance(duration, int) or duration <= 0:
        raise ValidationError("duration must be a positive number of minutes")

    clean_title = (title or "").strip()
    if not clean_title:
        raise ValidationError("title is required")

    link = (meeting_link or "").strip() or (provisioner or default_provisioner).provision(clean_title)

    session = models.LearningSession(
        swap_id=swap.id,
        teacher_id=teacher_id,
        student_id=student_id,
        skill_id=skill_id,
        title=clean_title,
        description=(description or "").strip() or None,
        scheduled_at=scheduled_at,
        duration=duration,
        status="scheduled",
        meeting_link=link,
        notes=notes,
        created_at=now,
        updated_at=now,
    )
    db.add(session)
    db.commit()
    db.refresh(session)

    logger.info("Session %s scheduled for swap %s at %s", session.id, swap.id, scheduled_at)
    return session


# ======================
# TRANSITIONS
# ======================

def transition_session(
    db: Session,
    session: models.LearningSession,
    actor_id: str,
    new_status: str,
    now: Optional[datetime] = None,
) -> models.LearningSession:
    require_participant(session, actor_id, "session")

    if new_status not in SESSION_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(SESSION_STATUSES)}")

    current = session.status
    if not can_transition_session(current, new_status):
        raise InvalidTransitionError(f"Cannot move session from {current} to {new_status}")

    updated = (
        db.query(models.LearningSession)
        .filter(
            models.LearningSession.id == session.id,
            models.LearningSession.status == current,
        )
        .update(
            {"status": new_status, "updated_at": to_naive_utc(now) or utcnow()},
            synchronize_session=False,
        )
    )
    if updated != 1:
        db.rollback()
        raise ConflictError(f"Session {session.id} was changed by another request")

    db.commit()
    db.refresh(session)
    logger.info("Session %s: %s -> %s", session.id, current, new_status)
    return session


def update_session_status(
    db: Session,
    session_id: int,
    actor_id: str,
    new_status: str,
) -> models.LearningSession:
    session = require_session(db, session_id)
    return transition_session(db, session, actor_id, new_status)
