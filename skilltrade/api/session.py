from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skilltrade import models, schemas
from skilltrade.database import get_db
from skilltrade.services import session_service
from skilltrade.utils.security import get_current_user

router = APIRouter(prefix="/sessions", tags=["Sessions"])


# ======================
# LIST
# ======================
@router.get("", response_model=List[schemas.Session])
def get_my_sessions(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return session_service.sessions_for_user(db, current_user.id)


@router.get("/upcoming", response_model=List[schemas.Session])
def get_upcoming_sessions(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return session_service.upcoming_sessions(db, current_user.id)


# ======================
# SCHEDULE
# ======================
@router.post("", response_model=schemas.Session, status_code=201)
def schedule_session(
    payload: schemas.SessionCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    session = session_service.create_session(
        db,
        actor_id=current_user.id,
        swap_id=payload.swap_id,
        teacher_id=payload.teacher_id,
        student_id=payload.student_id,
        skill_id=payload.skill_id,
        title=payload.title,
        scheduled_at=payload.scheduled_at,
        duration=payload.duration,
        description=payload.description,
        meeting_link=payload.meeting_link,
        notes=payload.notes,
    )
    return session_service.serialize_session(session, current_user.id)


# ======================
# STATUS
# ======================
@router.put("/{session_id}/status", response_model=schemas.Session)
def update_session_status(
    session_id: int,
    payload: schemas.SessionStatusUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    session = session_service.update_session_status(
        db, session_id, current_user.id, payload.status
    )
    return session_service.serialize_session(session, current_user.id)
