from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skilltrade import models, schemas
from skilltrade.database import get_db
from skilltrade.services import message_service
from skilltrade.utils.security import get_current_user

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.get("", response_model=List[schemas.Message])
def get_recent_messages(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return message_service.recent_messages(db, current_user.id)


@router.get("/unread-count", response_model=schemas.UnreadCount)
def get_unread_count(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"count": message_service.unread_count(db, current_user.id)}


@router.get("/{swap_id}", response_model=List[schemas.Message])
def get_swap_messages(
    swap_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return message_service.messages_for_swap(db, swap_id, current_user.id)


@router.post("", response_model=schemas.Message, status_code=201)
def send_message(
    payload: schemas.MessageCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    message = message_service.send_message(
        db,
        swap_id=payload.swap_id,
        sender_id=current_user.id,
        receiver_id=payload.receiver_id,
        content=payload.content,
    )
    return message_service.serialize_message(message, current_user.id)


@router.put("/{message_id}/read", response_model=schemas.Message)
def mark_message_read(
    message_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    message = message_service.mark_read(db, message_id, current_user.id)
    return message_service.serialize_message(message, current_user.id)
