from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from skilltrade import models
from skilltrade.config import settings
from skilltrade.crud.user import user_brief
from skilltrade.exceptions import NotFoundError, UnauthorizedError, ValidationError
from skilltrade.services import swap_service
from skilltrade.services.participants import other_participant_id, require_participant
from skilltrade.services.realtime import hub
from skilltrade.utils.timeutils import to_naive_utc, utcnow

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 5000

Publisher = Callable[..., int]


def serialize_message(message: models.Message, viewer_id: str) -> Dict[str, Any]:
    is_from_user = message.sender_id == viewer_id
    return {
        "id": message.id,
        "swap_id": message.swap_id,
        "sender_id": message.sender_id,
        "receiver_id": message.receiver_id,
        "sender": user_brief(message.sender),
        "content": message.content,
        "read_at": message.read_at,
        "created_at": message.created_at,
        "is_from_user": is_from_user,
        "is_unread": message.read_at is None and not is_from_user,
    }


def send_message(
    db: Session,
    *,
    swap_id: int,
    sender_id: str,
    content: str,
    receiver_id: Optional[str] = None,
    publish: Optional[Publisher] = None,
) -> models.Message:
    """
    Store a message in a swap thread and announce it on the real-time channel.

    The receiver defaults to the sender's swap partner. Publishing happens
    after commit and never fails the request.
    """
    swap = swap_service.require_swap(db, swap_id)
    require_participant(swap, sender_id, "swap")

    partner_id = other_participant_id(swap, sender_id)
    if receiver_id is None:
        receiver_id = partner_id
    elif receiver_id != partner_id:
        raise ValidationError("Receiver must be the other participant of the swap")

    clean_content = (content or "").strip()
    if not clean_content:
        raise ValidationError("Message content cannot be empty")
    if len(clean_content) > MAX_MESSAGE_LENGTH:
        raise ValidationError(f"Message must be {MAX_MESSAGE_LENGTH} characters or less")

    message = models.Message(
        swap_id=swap.id,
        sender_id=sender_id,
        receiver_id=receiver_id,
        content=clean_content,
        created_at=utcnow(),
    )
    db.add(message)
    db.commit()
    db.refresh(message)

    _announce(message, publish or hub.publish)
    return message


def _announce(message: models.Message, publish: Publisher) -> None:
    envelope = {
        "type": "message",
        "swapId": message.swap_id,
        "senderId": message.sender_id,
        "content": message.content,
        "messageId": message.id,
    }
    try:
        delivered = publish(
            envelope,
            swap_id=message.swap_id,
            user_ids=(message.sender_id, message.receiver_id),
        )
        logger.debug("Message %s announced to %s connections", message.id, delivered)
    except Exception as exc:
        logger.warning("Realtime publish failed for message %s: %s", message.id, exc)


def messages_for_swap(db: Session, swap_id: int, viewer_id: str) -> List[Dict[str, Any]]:
    swap = swap_service.require_swap(db, swap_id)
    require_participant(swap, viewer_id, "swap")

    messages = (
        db.query(models.Message)
        .options(joinedload(models.Message.sender))
        .filter(models.Message.swap_id == swap_id)
        .order_by(models.Message.created_at.asc(), models.Message.id.asc())
        .all()
    )
    return [serialize_message(m, viewer_id) for m in messages]


def recent_messages(
    db: Session,
    user_id: str,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Newest messages across every swap the user takes part in."""
    if limit is None:
        limit = settings.RECENT_MESSAGES_LIMIT

    messages = (
        db.query(models.Message)
        .options(joinedload(models.Message.sender))
        .filter(or_(models.Message.sender_id == user_id, models.Message.receiver_id == user_id))
        .order_by(models.Message.created_at.desc(), models.Message.id.desc())
        .limit(limit)
        .all()
    )
    return [serialize_message(m, user_id) for m in messages]


def unread_count(db: Session, user_id: str) -> int:
    return db.query(models.Message).filter(
        models.Message.receiver_id == user_id,
        models.Message.read_at.is_(None),
    ).count()


def mark_read(
    db: Session,
    message_id: int,
    viewer_id: str,
    now: Optional[datetime] = None,
) -> models.Message:
    """
    Set ``read_at`` the first time the receiver reads a message.

    Idempotent: later calls keep the first timestamp.
    """
    message = db.query(models.Message).filter(models.Message.id == message_id).first()
    if not message:
        raise NotFoundError(f"Message {message_id} not found")
    if message.receiver_id != viewer_id:
        raise UnauthorizedError("Only the receiver can mark a message as read")

    db.query(models.Message).filter(
        models.Message.id == message_id,
        models.Message.read_at.is_(None),
    ).update({"read_at": to_naive_utc(now) or utcnow()}, synchronize_session=False)
    db.commit()
    db.refresh(message)
    return message
