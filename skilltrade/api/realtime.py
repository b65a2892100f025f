"""
Real-time channel.

One WebSocket per client, authenticated with ``?token=<bearer jwt>``.
Client frames:

    {"type": "subscribe", "swapId": 1}
    {"type": "unsubscribe", "swapId": 1}
    {"type": "message", "swapId": 1, "content": "..."}
    {"type": "ping"}

``message`` frames are relayed to the other subscribers of that swap only
and are not stored; persistence goes through ``POST /messages``. All
outbound frames go through the connection's queue so a single task writes
to the socket.
"""

import asyncio
import contextlib
import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from skilltrade.config import settings
from skilltrade.database import SessionLocal
from skilltrade.exceptions import SkillTradeError, ValidationError
from skilltrade.services import swap_service
from skilltrade.services.realtime import Subscriber, hub
from skilltrade.utils.security import resolve_user_from_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime"])

WS_UNAUTHORIZED = 4001


def _authenticate(token: str) -> Optional[str]:
    # Sockets live for minutes; each lookup borrows a connection and returns it.
    db = SessionLocal()
    try:
        user = resolve_user_from_token(db, token)
        return user.id if user else None
    finally:
        db.close()


def _check_participant(swap_id: int, user_id: str) -> None:
    db = SessionLocal()
    try:
        # Raises NotFoundError / UnauthorizedError for strangers.
        swap_service.get_swap_for_participant(db, swap_id, user_id)
    finally:
        db.close()


def _error_frame(exc: SkillTradeError) -> Dict[str, Any]:
    return {"type": "error", **exc.to_dict()}


def _swap_id(frame: Dict[str, Any]) -> int:
    swap_id = frame.get("swapId")
    if isinstance(swap_id, bool) or not isinstance(swap_id, int):
        raise ValidationError("swapId must be an integer")
    return swap_id


async def _pump(websocket: WebSocket, subscriber: Subscriber) -> None:
    try:
        while True:
            envelope = await subscriber.queue.get()
            await websocket.send_json(envelope)
    except (WebSocketDisconnect, RuntimeError) as exc:
        # Peer went away mid-send; the receive loop sees the disconnect.
        logger.debug("Realtime writer for %s stopped: %r", subscriber.connection_id, exc)


async def _handle_frame(
    frame: Dict[str, Any],
    subscriber: Subscriber,
) -> Optional[Dict[str, Any]]:
    """Apply one client frame; returns the reply for the sender, if any."""
    frame_type = frame.get("type")

    if frame_type == "ping":
        return {"type": "pong"}

    if frame_type == "subscribe":
        swap_id = _swap_id(frame)
        await run_in_threadpool(_check_participant, swap_id, subscriber.user_id)
        hub.subscribe_swap(subscriber.connection_id, swap_id)
        return {"type": "subscribed", "swapId": swap_id}

    if frame_type == "unsubscribe":
        swap_id = _swap_id(frame)
        hub.unsubscribe_swap(subscriber.connection_id, swap_id)
        return {"type": "unsubscribed", "swapId": swap_id}

    if frame_type == "message":
        swap_id = _swap_id(frame)
        if not hub.is_subscribed(subscriber.connection_id, swap_id):
            raise ValidationError(f"Subscribe to swap {swap_id} before sending")
        envelope = {**frame, "swapId": swap_id, "senderId": subscriber.user_id}
        hub.publish(envelope, swap_id=swap_id, exclude=subscriber.connection_id)
        return None

    raise ValidationError(f"Unknown frame type: {frame_type!r}")


@router.websocket(settings.REALTIME_PATH)
async def realtime_endpoint(
    websocket: WebSocket,
    token: Optional[str] = Query(None),
):
    user_id = await run_in_threadpool(_authenticate, token) if token else None
    if user_id is None:
        logger.warning("Realtime connection rejected: missing or invalid token")
        await websocket.close(code=WS_UNAUTHORIZED)
        return

    await websocket.accept()
    subscriber = hub.register(user_id)
    sender = asyncio.create_task(_pump(websocket, subscriber))

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                frame = json.loads(raw)
                if not isinstance(frame, dict):
                    raise ValidationError("Frames must be JSON objects")
                reply = await _handle_frame(frame, subscriber)
            except json.JSONDecodeError:
                reply = _error_frame(ValidationError("Frames must be valid JSON"))
            except SkillTradeError as exc:
                reply = _error_frame(exc)
            if reply is not None:
                subscriber.offer(reply)
    except WebSocketDisconnect:
        pass
    finally:
        hub.unregister(subscriber.connection_id)
        sender.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sender
