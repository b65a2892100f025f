from datetime import datetime

import pytest

from skilltrade import models
from skilltrade.crud import skill as skill_crud
from skilltrade.exceptions import NotFoundError, UnauthorizedError, ValidationError
from skilltrade.services import message_service, swap_service


class _RecordingPublisher:
    def __init__(self):
        self.calls = []

    def __call__(self, envelope, *, swap_id=None, user_ids=(), exclude=None):
        self.calls.append({"envelope": envelope, "swap_id": swap_id, "user_ids": tuple(user_ids)})
        return len(self.calls)


def _create_user(db, user_id: str) -> models.User:
    user = models.User(id=user_id, first_name=user_id.title())
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def swap(db_session):
    for user_id in ("alice", "bob", "mallory"):
        _create_user(db_session, user_id)
    guitar, _ = skill_crud.add_user_skill(db_session, "alice", "teach", skill_name="Guitar")
    photo, _ = skill_crud.add_user_skill(db_session, "bob", "teach", skill_name="Photography")
    db_session.commit()
    return swap_service.create_swap(db_session, "alice", "bob", guitar.skill_id, photo.skill_id)


def _send(db, swap, sender_id, content, **kwargs):
    kwargs.setdefault("publish", _RecordingPublisher())
    return message_service.send_message(
        db, swap_id=swap.id, sender_id=sender_id, content=content, **kwargs
    )


# ======================
# SEND
# ======================

def test_receiver_defaults_to_swap_partner(db_session, swap):
    message = _send(db_session, swap, "alice", "  Hello Bob  ")

    assert message.receiver_id == "bob"
    assert message.content == "Hello Bob"
    assert message.read_at is None


def test_messaging_does_not_require_accepted_swap(db_session, swap):
    swap_service.update_swap_status(db_session, swap.id, "bob", "rejected")
    message = _send(db_session, swap, "bob", "Sorry, maybe later")
    assert message.receiver_id == "alice"


def test_send_publishes_event_after_commit(db_session, swap):
    publisher = _RecordingPublisher()
    message = _send(db_session, swap, "alice", "Ping", publish=publisher)

    assert len(publisher.calls) == 1
    call = publisher.calls[0]
    assert call["swap_id"] == swap.id
    assert set(call["user_ids"]) == {"alice", "bob"}
    assert call["envelope"] == {
        "type": "message",
        "swapId": swap.id,
        "senderId": "alice",
        "content": "Ping",
        "messageId": message.id,
    }


def test_publish_failure_does_not_lose_the_message(db_session, swap):
    def broken(*args, **kwargs):
        raise RuntimeError("hub down")

    message = _send(db_session, swap, "alice", "Still stored", publish=broken)
    assert db_session.query(models.Message).filter(models.Message.id == message.id).count() == 1


def test_outsider_cannot_send(db_session, swap):
    with pytest.raises(UnauthorizedError):
        _send(db_session, swap, "mallory", "let me in")


def test_receiver_must_be_the_other_participant(db_session, swap):
    with pytest.raises(ValidationError):
        _send(db_session, swap, "alice", "hi", receiver_id="mallory")
    with pytest.raises(ValidationError):
        _send(db_session, swap, "alice", "note to self", receiver_id="alice")

    message = _send(db_session, swap, "alice", "hi", receiver_id="bob")
    assert message.receiver_id == "bob"


@pytest.mark.parametrize("content", ["", "   ", None])
def test_blank_content_rejected(db_session, swap, content):
    with pytest.raises(ValidationError):
        _send(db_session, swap, "alice", content)


def test_unknown_swap(db_session, swap):
    with pytest.raises(NotFoundError):
        message_service.send_message(
            db_session, swap_id=999, sender_id="alice", content="hi", publish=_RecordingPublisher()
        )


# ======================
# READ STATE
# ======================

def test_mark_read_is_idempotent(db_session, swap):
    message = _send(db_session, swap, "alice", "Read me")
    first = datetime(2030, 1, 1, 10, 0, 0)
    second = datetime(2030, 1, 2, 10, 0, 0)

    message_service.mark_read(db_session, message.id, "bob", now=first)
    again = message_service.mark_read(db_session, message.id, "bob", now=second)

    assert again.read_at == first


def test_only_receiver_marks_read(db_session, swap):
    message = _send(db_session, swap, "alice", "Read me")
    with pytest.raises(UnauthorizedError):
        message_service.mark_read(db_session, message.id, "alice")
    with pytest.raises(UnauthorizedError):
        message_service.mark_read(db_session, message.id, "mallory")
    with pytest.raises(NotFoundError):
        message_service.mark_read(db_session, 999, "bob")


def test_unread_count_tracks_receiver(db_session, swap):
    first = _send(db_session, swap, "alice", "one")
    _send(db_session, swap, "alice", "two")
    _send(db_session, swap, "bob", "reply")

    assert message_service.unread_count(db_session, "bob") == 2
    assert message_service.unread_count(db_session, "alice") == 1

    message_service.mark_read(db_session, first.id, "bob")
    assert message_service.unread_count(db_session, "bob") == 1


# ======================
# LISTINGS
# ======================

def test_swap_thread_is_chronological_and_private(db_session, swap):
    _send(db_session, swap, "alice", "first")
    _send(db_session, swap, "bob", "second")
    _send(db_session, swap, "alice", "third")

    thread = message_service.messages_for_swap(db_session, swap.id, "bob")
    assert [m["content"] for m in thread] == ["first", "second", "third"]
    assert [m["is_from_user"] for m in thread] == [False, True, False]

    with pytest.raises(UnauthorizedError):
        message_service.messages_for_swap(db_session, swap.id, "mallory")


def test_recent_messages_newest_first_with_flags(db_session, swap):
    for n in range(4):
        _send(db_session, swap, "alice", f"msg {n}")
    reply = _send(db_session, swap, "bob", "reply")

    recent = message_service.recent_messages(db_session, "bob", limit=3)
    assert [m["content"] for m in recent] == ["reply", "msg 3", "msg 2"]
    assert recent[0]["id"] == reply.id
    assert recent[0]["is_from_user"] is True
    assert recent[0]["is_unread"] is False
    assert recent[1]["is_unread"] is True
    assert recent[1]["sender"]["id"] == "alice"


def test_recent_messages_default_cap(db_session, swap, monkeypatch):
    monkeypatch.setattr(message_service.settings, "RECENT_MESSAGES_LIMIT", 2)
    for n in range(3):
        _send(db_session, swap, "alice", f"msg {n}")

    assert len(message_service.recent_messages(db_session, "alice")) == 2
    assert message_service.recent_messages(db_session, "mallory") == []
