from datetime import datetime, timedelta

import pytest

from skilltrade import models
from skilltrade.crud import skill as skill_crud
from skilltrade.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    PreconditionFailedError,
    UnauthorizedError,
    ValidationError,
)
from skilltrade.services import session_service, swap_service
from skilltrade.services.meeting_links import JitsiLinkProvisioner

NOW = datetime(2030, 5, 1, 9, 0, 0)


class _FixedLinks:
    def __init__(self):
        self.titles = []

    def provision(self, title: str) -> str:
        self.titles.append(title)
        return f"https://rooms.example/{len(self.titles)}"


def _create_user(db, user_id: str) -> models.User:
    user = models.User(id=user_id, first_name=user_id.title())
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def swap_setup(db_session):
    """alice teaches Guitar to bob, bob teaches Photography to alice."""
    for user_id in ("alice", "bob", "mallory"):
        _create_user(db_session, user_id)
    guitar, _ = skill_crud.add_user_skill(db_session, "alice", "teach", skill_name="Guitar")
    photo, _ = skill_crud.add_user_skill(db_session, "bob", "teach", skill_name="Photography")
    db_session.commit()
    swap = swap_service.create_swap(db_session, "alice", "bob", guitar.skill_id, photo.skill_id)
    return {"db": db_session, "swap": swap, "guitar": guitar.skill_id, "photo": photo.skill_id}


@pytest.fixture
def accepted(swap_setup):
    swap_service.update_swap_status(swap_setup["db"], swap_setup["swap"].id, "bob", "accepted")
    return swap_setup


def _schedule(setup, **overrides):
    params = dict(
        actor_id="alice",
        swap_id=setup["swap"].id,
        teacher_id="alice",
        student_id="bob",
        skill_id=setup["guitar"],
        title="Open chords",
        scheduled_at=NOW + timedelta(days=1),
        duration=60,
        now=NOW,
        provisioner=_FixedLinks(),
    )
    params.update(overrides)
    return session_service.create_session(setup["db"], **params)


# ======================
# EDGE TABLE
# ======================

@pytest.mark.parametrize(
    "current,requested,allowed",
    [
        ("scheduled", "in_progress", True),
        ("scheduled", "cancelled", True),
        ("scheduled", "completed", True),
        ("in_progress", "completed", True),
        ("in_progress", "cancelled", False),
        ("in_progress", "scheduled", False),
        ("completed", "cancelled", False),
        ("completed", "scheduled", False),
        ("cancelled", "scheduled", False),
        ("cancelled", "completed", False),
    ],
)
def test_session_edge_table(current, requested, allowed):
    assert session_service.can_transition_session(current, requested) is allowed


# ======================
# CREATE
# ======================

def test_schedule_on_accepted_swap(accepted):
    session = _schedule(accepted)

    assert session.status == "scheduled"
    assert session.title == "Open chords"
    assert session.meeting_link == "https://rooms.example/1"
    assert session.swap_id == accepted["swap"].id


def test_student_may_schedule_too(accepted):
    session = _schedule(accepted, actor_id="bob")
    assert session.teacher_id == "alice"


def test_explicit_meeting_link_is_kept(accepted):
    session = _schedule(accepted, meeting_link="https://zoom.example/abc")
    assert session.meeting_link == "https://zoom.example/abc"


def test_default_provisioner_builds_jitsi_rooms():
    provisioner = JitsiLinkProvisioner("https://meet.jit.si/", "skilltrade")
    first = provisioner.provision("Lesson")
    second = provisioner.provision("Lesson")

    assert first.startswith("https://meet.jit.si/skilltrade-")
    assert first != second


def test_pending_swap_cannot_host_sessions(swap_setup):
    with pytest.raises(PreconditionFailedError):
        _schedule(swap_setup)


def test_unknown_swap(accepted):
    with pytest.raises(NotFoundError):
        _schedule(accepted, swap_id=999)


def test_outsider_cannot_schedule(accepted):
    with pytest.raises(UnauthorizedError):
        _schedule(accepted, actor_id="mallory")


@pytest.mark.parametrize(
    "overrides",
    [
        {"teacher_id": "alice", "student_id": "alice"},
        {"teacher_id": "alice", "student_id": "mallory"},
        {"skill_id": "photo"},
        {"scheduled_at": NOW - timedelta(minutes=1)},
        {"duration": 0},
        {"duration": -30},
        {"title": "   "},
    ],
)
def test_invalid_session_requests(accepted, overrides):
    if overrides.get("skill_id") == "photo":
        # alice does not teach Photography in this swap
        overrides = {"skill_id": accepted["photo"]}
    with pytest.raises(ValidationError):
        _schedule(accepted, **overrides)


def test_teacher_must_match_taught_skill(accepted):
    session = _schedule(accepted, teacher_id="bob", student_id="alice", skill_id=accepted["photo"])
    assert session.skill_id == accepted["photo"]


# ======================
# TRANSITIONS
# ======================

def test_happy_path_scheduled_in_progress_completed(accepted):
    db = accepted["db"]
    session = _schedule(accepted)

    session = session_service.update_session_status(db, session.id, "bob", "in_progress")
    assert session.status == "in_progress"
    session = session_service.update_session_status(db, session.id, "alice", "completed")
    assert session.status == "completed"


def test_in_progress_cannot_be_cancelled(accepted):
    db = accepted["db"]
    session = _schedule(accepted)
    session_service.update_session_status(db, session.id, "alice", "in_progress")

    with pytest.raises(InvalidTransitionError):
        session_service.update_session_status(db, session.id, "alice", "cancelled")


@pytest.mark.parametrize("terminal", ["completed", "cancelled"])
def test_terminal_sessions_are_frozen(accepted, terminal):
    db = accepted["db"]
    session = _schedule(accepted)
    session_service.update_session_status(db, session.id, "alice", terminal)

    for status in ("scheduled", "in_progress", "completed", "cancelled"):
        with pytest.raises(InvalidTransitionError):
            session_service.update_session_status(db, session.id, "alice", status)


def test_outsider_cannot_change_session(accepted):
    session = _schedule(accepted)
    with pytest.raises(UnauthorizedError):
        session_service.update_session_status(accepted["db"], session.id, "mallory", "cancelled")


def test_unknown_session_status(accepted):
    session = _schedule(accepted)
    with pytest.raises(ValidationError):
        session_service.update_session_status(accepted["db"], session.id, "alice", "postponed")


# ======================
# QUERIES
# ======================

def test_upcoming_sessions_ascending_scheduled_and_capped(accepted):
    db = accepted["db"]
    later = _schedule(accepted, title="Later", scheduled_at=NOW + timedelta(days=3))
    soon = _schedule(accepted, title="Soon", scheduled_at=NOW + timedelta(hours=2))
    past = _schedule(accepted, title="Already over", scheduled_at=NOW + timedelta(minutes=30))
    cancelled = _schedule(accepted, title="Called off", scheduled_at=NOW + timedelta(days=2))
    session_service.update_session_status(db, cancelled.id, "bob", "cancelled")

    view_time = NOW + timedelta(hours=1)
    titles = [s["title"] for s in session_service.upcoming_sessions(db, "bob", now=view_time)]
    assert titles == ["Soon", "Later"]
    assert past.id not in [s["id"] for s in session_service.upcoming_sessions(db, "bob", now=view_time)]

    capped = session_service.upcoming_sessions(db, "alice", now=view_time, limit=1)
    assert [s["id"] for s in capped] == [soon.id]
    assert later.id != soon.id


def test_upcoming_default_cap_is_five(accepted):
    for hours in range(1, 8):
        _schedule(accepted, title=f"Lesson {hours}", scheduled_at=NOW + timedelta(hours=hours))

    upcoming = session_service.upcoming_sessions(accepted["db"], "alice", now=NOW)
    assert [s["title"] for s in upcoming] == [f"Lesson {h}" for h in range(1, 6)]


def test_session_view_is_relative_to_caller(accepted):
    _schedule(accepted)
    alice_view = session_service.sessions_for_user(accepted["db"], "alice")[0]
    bob_view = session_service.sessions_for_user(accepted["db"], "bob")[0]

    assert alice_view["is_teacher"] is True
    assert alice_view["partner"]["id"] == "bob"
    assert bob_view["is_teacher"] is False
    assert bob_view["partner"]["id"] == "alice"
    assert bob_view["skill"]["name"] == "Guitar"
    assert session_service.sessions_for_user(accepted["db"], "mallory") == []
