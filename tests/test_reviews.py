# tests/test_reviews.py
"""
Ratings & Review Core Logic Tests
Review CRUD, eligibility rules and rating aggregation
"""

from datetime import datetime, timedelta

import pytest

from skilltrade import models
from skilltrade.crud import review as review_crud
from skilltrade.exceptions import (
    ConflictError,
    NotFoundError,
    PreconditionFailedError,
    UnauthorizedError,
    ValidationError,
)
from skilltrade.services import review_service, stats_service


# ======================
# FIXTURES
# ======================

@pytest.fixture
def setup_users(db_session):
    for user_id in ("alice", "bob", "mallory"):
        db_session.add(models.User(id=user_id, first_name=user_id.title()))
    db_session.commit()
    return db_session


@pytest.fixture
def accepted_swap(setup_users):
    db = setup_users
    guitar = models.Skill(name="Guitar", category="Music")
    photo = models.Skill(name="Photography", category="Arts")
    db.add_all([guitar, photo])
    db.flush()
    swap = models.Swap(
        requester_id="alice",
        provider_id="bob",
        requester_skill_id=guitar.id,
        provider_skill_id=photo.id,
        status="accepted",
    )
    db.add(swap)
    db.commit()
    return swap


def _add_session(db, swap, status="completed", title="Lesson") -> models.LearningSession:
    """alice teaches bob."""
    session = models.LearningSession(
        swap_id=swap.id,
        teacher_id="alice",
        student_id="bob",
        skill_id=swap.requester_skill_id,
        title=title,
        scheduled_at=datetime(2030, 1, 1) + timedelta(days=db.query(models.LearningSession).count()),
        duration=60,
        status=status,
    )
    db.add(session)
    db.commit()
    return session


# ======================
# SUBMISSION
# ======================

def test_student_reviews_teacher_after_completion(setup_users, accepted_swap):
    db = setup_users
    session = _add_session(db, accepted_swap)

    review = review_service.create_review(db, session.id, "bob", rating=5, comment="  Great  ")

    assert review.reviewee_id == "alice"
    assert review.rating == 5
    assert review.comment == "Great"


def test_both_sides_can_review_the_same_session(setup_users, accepted_swap):
    db = setup_users
    session = _add_session(db, accepted_swap)

    review_service.create_review(db, session.id, "bob", rating=4)
    review = review_service.create_review(db, session.id, "alice", rating=5)

    assert review.reviewee_id == "bob"
    assert review_service.rating_for(db, "bob") == 5.0
    assert review_service.rating_for(db, "alice") == 4.0


@pytest.mark.parametrize("status", ["scheduled", "in_progress", "cancelled"])
def test_only_completed_sessions_can_be_reviewed(setup_users, accepted_swap, status):
    session = _add_session(setup_users, accepted_swap, status=status)
    with pytest.raises(PreconditionFailedError):
        review_service.create_review(setup_users, session.id, "bob", rating=5)


def test_outsider_cannot_review(setup_users, accepted_swap):
    session = _add_session(setup_users, accepted_swap)
    with pytest.raises(UnauthorizedError):
        review_service.create_review(setup_users, session.id, "mallory", rating=1)


def test_reviewee_must_be_other_participant(setup_users, accepted_swap):
    session = _add_session(setup_users, accepted_swap)
    with pytest.raises(ValidationError):
        review_service.create_review(setup_users, session.id, "bob", rating=5, reviewee_id="bob")
    with pytest.raises(ValidationError):
        review_service.create_review(setup_users, session.id, "bob", rating=5, reviewee_id="mallory")

    review = review_service.create_review(setup_users, session.id, "bob", rating=5, reviewee_id="alice")
    assert review.reviewee_id == "alice"


@pytest.mark.parametrize("rating", [0, 6, -1, True, 4.5, "5"])
def test_rating_must_be_integer_one_to_five(setup_users, accepted_swap, rating):
    session = _add_session(setup_users, accepted_swap)
    with pytest.raises(ValidationError):
        review_service.create_review(setup_users, session.id, "bob", rating=rating)


def test_one_review_per_session_and_reviewer(setup_users, accepted_swap):
    session = _add_session(setup_users, accepted_swap)
    review_service.create_review(setup_users, session.id, "bob", rating=5)

    with pytest.raises(ConflictError):
        review_service.create_review(setup_users, session.id, "bob", rating=1)
    assert review_service.rating_for(setup_users, "alice") == 5.0


def test_unknown_session(setup_users):
    with pytest.raises(NotFoundError):
        review_service.create_review(setup_users, 999, "bob", rating=5)


def test_comment_length_limit(setup_users, accepted_swap):
    session = _add_session(setup_users, accepted_swap)
    with pytest.raises(ValidationError):
        review_service.create_review(setup_users, session.id, "bob", rating=5, comment="x" * 1001)


# ======================
# UPDATE
# ======================

def test_update_review_changes_rating(setup_users, accepted_swap):
    session = _add_session(setup_users, accepted_swap)
    review = review_service.create_review(setup_users, session.id, "bob", rating=2)

    updated = review_service.update_review(setup_users, review.id, "bob", rating=4, comment="Better")

    assert updated.rating == 4
    assert updated.comment == "Better"
    assert updated.updated_at is not None
    assert review_service.rating_for(setup_users, "alice") == 4.0


def test_only_author_updates_review(setup_users, accepted_swap):
    session = _add_session(setup_users, accepted_swap)
    review = review_service.create_review(setup_users, session.id, "bob", rating=2)

    with pytest.raises(UnauthorizedError):
        review_service.update_review(setup_users, review.id, "alice", rating=5)
    with pytest.raises(NotFoundError):
        review_service.update_review(setup_users, 999, "bob", rating=5)
    with pytest.raises(ValidationError):
        review_service.update_review(setup_users, review.id, "bob", rating=9)


# ======================
# AGGREGATION
# ======================

def test_average_of_five_four_three_is_four(setup_users, accepted_swap):
    for rating in (5, 4, 3):
        session = _add_session(setup_users, accepted_swap)
        review_service.create_review(setup_users, session.id, "bob", rating=rating)

    assert review_service.rating_for(setup_users, "alice") == 4.0


def test_no_reviews_means_zero(setup_users):
    assert review_service.rating_for(setup_users, "alice") == 0.0
    assert review_crud.get_average_rating(setup_users, "nobody") == 0.0


def test_average_rounded_to_one_decimal(setup_users, accepted_swap):
    for rating in (5, 5, 4):
        session = _add_session(setup_users, accepted_swap)
        review_service.create_review(setup_users, session.id, "bob", rating=rating)

    assert review_service.rating_for(setup_users, "alice") == 4.7


def test_rating_summary_distribution(setup_users, accepted_swap):
    for rating in (5, 5, 3):
        session = _add_session(setup_users, accepted_swap)
        review_service.create_review(setup_users, session.id, "bob", rating=rating)

    summary = review_service.rating_summary(setup_users, "alice")
    assert summary["total_reviews"] == 3
    assert summary["distribution"] == {1: 0, 2: 0, 3: 1, 4: 0, 5: 2}


def test_reviews_for_user_newest_first_with_context(setup_users, accepted_swap):
    first = _add_session(setup_users, accepted_swap, title="Chords")
    second = _add_session(setup_users, accepted_swap, title="Scales")
    review_service.create_review(setup_users, first.id, "bob", rating=3)
    review_service.create_review(setup_users, second.id, "bob", rating=5)

    reviews = review_service.reviews_for_user(setup_users, "alice")
    assert [r["session_title"] for r in reviews] == ["Scales", "Chords"]
    assert reviews[0]["reviewer"]["id"] == "bob"
    assert review_service.reviews_for_user(setup_users, "bob") == []

    with pytest.raises(NotFoundError):
        review_service.reviews_for_user(setup_users, "ghost")


def test_user_stats(setup_users, accepted_swap):
    session = _add_session(setup_users, accepted_swap)
    _add_session(setup_users, accepted_swap, status="scheduled")
    review_service.create_review(setup_users, session.id, "bob", rating=4)

    stats = stats_service.user_stats(setup_users, "alice")
    assert stats == {
        "active_swaps": 1,
        "completed_swaps": 0,
        "total_sessions": 2,
        "avg_rating": 4.0,
    }
    assert stats_service.user_stats(setup_users, "mallory")["total_sessions"] == 0
