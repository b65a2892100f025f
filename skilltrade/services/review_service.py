# skilltrade/services/review_service.py
"""
Review Service Layer
Business logic for review submission and rating aggregation
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from skilltrade import models
from skilltrade.crud import review as review_crud
from skilltrade.crud import user as user_crud
from skilltrade.crud.user import user_brief
from skilltrade.exceptions import (
    ConflictError,
    NotFoundError,
    PreconditionFailedError,
    UnauthorizedError,
    ValidationError,
)
from skilltrade.services import session_service
from skilltrade.services.participants import other_participant_id, require_participant
from skilltrade.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 1000


def _validate_rating(rating) -> int:
    # bool is an int subclass; True is not a star rating
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("Rating must be an integer between 1 and 5")
    if not (1 <= rating <= 5):
        raise ValidationError("Rating must be between 1 and 5")
    return rating


def _clean_comment(comment: Optional[str]) -> Optional[str]:
    if comment is None:
        return None
    comment = comment.strip()
    if len(comment) > MAX_COMMENT_LENGTH:
        raise ValidationError(f"Comment must be {MAX_COMMENT_LENGTH} characters or less")
    return comment or None


def serialize_review(review: models.Review) -> Dict[str, Any]:
    return {
        "id": review.id,
        "session_id": review.session_id,
        "reviewer_id": review.reviewer_id,
        "reviewee_id": review.reviewee_id,
        "rating": review.rating,
        "comment": review.comment,
        "reviewer": user_brief(review.reviewer),
        "session_title": review.session.title if review.session else None,
        "created_at": review.created_at,
        "updated_at": review.updated_at,
    }


# ======================
# REVIEW SUBMISSION
# ======================

def create_review(
    db: Session,
    session_id: int,
    reviewer_id: str,
    rating: int,
    reviewee_id: Optional[str] = None,
    comment: Optional[str] = None,
) -> models.Review:
    """
    Rate the other participant of a completed session.

    Args:
        db: Database session
        session_id: Session being reviewed
        reviewer_id: Caller
        rating: Integer 1..5
        reviewee_id: Defaults to the other participant; must equal it when given
        comment: Optional text

    Raises:
        NotFoundError: Session does not exist
        UnauthorizedError: Reviewer did not take part in the session
        PreconditionFailedError: Session is not completed
        ValidationError: Wrong reviewee, bad rating or comment
        ConflictError: Reviewer already reviewed this session
    """
    session = session_service.require_session(db, session_id)
    require_participant(session, reviewer_id, "session")

    if session.status != "completed":
        raise PreconditionFailedError("Only completed sessions can be reviewed")

    partner_id = other_participant_id(session, reviewer_id)
    if reviewee_id is None:
        reviewee_id = partner_id
    elif reviewee_id != partner_id:
        raise ValidationError("Reviewee must be the other participant of the session")

    rating = _validate_rating(rating)
    comment = _clean_comment(comment)

    if review_crud.get_review_by_session_and_reviewer(db, session_id, reviewer_id):
        raise ConflictError("You have already reviewed this session")

    try:
        review = review_crud.create_review(
            db=db,
            session_id=session_id,
            reviewer_id=reviewer_id,
            reviewee_id=reviewee_id,
            rating=rating,
            comment=comment,
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("You have already reviewed this session")

    db.refresh(review)
    logger.info("Review %s: %s rated %s %d/5", review.id, reviewer_id, reviewee_id, rating)
    return review


def update_review(
    db: Session,
    review_id: int,
    reviewer_id: str,
    rating: Optional[int] = None,
    comment: Optional[str] = None,
) -> models.Review:
    """Edit your own review in place; omitted fields are left unchanged."""
    review = review_crud.get_review_by_id(db, review_id)
    if not review:
        raise NotFoundError(f"Review {review_id} not found")
    if review.reviewer_id != reviewer_id:
        raise UnauthorizedError("You can only update your own reviews")

    if rating is not None:
        review.rating = _validate_rating(rating)
    if comment is not None:
        review.comment = _clean_comment(comment)
    review.updated_at = utcnow()

    db.commit()
    db.refresh(review)
    return review


# ======================
# RATING QUERIES
# ======================

def reviews_for_user(
    db: Session,
    user_id: str,
    limit: int = 50,
    offset: int = 0,
) -> List[Dict[str, Any]]:
    user_crud.require_user(db, user_id)
    reviews = review_crud.get_reviews_for_user(db, user_id, limit=limit, offset=offset)
    return [serialize_review(r) for r in reviews]


def rating_for(db: Session, user_id: str) -> float:
    """Average received rating, one decimal; 0.0 when there are no reviews."""
    return review_crud.get_average_rating(db, user_id)


def rating_summary(db: Session, user_id: str) -> Dict[str, Any]:
    distribution = review_crud.get_rating_distribution(db, user_id)
    return {
        "user_id": user_id,
        "rating": rating_for(db, user_id),
        "total_reviews": sum(distribution.values()),
        "distribution": distribution,
    }
