# skilltrade/crud/review.py
"""
Review CRUD Operations
Core database operations for ratings and reviews
"""

import math

from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func
from typing import Optional, List, Dict

from skilltrade.models.review import Review


# ======================
# REVIEW CRUD
# ======================

def create_review(
    db: Session,
    session_id: int,
    reviewer_id: str,
    reviewee_id: str,
    rating: int,
    comment: Optional[str] = None
) -> Review:
    """
    Insert a review row.

    Eligibility (participants, completed session, uniqueness) is checked by
    the review service before this is called.
    """
    review = Review(
        session_id=session_id,
        reviewer_id=reviewer_id,
        reviewee_id=reviewee_id,
        rating=rating,
        comment=comment
    )

    db.add(review)
    db.flush()
    return review


def get_review_by_id(db: Session, review_id: int) -> Optional[Review]:
    return db.query(Review).filter(Review.id == review_id).first()


def get_review_by_session_and_reviewer(
    db: Session,
    session_id: int,
    reviewer_id: str
) -> Optional[Review]:
    return db.query(Review).filter(
        Review.session_id == session_id,
        Review.reviewer_id == reviewer_id
    ).first()


def get_reviews_for_user(
    db: Session,
    reviewee_id: str,
    limit: int = 50,
    offset: int = 0
) -> List[Review]:
    """Reviews received by a user, newest first."""
    return (
        db.query(Review)
        .options(joinedload(Review.reviewer), joinedload(Review.session))
        .filter(Review.reviewee_id == reviewee_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )


def get_average_rating(db: Session, reviewee_id: str) -> float:
    """Mean rating rounded to one decimal; 0.0 when the user has no reviews."""
    avg = db.query(func.avg(Review.rating)).filter(
        Review.reviewee_id == reviewee_id
    ).scalar()
    if avg is None:
        return 0.0
    # Half-up, so 4.25 shows as 4.3
    return math.floor(float(avg) * 10 + 0.5) / 10


def get_rating_distribution(db: Session, reviewee_id: str) -> Dict[int, int]:
    rows = (
        db.query(Review.rating, func.count(Review.id))
        .filter(Review.reviewee_id == reviewee_id)
        .group_by(Review.rating)
        .all()
    )
    distribution = {star: 0 for star in range(1, 6)}
    for rating, count in rows:
        distribution[int(rating)] = int(count)
    return distribution
