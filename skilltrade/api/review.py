# skilltrade/api/review.py
"""
Review & Rating API Endpoints
Reading reviews and ratings is public; writing requires a token.
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from skilltrade import models, schemas
from skilltrade.database import get_db
from skilltrade.services import review_service
from skilltrade.utils.security import get_current_user

router = APIRouter(tags=["Reviews & Ratings"])


# ======================
# REVIEW SUBMISSION
# ======================

@router.post("/reviews", response_model=schemas.Review, status_code=201)
def submit_review(
    payload: schemas.ReviewCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Review the other participant of a completed session.

    - **sessionId**: Completed session you took part in
    - **rating**: 1-5 stars
    - **comment**: Optional text (max 1000 characters)
    """
    review = review_service.create_review(
        db,
        session_id=payload.session_id,
        reviewer_id=current_user.id,
        reviewee_id=payload.reviewee_id,
        rating=payload.rating,
        comment=payload.comment,
    )
    return review_service.serialize_review(review)


@router.patch("/reviews/{review_id}", response_model=schemas.Review)
def update_review(
    review_id: int,
    payload: schemas.ReviewUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    review = review_service.update_review(
        db,
        review_id=review_id,
        reviewer_id=current_user.id,
        rating=payload.rating,
        comment=payload.comment,
    )
    return review_service.serialize_review(review)


# ======================
# PUBLIC QUERIES
# ======================

@router.get("/reviews/{user_id}", response_model=List[schemas.Review])
def get_user_reviews(
    user_id: str,
    limit: int = Query(50, ge=1, le=100, description="Max reviews to return"),
    offset: int = Query(0, ge=0, description="Pagination offset"),
    db: Session = Depends(get_db),
):
    return review_service.reviews_for_user(db, user_id, limit=limit, offset=offset)


@router.get("/rating/{user_id}", response_model=schemas.Rating)
def get_user_rating(user_id: str, db: Session = Depends(get_db)):
    return review_service.rating_summary(db, user_id)
