# skilltrade/schemas/review.py
"""
Review & Rating Pydantic Schemas
"""

from datetime import datetime
from typing import Dict, Optional

from pydantic import Field

from skilltrade.schemas.common import CamelModel, UserBrief


# ======================
# REVIEW SCHEMAS
# ======================

class ReviewCreate(CamelModel):
    """Rating is range-checked by the review service."""
    session_id: int = Field(..., description="Session identifier")
    reviewee_id: Optional[str] = Field(None, description="Defaults to the other participant")
    rating: int = Field(..., description="Rating from 1 to 5 stars")
    comment: Optional[str] = Field(None, description="Review comment (max 1000 chars)")


class ReviewUpdate(CamelModel):
    rating: Optional[int] = Field(None, description="New rating (1-5)")
    comment: Optional[str] = Field(None, description="New comment")


class Review(CamelModel):
    id: int
    session_id: int
    reviewer_id: str
    reviewee_id: str
    rating: int
    comment: Optional[str] = None
    reviewer: Optional[UserBrief] = None
    session_title: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ======================
# RATING SCHEMAS
# ======================

class Rating(CamelModel):
    user_id: str
    rating: float = Field(..., description="Average rating (0-5), one decimal")
    total_reviews: int = 0
    distribution: Dict[int, int] = Field(default_factory=dict)
