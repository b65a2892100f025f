from typing import Any, Dict

from sqlalchemy import or_
from sqlalchemy.orm import Session

from skilltrade import models
from skilltrade.services import review_service


def user_stats(db: Session, user_id: str) -> Dict[str, Any]:
    """Dashboard counters for one user."""
    swap_filter = or_(models.Swap.requester_id == user_id, models.Swap.provider_id == user_id)

    active_swaps = db.query(models.Swap).filter(
        swap_filter, models.Swap.status == "accepted"
    ).count()
    completed_swaps = db.query(models.Swap).filter(
        swap_filter, models.Swap.status == "completed"
    ).count()
    total_sessions = db.query(models.LearningSession).filter(
        or_(
            models.LearningSession.teacher_id == user_id,
            models.LearningSession.student_id == user_id,
        )
    ).count()

    return {
        "active_swaps": active_swaps,
        "completed_swaps": completed_swaps,
        "total_sessions": total_sessions,
        "avg_rating": review_service.rating_for(db, user_id),
    }
