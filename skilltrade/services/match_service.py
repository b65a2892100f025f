# skilltrade/services/match_service.py
"""
Match Finder

A partner P matches user U when P wants to learn a skill U teaches AND P
teaches a skill U wants to learn. Pure read; no scoring or ranking.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session, aliased

from skilltrade import models
from skilltrade.config import settings
from skilltrade.crud import user as user_crud
from skilltrade.crud.user import user_brief

OPEN_SWAP_STATUSES = ("pending", "accepted")


def _skill_view(skill: models.Skill) -> Dict[str, Any]:
    return {"id": skill.id, "name": skill.name, "category": skill.category}


def _partners_with_open_swaps(db: Session, user_id: str) -> set:
    rows = db.query(models.Swap.requester_id, models.Swap.provider_id).filter(
        or_(models.Swap.requester_id == user_id, models.Swap.provider_id == user_id),
        models.Swap.status.in_(OPEN_SWAP_STATUSES),
    ).all()
    return {provider if requester == user_id else requester for requester, provider in rows}


def find_matches(
    db: Session,
    user_id: str,
    limit: Optional[int] = None,
    offset: int = 0,
    exclude_open_swaps: bool = False,
) -> List[Dict[str, Any]]:
    """
    Mutual-interest candidates for ``user_id``, one entry per partner.

    Args:
        db: Database session
        user_id: The user looking for partners
        limit: Page size (defaults to settings.MATCH_PAGE_SIZE)
        offset: Number of partners to skip
        exclude_open_swaps: Drop partners already in a pending/accepted swap

    Returns:
        ``[{"partner": ..., "wants_to_learn": skill U teaches,
        "offers_to_teach": skill U wants}]`` ordered by partner id

    Raises:
        NotFoundError: If ``user_id`` itself does not exist
    """
    user_crud.require_user(db, user_id)
    if limit is None:
        limit = settings.MATCH_PAGE_SIZE

    my_teach = aliased(models.UserSkill)
    my_learn = aliased(models.UserSkill)
    their_learn = aliased(models.UserSkill)
    their_teach = aliased(models.UserSkill)

    # W x O is a full product per partner, so the lowest pair is (min W, min O).
    want_id = func.min(their_learn.skill_id).label("want_id")
    offer_id = func.min(their_teach.skill_id).label("offer_id")

    query = (
        db.query(models.User, want_id, offer_id)
        # P wants to learn S1 ...
        .join(their_learn, and_(their_learn.user_id == models.User.id, their_learn.role == "learn"))
        # ... which U teaches
        .join(my_teach, and_(
            my_teach.skill_id == their_learn.skill_id,
            my_teach.user_id == user_id,
            my_teach.role == "teach",
        ))
        # P teaches S2 ...
        .join(their_teach, and_(their_teach.user_id == models.User.id, their_teach.role == "teach"))
        # ... which U wants to learn
        .join(my_learn, and_(
            my_learn.skill_id == their_teach.skill_id,
            my_learn.user_id == user_id,
            my_learn.role == "learn",
        ))
        .filter(models.User.id != user_id, models.User.is_active.is_(True))
    )

    if exclude_open_swaps:
        excluded = _partners_with_open_swaps(db, user_id)
        if excluded:
            query = query.filter(models.User.id.notin_(excluded))

    rows = (
        query.group_by(models.User.id)
        .order_by(models.User.id.asc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    if not rows:
        return []

    skill_ids = {row.want_id for row in rows} | {row.offer_id for row in rows}
    skills = {
        skill.id: skill
        for skill in db.query(models.Skill).filter(models.Skill.id.in_(skill_ids))
    }

    return [
        {
            "partner": {**user_brief(partner), "location": partner.location},
            "wants_to_learn": _skill_view(skills[wants]),
            "offers_to_teach": _skill_view(skills[offers]),
        }
        for partner, wants, offers in rows
    ]
