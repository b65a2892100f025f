import logging
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from skilltrade import models
from skilltrade.exceptions import (
    ConflictError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from skilltrade.models.skill import SKILL_LEVELS, SKILL_ROLES

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "General"


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def normalize_role(raw: Optional[str]) -> str:
    role = _clean(raw).lower()
    if role not in SKILL_ROLES:
        raise ValidationError(f"role must be one of: {', '.join(SKILL_ROLES)}")
    return role


def normalize_level(raw: Optional[str]) -> str:
    level = _clean(raw).lower() or "beginner"
    if level not in SKILL_LEVELS:
        raise ValidationError(f"level must be one of: {', '.join(SKILL_LEVELS)}")
    return level


# ============================
# SKILL REGISTRY
# ============================

def get_skill(db: Session, skill_id: int) -> Optional[models.Skill]:
    return db.query(models.Skill).filter(models.Skill.id == skill_id).first()


def require_skill(db: Session, skill_id: int) -> models.Skill:
    skill = get_skill(db, skill_id)
    if not skill:
        raise NotFoundError(f"Skill {skill_id} not found")
    return skill


def get_skill_by_name(db: Session, name: str) -> Optional[models.Skill]:
    return db.query(models.Skill).filter(
        func.lower(models.Skill.name) == _clean(name).lower()
    ).first()


def list_skills(db: Session) -> List[models.Skill]:
    return db.query(models.Skill).order_by(models.Skill.name.asc()).all()


def create_skill(
    db: Session,
    name: str,
    category: str = DEFAULT_CATEGORY,
    description: Optional[str] = None,
) -> models.Skill:
    clean_name = _clean(name)
    clean_category = _clean(category)
    if not clean_name:
        raise ValidationError("Skill name is required")
    if not clean_category:
        raise ValidationError("Skill category is required")

    if get_skill_by_name(db, clean_name):
        raise ConflictError(f"Skill '{clean_name}' already exists")

    skill = models.Skill(
        name=clean_name,
        category=clean_category,
        description=_clean(description) or None,
    )
    try:
        # Only this insert is rolled back on a duplicate name.
        with db.begin_nested():
            db.add(skill)
    except IntegrityError:
        raise ConflictError(f"Skill '{clean_name}' already exists")
    return skill


def find_or_create_skill(
    db: Session,
    name: str,
    category: str = DEFAULT_CATEGORY,
    description: Optional[str] = None,
) -> models.Skill:
    """Resolve a free-text skill name to its canonical row, creating it once."""
    existing = get_skill_by_name(db, name)
    if existing:
        return existing
    try:
        return create_skill(db, name, category or DEFAULT_CATEGORY, description)
    except ConflictError:
        # Created concurrently between the lookup and the insert.
        existing = get_skill_by_name(db, name)
        if existing is None:
            raise
        return existing


def update_skill(
    db: Session,
    skill_id: int,
    name: Optional[str] = None,
    category: Optional[str] = None,
    description: Optional[str] = None,
) -> models.Skill:
    skill = require_skill(db, skill_id)

    if name is not None:
        clean_name = _clean(name)
        if not clean_name:
            raise ValidationError("Skill name cannot be blank")
        other = get_skill_by_name(db, clean_name)
        if other and other.id != skill.id:
            raise ConflictError(f"Skill '{clean_name}' already exists")
        skill.name = clean_name

    if category is not None:
        clean_category = _clean(category)
        if not clean_category:
            raise ValidationError("Skill category cannot be blank")
        skill.category = clean_category

    if description is not None:
        skill.description = _clean(description) or None

    db.flush()
    return skill


def is_skill_referenced(db: Session, skill_id: int) -> bool:
    if db.query(models.UserSkill.id).filter(models.UserSkill.skill_id == skill_id).first():
        return True
    if db.query(models.Swap.id).filter(
        or_(
            models.Swap.requester_skill_id == skill_id,
            models.Swap.provider_skill_id == skill_id,
        )
    ).first():
        return True
    return db.query(models.LearningSession.id).filter(
        models.LearningSession.skill_id == skill_id
    ).first() is not None


def delete_skill(db: Session, skill_id: int) -> None:
    skill = require_skill(db, skill_id)
    if is_skill_referenced(db, skill_id):
        raise PreconditionFailedError(
            f"Skill '{skill.name}' is referenced and cannot be deleted"
        )
    db.delete(skill)
    db.flush()


# ============================
# USER SKILLS (TEACH / LEARN)
# ============================

def list_user_skills(db: Session, user_id: str, role: Optional[str] = None) -> List[models.UserSkill]:
    query = (
        db.query(models.UserSkill)
        .options(joinedload(models.UserSkill.skill))
        .filter(models.UserSkill.user_id == user_id)
    )
    if role is not None:
        query = query.filter(models.UserSkill.role == normalize_role(role))
    return query.order_by(models.UserSkill.role.asc(), models.UserSkill.id.asc()).all()


def add_user_skill(
    db: Session,
    user_id: str,
    role: str,
    level: Optional[str] = None,
    skill_id: Optional[int] = None,
    skill_name: Optional[str] = None,
    category: Optional[str] = None,
    description: Optional[str] = None,
) -> tuple[models.UserSkill, str]:
    """
    Declare a skill in the user's ledger.

    Returns ``(entry, action)`` where action is ``"created"`` or ``"updated"``;
    re-declaring an existing (skill, role) pair updates it in place.
    """
    clean_role = normalize_role(role)
    clean_level = normalize_level(level)

    if skill_id is not None and _clean(skill_name):
        raise ValidationError("Provide either skill_id or skill_name, not both")
    if skill_id is not None:
        skill = require_skill(db, skill_id)
    elif _clean(skill_name):
        skill = find_or_create_skill(db, skill_name, category or DEFAULT_CATEGORY)
    else:
        raise ValidationError("skill_id or skill_name is required")

    existing = db.query(models.UserSkill).filter(
        models.UserSkill.user_id == user_id,
        models.UserSkill.skill_id == skill.id,
        models.UserSkill.role == clean_role,
    ).first()

    if existing:
        existing.level = clean_level
        if description is not None:
            existing.description = _clean(description) or None
        db.flush()
        return existing, "updated"

    user_skill = models.UserSkill(
        user_id=user_id,
        skill_id=skill.id,
        role=clean_role,
        level=clean_level,
        description=_clean(description) or None,
    )
    try:
        with db.begin_nested():
            db.add(user_skill)
    except IntegrityError:
        raise ConflictError(f"Skill '{skill.name}' is already in your {clean_role} list")
    return user_skill, "created"


def remove_user_skill(
    db: Session,
    user_id: str,
    skill_id: int,
    role: Optional[str] = None,
) -> int:
    """Hard-delete the caller's entries for a skill. Swaps are left untouched."""
    query = db.query(models.UserSkill).filter(
        models.UserSkill.user_id == user_id,
        models.UserSkill.skill_id == skill_id,
    )
    if role is not None:
        query = query.filter(models.UserSkill.role == normalize_role(role))

    removed = query.delete(synchronize_session=False)
    if not removed:
        raise NotFoundError("Skill not found in your list")
    logger.info("User %s removed %d ledger entries for skill %s", user_id, removed, skill_id)
    return int(removed)


def user_declares(db: Session, user_id: str, skill_id: int, role: str) -> bool:
    return db.query(models.UserSkill.id).filter(
        models.UserSkill.user_id == user_id,
        models.UserSkill.skill_id == skill_id,
        models.UserSkill.role == role,
    ).first() is not None
