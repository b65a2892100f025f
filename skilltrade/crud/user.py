from typing import Optional

from sqlalchemy.orm import Session

from skilltrade import models
from skilltrade.exceptions import NotFoundError
from skilltrade.utils.timeutils import utcnow

PROFILE_FIELDS = ("email", "first_name", "last_name", "profile_image_url", "bio", "location")


def get_user(db: Session, user_id: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def require_user(db: Session, user_id: str) -> models.User:
    user = get_user(db, user_id)
    if not user:
        raise NotFoundError(f"User {user_id} not found")
    return user


def upsert_user(db: Session, *, user_id: str, **fields) -> models.User:
    """Insert or update the mirrored identity row. Unknown keys are ignored."""
    user = get_user(db, user_id)
    if user is None:
        user = models.User(id=user_id)
        db.add(user)

    for key, value in fields.items():
        if key in PROFILE_FIELDS and value is not None:
            setattr(user, key, value)
    user.updated_at = utcnow()

    db.flush()
    return user


def user_brief(user: Optional[models.User]) -> Optional[dict]:
    """Public identity view embedded in swaps, sessions, messages and reviews."""
    if user is None:
        return None
    return {
        "id": user.id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "profile_image_url": user.profile_image_url,
    }
