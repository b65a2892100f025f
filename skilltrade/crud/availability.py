import re
from typing import Iterable, List

from sqlalchemy.orm import Session

from skilltrade import models
from skilltrade.exceptions import ValidationError

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def get_user_availability(db: Session, user_id: str) -> List[models.Availability]:
    return (
        db.query(models.Availability)
        .filter(models.Availability.user_id == user_id)
        .order_by(models.Availability.day_of_week.asc(), models.Availability.start_time.asc())
        .all()
    )


def _validate_slot(slot: dict) -> None:
    day = slot.get("day_of_week")
    if not isinstance(day, int) or not 0 <= day <= 6:
        raise ValidationError("day_of_week must be an integer between 0 (Sunday) and 6")
    start, end = slot.get("start_time") or "", slot.get("end_time") or ""
    if not TIME_PATTERN.match(start) or not TIME_PATTERN.match(end):
        raise ValidationError("start_time and end_time must use HH:MM")
    # Zero-padded HH:MM compares correctly as text
    if start >= end:
        raise ValidationError("start_time must be before end_time")
    if not (slot.get("timezone") or "").strip():
        raise ValidationError("timezone is required")


def set_user_availability(
    db: Session,
    user_id: str,
    slots: Iterable[dict],
) -> List[models.Availability]:
    """Replace the user's whole weekly availability."""
    slots = list(slots)
    for slot in slots:
        _validate_slot(slot)

    db.query(models.Availability).filter(
        models.Availability.user_id == user_id
    ).delete(synchronize_session=False)

    rows = [
        models.Availability(
            user_id=user_id,
            day_of_week=slot["day_of_week"],
            start_time=slot["start_time"],
            end_time=slot["end_time"],
            timezone=slot["timezone"].strip(),
        )
        for slot in slots
    ]
    db.add_all(rows)
    db.flush()
    return rows
