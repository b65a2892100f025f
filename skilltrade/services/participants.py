"""
Caller-relative views over two-party entities.

Swaps store requester/provider and sessions store teacher/student; callers
always get "the other participant" computed on read.
"""

from typing import Optional, Tuple

from skilltrade.exceptions import UnauthorizedError

PARTICIPANT_FIELDS = {
    "Swap": ("requester_id", "provider_id"),
    "LearningSession": ("teacher_id", "student_id"),
    "Message": ("sender_id", "receiver_id"),
}


def participant_ids(entity) -> Tuple[str, str]:
    first, second = PARTICIPANT_FIELDS[type(entity).__name__]
    return getattr(entity, first), getattr(entity, second)


def is_participant(entity, user_id: str) -> bool:
    return user_id in participant_ids(entity)


def require_participant(entity, user_id: str, what: str = "resource") -> None:
    if not is_participant(entity, user_id):
        raise UnauthorizedError(f"Not a participant of this {what}")


def other_participant_id(entity, caller_id: str) -> str:
    first, second = participant_ids(entity)
    if caller_id == first:
        return second
    if caller_id == second:
        return first
    raise UnauthorizedError("Caller is not a participant")


def other_participant(entity, caller_id: str) -> Optional[object]:
    """The related User object of whoever is not the caller."""
    first_field, second_field = PARTICIPANT_FIELDS[type(entity).__name__]
    other_id = other_participant_id(entity, caller_id)
    # Relationship attribute names mirror the id columns without "_id".
    if other_id == getattr(entity, first_field):
        return getattr(entity, first_field[:-3])
    return getattr(entity, second_field[:-3])
