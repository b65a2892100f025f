from datetime import datetime
from typing import Optional

from pydantic import field_validator

from skilltrade.schemas.common import CamelModel, SkillBrief, UserBrief


class SessionCreate(CamelModel):
    swap_id: int
    teacher_id: str
    student_id: str
    skill_id: int
    title: str
    description: Optional[str] = None
    scheduled_at: datetime
    duration: int
    meeting_link: Optional[str] = None
    notes: Optional[str] = None


class SessionStatusUpdate(CamelModel):
    status: str

    @field_validator("status")
    @classmethod
    def normalize_status(cls, v: str) -> str:
        return v.strip().lower()


class Session(CamelModel):
    id: int
    swap_id: int
    teacher_id: str
    student_id: str
    title: str
    description: Optional[str] = None
    scheduled_at: datetime
    duration: int
    status: str
    meeting_link: Optional[str] = None
    notes: Optional[str] = None
    is_teacher: bool
    partner: Optional[UserBrief] = None
    skill: Optional[SkillBrief] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
