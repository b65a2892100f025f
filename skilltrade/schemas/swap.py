from datetime import datetime
from typing import Optional

from pydantic import field_validator

from skilltrade.schemas.common import CamelModel, SkillBrief, UserBrief


class SwapCreate(CamelModel):
    provider_id: str
    requester_skill_id: int
    provider_skill_id: int
    message: Optional[str] = None


class SwapStatusUpdate(CamelModel):
    status: str

    @field_validator("status")
    @classmethod
    def normalize_status(cls, v: str) -> str:
        return v.strip().lower()


class Swap(CamelModel):
    id: int
    status: str
    message: Optional[str] = None
    requester_id: str
    provider_id: str
    is_requester: bool
    partner: Optional[UserBrief] = None
    requester_skill: Optional[SkillBrief] = None
    provider_skill: Optional[SkillBrief] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ======================
# MATCHES
# ======================

class MatchPartner(UserBrief):
    location: Optional[str] = None


class MatchSkill(SkillBrief):
    category: Optional[str] = None


class Match(CamelModel):
    partner: MatchPartner
    wants_to_learn: MatchSkill
    offers_to_teach: MatchSkill
