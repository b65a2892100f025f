from datetime import datetime
from typing import Optional

from pydantic import Field

from skilltrade.schemas.common import CamelModel

# ======================
# SKILL SCHEMAS
# ======================

class SkillBase(CamelModel):
    name: str = Field(..., max_length=100)
    category: str = Field("General", max_length=50)
    description: Optional[str] = None


class SkillCreate(SkillBase):
    pass


class SkillUpdate(CamelModel):
    name: Optional[str] = Field(None, max_length=100)
    category: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None


class Skill(SkillBase):
    id: int
    created_at: Optional[datetime] = None


# ======================
# USER SKILL SCHEMAS
# ======================

class UserSkillCreate(CamelModel):
    """Declare a skill by id, or by free-text name (resolved or created)."""
    skill_id: Optional[int] = None
    skill_name: Optional[str] = Field(None, max_length=100)
    category: Optional[str] = Field(None, max_length=50)
    role: str
    level: Optional[str] = None
    description: Optional[str] = None


class UserSkill(CamelModel):
    id: int
    user_id: str
    skill_id: int
    role: str
    level: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    skill: Skill


class UserSkillResult(CamelModel):
    action: str
    user_skill: UserSkill


class UserSkillRemoved(CamelModel):
    skill_id: int
    removed: int
