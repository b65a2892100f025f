from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from skilltrade.schemas.common import CamelModel
from skilltrade.schemas.skill import UserSkill


# ======================
# USER SCHEMAS
# ======================

class User(CamelModel):
    id: str
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None


class ProfileUpdate(CamelModel):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    profile_image_url: Optional[str] = Field(None, max_length=500)
    bio: Optional[str] = None
    location: Optional[str] = Field(None, max_length=150)


class Stats(CamelModel):
    active_swaps: int
    completed_swaps: int
    total_sessions: int
    avg_rating: float


class Profile(CamelModel):
    user: User
    skills: List[UserSkill]
    stats: Stats
    rating: float


# ======================
# AVAILABILITY
# ======================

class AvailabilitySlot(CamelModel):
    day_of_week: int = Field(..., description="0 = Sunday ... 6 = Saturday")
    start_time: str = Field(..., description="HH:MM")
    end_time: str = Field(..., description="HH:MM")
    timezone: str = "UTC"


class AvailabilitySlotOut(AvailabilitySlot):
    id: int
    user_id: str


class AvailabilityUpdate(CamelModel):
    slots: List[AvailabilitySlot]
