# skilltrade/schemas/__init__.py

from .common import CamelModel, UserBrief, SkillBrief
from .skill import Skill, SkillCreate, SkillUpdate, UserSkill, UserSkillCreate, UserSkillResult
from .swap import Swap, SwapCreate, SwapStatusUpdate, Match
from .session import Session, SessionCreate, SessionStatusUpdate
from .message import Message, MessageCreate, UnreadCount
from .review import Review, ReviewCreate, ReviewUpdate, Rating
from .user import User, ProfileUpdate, Profile, Stats, AvailabilitySlot, AvailabilityUpdate

__all__ = [
    "CamelModel",
    "UserBrief",
    "SkillBrief",
    "Skill",
    "SkillCreate",
    "SkillUpdate",
    "UserSkill",
    "UserSkillCreate",
    "UserSkillResult",
    "Swap",
    "SwapCreate",
    "SwapStatusUpdate",
    "Match",
    "Session",
    "SessionCreate",
    "SessionStatusUpdate",
    "Message",
    "MessageCreate",
    "UnreadCount",
    "Review",
    "ReviewCreate",
    "ReviewUpdate",
    "Rating",
    "User",
    "ProfileUpdate",
    "Profile",
    "Stats",
    "AvailabilitySlot",
    "AvailabilityUpdate",
]
