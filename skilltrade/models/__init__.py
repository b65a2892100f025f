# skilltrade/models/__init__.py
# Import models in dependency order
from .user import User
from .skill import Skill, UserSkill
from .swap import Swap
from .session import LearningSession
from .message import Message
from .review import Review
from .availability import Availability

__all__ = [
    "User",
    "Skill",
    "UserSkill",
    "Swap",
    "LearningSession",
    "Message",
    "Review",
    "Availability",
]
