# skilltrade/api/__init__.py
# This file makes the api directory a Python package.

from . import message
from . import realtime
from . import review
from . import session
from . import skill
from . import swap
from . import user_skill
from . import users

__all__ = [
    "users",
    "skill",
    "user_skill",
    "swap",
    "session",
    "message",
    "review",
    "realtime",
]
