from datetime import datetime
from typing import Optional

from skilltrade.schemas.common import CamelModel, UserBrief


class MessageCreate(CamelModel):
    swap_id: int
    receiver_id: Optional[str] = None
    content: str


class Message(CamelModel):
    id: int
    swap_id: int
    sender_id: str
    receiver_id: str
    sender: Optional[UserBrief] = None
    content: str
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    is_from_user: bool
    is_unread: bool


class UnreadCount(CamelModel):
    count: int
