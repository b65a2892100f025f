from sqlalchemy import Column, Integer, String, Text, ForeignKey, TIMESTAMP
from sqlalchemy.orm import relationship

from skilltrade.database import Base
from skilltrade.utils.timeutils import utcnow


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    swap_id = Column(Integer, ForeignKey("swaps.id"), nullable=False, index=True)
    sender_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    receiver_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    read_at = Column(TIMESTAMP, nullable=True)
    created_at = Column(TIMESTAMP, default=utcnow, nullable=False, index=True)

    swap = relationship("Swap", back_populates="messages")
    sender = relationship("User", foreign_keys=[sender_id])
    receiver = relationship("User", foreign_keys=[receiver_id])
