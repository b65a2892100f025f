from sqlalchemy import Column, Integer, String, Text, ForeignKey, TIMESTAMP, CheckConstraint
from sqlalchemy.orm import relationship

from skilltrade.database import Base
from skilltrade.utils.timeutils import utcnow

SWAP_STATUSES = ("pending", "accepted", "rejected", "completed")


class Swap(Base):
    __tablename__ = "swaps"

    id = Column(Integer, primary_key=True, index=True)
    requester_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    provider_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    # Skill the requester teaches / skill the provider teaches
    requester_skill_id = Column(Integer, ForeignKey("skills.id"), nullable=False)
    provider_skill_id = Column(Integer, ForeignKey("skills.id"), nullable=False)
    status = Column(String(20), nullable=False, default="pending", index=True)
    message = Column(Text)
    created_at = Column(TIMESTAMP, default=utcnow, nullable=False)
    updated_at = Column(TIMESTAMP, default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("requester_id <> provider_id", name="check_swap_distinct_users"),
    )

    requester = relationship("User", foreign_keys=[requester_id], back_populates="requested_swaps")
    provider = relationship("User", foreign_keys=[provider_id], back_populates="provided_swaps")
    requester_skill = relationship("Skill", foreign_keys=[requester_skill_id])
    provider_skill = relationship("Skill", foreign_keys=[provider_skill_id])
    sessions = relationship("LearningSession", back_populates="swap")
    messages = relationship("Message", back_populates="swap")
