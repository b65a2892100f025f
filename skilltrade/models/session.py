# skilltrade/models/session.py
from sqlalchemy import Column, Integer, String, Text, ForeignKey, TIMESTAMP, CheckConstraint
from sqlalchemy.orm import relationship

from skilltrade.database import Base
from skilltrade.utils.timeutils import utcnow

SESSION_STATUSES = ("scheduled", "in_progress", "completed", "cancelled")


class LearningSession(Base):
    __tablename__ = "learning_sessions"

    id = Column(Integer, primary_key=True, index=True)
    swap_id = Column(Integer, ForeignKey("swaps.id"), nullable=False, index=True)
    teacher_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    student_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    skill_id = Column(Integer, ForeignKey("skills.id"), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    scheduled_at = Column(TIMESTAMP, nullable=False, index=True)
    duration = Column(Integer, nullable=False)  # minutes
    status = Column(String(20), nullable=False, default="scheduled", index=True)
    meeting_link = Column(String(500))
    notes = Column(Text)
    created_at = Column(TIMESTAMP, default=utcnow, nullable=False)
    updated_at = Column(TIMESTAMP, default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("duration > 0", name="check_session_duration_positive"),
    )

    # Relationships
    swap = relationship("Swap", back_populates="sessions")
    teacher = relationship("User", foreign_keys=[teacher_id])
    student = relationship("User", foreign_keys=[student_id])
    skill = relationship("Skill")
    reviews = relationship("Review", back_populates="session")
