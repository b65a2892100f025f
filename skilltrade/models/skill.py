from sqlalchemy import Column, Integer, String, Text, ForeignKey, TIMESTAMP, UniqueConstraint
from sqlalchemy.orm import relationship

from skilltrade.database import Base
from skilltrade.utils.timeutils import utcnow

SKILL_ROLES = ("teach", "learn")
SKILL_LEVELS = ("beginner", "intermediate", "advanced", "expert")


# skilltrade/models/skill.py
class Skill(Base):
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    category = Column(String(50), nullable=False, default="General")
    description = Column(Text)
    created_at = Column(TIMESTAMP, default=utcnow, nullable=False)

    # No delete cascade: a referenced skill cannot be removed.
    user_skills = relationship("UserSkill", back_populates="skill")


class UserSkill(Base):
    __tablename__ = "user_skills"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False
    )
    skill_id = Column(
        Integer,
        ForeignKey("skills.id"),
        index=True,
        nullable=False
    )
    role = Column(String(20), nullable=False)  # 'teach' or 'learn'
    level = Column(String(20), nullable=False, default="beginner")
    description = Column(Text)
    created_at = Column(TIMESTAMP, default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "skill_id", "role", name="uq_user_skill_role"),
    )

    # Relationships
    skill = relationship("Skill", back_populates="user_skills")
    user = relationship("User", back_populates="user_skills")
