from sqlalchemy import Column, String, Text, Boolean, TIMESTAMP
from sqlalchemy.orm import relationship

from skilltrade.database import Base
from skilltrade.utils.timeutils import utcnow


# ---------------- USER (identity mirror) ----------------
class User(Base):
    __tablename__ = "users"

    # Opaque id issued by the identity provider (token "sub" claim)
    id = Column(String(64), primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=True)
    first_name = Column(String(100))
    last_name = Column(String(100))
    profile_image_url = Column(String(500))
    bio = Column(Text)
    location = Column(String(150))
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(TIMESTAMP, default=utcnow, nullable=False)
    updated_at = Column(TIMESTAMP, default=utcnow, onupdate=utcnow, nullable=False)

    user_skills = relationship("UserSkill", back_populates="user", cascade="all, delete-orphan")
    availability = relationship("Availability", back_populates="user", cascade="all, delete-orphan")
    requested_swaps = relationship("Swap", foreign_keys="Swap.requester_id", back_populates="requester")
    provided_swaps = relationship("Swap", foreign_keys="Swap.provider_id", back_populates="provider")

    @property
    def display_name(self) -> str:
        parts = [self.first_name or "", self.last_name or ""]
        name = " ".join(p for p in parts if p).strip()
        return name or (self.email or self.id)
