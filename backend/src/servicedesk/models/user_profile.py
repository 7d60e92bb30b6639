"""UserProfile SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, Text, DateTime, Uuid, UniqueConstraint

from .base import Base, utcnow


class UserProfile(Base):
    """Customer profile owning orders.

    ``auth_id`` is the id of the authenticated principal (the JWT subject issued
    by the authentication service). Orders reference the profile id, never the
    auth id directly.
    """
    __tablename__ = "user_profile"
    __table_args__ = (
        UniqueConstraint("auth_id", name="uq_user_profile_auth_id"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    auth_id = Column(Text, nullable=False)
    display_email = Column(Text, nullable=True)
    first_name = Column(Text, nullable=True)
    last_name = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def full_name(self) -> str:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name or self.last_name or "Anonymous"

    def __repr__(self):
        return f"<UserProfile(id={self.id}, auth_id='{self.auth_id}')>"
