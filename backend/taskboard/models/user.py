from sqlalchemy import Boolean, Column, Enum, String
from sqlalchemy.orm import relationship

from taskboard.models.base import BaseModel

USER_ROLES = ("user", "admin")


class User(BaseModel):
    """User account. Invitees exist without a password until they join."""

    name = Column(String(255), nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=True)
    role = Column(Enum(*USER_ROLES, name="user_role"), default="user", nullable=False)
    is_email_verified = Column(Boolean, default=False, nullable=False)

    # Relationships
    memberships = relationship("ProjectMember", back_populates="user", lazy="raise")

    def __repr__(self):
        return f"<User {self.email}>"
