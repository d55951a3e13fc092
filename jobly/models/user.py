"""
User model for authentication and job applications.
"""

from sqlalchemy import Column, String, Text, Boolean, CheckConstraint, false
from sqlalchemy.orm import relationship
from jobly.core.database import Base


class User(Base):
    """
    User account. ``password`` holds the bcrypt hash, never the plain text.
    """
    __tablename__ = "users"

    username = Column(String(25), primary_key=True)
    password = Column(Text, nullable=False)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())

    __table_args__ = (
        CheckConstraint("position('@' IN email) > 1", name="ck_users_email").ddl_if(dialect="postgresql"),
    )

    # Relationships
    applications = relationship("Application", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<User(username='{self.username}', is_admin={self.is_admin})>"
