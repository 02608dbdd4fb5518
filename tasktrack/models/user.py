"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import CheckConstraint, Column, Integer, String
from sqlalchemy.orm import relationship

from tasktrack.models.base import Base, created_at_column, updated_at_column


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: 'admin' or 'user'. Deleting a user deletes the tasks they own.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String(100), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="user", server_default="user")
    created_at = created_at_column()
    updated_at = updated_at_column()

    tasks = relationship(
        "Task",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
