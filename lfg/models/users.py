"""
User and Group SQLAlchemy models.

This module defines the database models for users and the groups they
own or join, plus the association table for group membership.
"""

from sqlalchemy import Column, Integer, SmallInteger, String, DateTime, ForeignKey, Table, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from lfg.core.database import Base
from lfg.core.security import verify_password


# Association table for many-to-many relationship between users and groups
joined_groups = Table(
    'joined_groups',
    Base.metadata,
    Column('group_id', Integer, ForeignKey('groups.id', ondelete='CASCADE'), primary_key=True),
    Column('user_id', Integer, ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    Column('joined_at', DateTime, default=func.now())
)


class GroupStatus(enum.Enum):
    """Lifecycle status of a group. ``CLOSED`` is terminal."""
    OPEN = "open"
    CLOSED = "closed"


class User(Base):
    """A registered user."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt hash
    created_at = Column(DateTime, default=func.now(), nullable=False)

    # Relationships
    owned_groups = relationship("Group", back_populates="owner")
    joined_groups = relationship(
        "Group",
        secondary=joined_groups,
        back_populates="members"
    )

    def __repr__(self):
        return f"<User(username='{self.username}')>"


class Group(Base):
    """
    A group users can join.

    The owner occupies one slot of ``max_size`` and is never listed in
    ``members``. A group with a password is private.
    """
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(50), nullable=False)
    description = Column(String(200), nullable=True)
    status = Column(SQLEnum(GroupStatus), nullable=False, default=GroupStatus.OPEN)
    password = Column(String(255), nullable=True)  # bcrypt hash; None for public groups
    max_size = Column(SmallInteger, nullable=False, default=5)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    owner_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)

    # Relationships
    owner = relationship("User", back_populates="owned_groups")
    members = relationship(
        "User",
        secondary=joined_groups,
        back_populates="joined_groups",
        order_by="User.id"
    )

    def __repr__(self):
        return f"<Group(title='{self.title}', status='{self.status}')>"

    @property
    def member_count(self):
        """Number of members, excluding the owner."""
        return len(self.members)

    def is_full(self) -> bool:
        """Check if every slot besides the owner's is taken."""
        return self.member_count >= self.max_size - 1

    def is_member(self, user_id: int) -> bool:
        """Check if the user is in the member list of the group."""
        return any(member.id == user_id for member in self.members)

    def is_owner(self, user_id: int) -> bool:
        """Check if the user is the owner of the group."""
        return self.owner_id == user_id

    def is_open(self) -> bool:
        """Check if the group is open."""
        return self.status == GroupStatus.OPEN

    def is_private(self) -> bool:
        """Check if the group is password protected."""
        return self.password is not None

    def check_password(self, candidate) -> bool:
        """Validate a candidate password. Public groups accept anything."""
        if not self.is_private():
            return True
        return verify_password(candidate, self.password)
