"""
Group Domain Service

This service handles group business logic: creation and validation, detail
updates, password changes, closing, and membership changes (join, leave,
kick). Permission checks run before these methods are called; the methods
themselves only enforce rules that depend on the request body.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import selectinload

from lfg.core.security import hash_password
from lfg.models.users import Group, GroupStatus, User
from lfg.schemas.groups import GroupCreate, GroupUpdate
from lfg.services.base import (
    BaseService, service_method, FieldError, NotFoundError, PermissionDenied,
    ValidationError, FIELD_IS_REQUIRED,
)

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 200
MIN_GROUP_SIZE = 5
MAX_GROUP_SIZE = 200
DEFAULT_GROUP_SIZE = 5


def _too_long(max_length: int) -> str:
    return f"This field cannot be more than {max_length} characters long"


def _size_out_of_range() -> str:
    return f"The value should range from {MIN_GROUP_SIZE} to {MAX_GROUP_SIZE}"


def validate_for_create(data: GroupCreate) -> None:
    """Collect every field error of a new group and raise them together."""
    errors: List[FieldError] = []

    if not data.title:
        errors.append(FieldError("title", FIELD_IS_REQUIRED))
    elif len(data.title) > MAX_TITLE_LENGTH:
        errors.append(FieldError("title", _too_long(MAX_TITLE_LENGTH)))

    if not data.description:
        errors.append(FieldError("description", FIELD_IS_REQUIRED))
    elif len(data.description) > MAX_DESCRIPTION_LENGTH:
        errors.append(FieldError("description", _too_long(MAX_DESCRIPTION_LENGTH)))

    max_size = DEFAULT_GROUP_SIZE if data.max_size is None else data.max_size
    if not MIN_GROUP_SIZE <= max_size <= MAX_GROUP_SIZE:
        errors.append(FieldError("max_size", _size_out_of_range()))

    if errors:
        logger.warning("Request body is invalid", extra={"details": "create group"})
        raise ValidationError("The new group is not valid", errors)


def validate_for_update(group: Group, data: GroupUpdate) -> None:
    """Validate the provided fields of an update against the current group."""
    errors: List[FieldError] = []

    if data.title and len(data.title) > MAX_TITLE_LENGTH:
        errors.append(FieldError("title", _too_long(MAX_TITLE_LENGTH)))

    if data.description and len(data.description) > MAX_DESCRIPTION_LENGTH:
        errors.append(FieldError("description", _too_long(MAX_DESCRIPTION_LENGTH)))

    if data.max_size is not None:
        if not MIN_GROUP_SIZE <= data.max_size <= MAX_GROUP_SIZE:
            errors.append(FieldError("max_size", _size_out_of_range()))
        elif data.max_size < group.member_count + 1:
            errors.append(FieldError(
                "max_size",
                f"The value cannot be less than {group.member_count + 1}, "
                f"the current number of members plus the owner",
            ))

    if errors:
        logger.warning(
            "Request body is invalid",
            extra={"details": "update group", "group_id": group.id},
        )
        raise ValidationError("The group update is not valid", errors)


class GroupService(BaseService):
    """Service for group lifecycle and membership management."""

    def _query(self):
        return self.db.query(Group).options(selectinload(Group.members))

    @service_method
    def list_groups(self, status: Optional[GroupStatus] = None, skip: int = 0, limit: int = 100) -> List[Group]:
        """List groups, optionally filtered by status."""
        query = self._query()
        if status is not None:
            query = query.filter(Group.status == status)
        return query.order_by(Group.id).offset(skip).limit(limit).all()

    @service_method
    def get_group(self, group_id: int) -> Group:
        """Get a group with its members."""
        group = self._query().filter(Group.id == group_id).first()
        if group is None:
            raise NotFoundError("Group", group_id)
        return group

    @service_method
    def create_group(self, data: GroupCreate, owner: User) -> Group:
        """Create a group owned by ``owner``. An empty password means public."""
        validate_for_create(data)

        group = Group(
            title=data.title,
            description=data.description,
            max_size=DEFAULT_GROUP_SIZE if data.max_size is None else data.max_size,
            password=hash_password(data.password) if data.password else None,
            status=GroupStatus.OPEN,
            owner_id=owner.id,
        )
        self.db.add(group)
        self.db.commit()
        self.db.refresh(group)

        self.logger.info("Created group", extra={"group_id": group.id, "user_id": owner.id})
        return group

    @service_method
    def update_group(self, group: Group, data: GroupUpdate) -> Group:
        """Update title, description and capacity. Empty fields are ignored."""
        validate_for_update(group, data)

        if data.title:
            group.title = data.title
        if data.description:
            group.description = data.description
        if data.max_size is not None:
            group.max_size = data.max_size

        self.db.commit()
        self.logger.info("Updated group", extra={"group_id": group.id})
        return group

    @service_method
    def update_password(self, group: Group, password: Optional[str]) -> Group:
        """Set the group password, or make the group public when it is empty."""
        group.password = hash_password(password) if password else None
        self.db.commit()
        self.logger.info(
            "Updated group password",
            extra={"group_id": group.id, "details": "private" if group.is_private() else "public"},
        )
        return group

    @service_method
    def close_group(self, group: Group) -> Group:
        """Mark the group as closed. Closed groups cannot be reopened."""
        group.status = GroupStatus.CLOSED
        self.db.commit()
        self.logger.info("Closed group", extra={"group_id": group.id})
        return group

    @service_method
    def join_group(self, group: Group, user: User) -> Group:
        """Add ``user`` to the group members."""
        group.members.append(user)
        self.db.commit()
        self.logger.info("User joined group", extra={"group_id": group.id, "user_id": user.id})
        return group

    @service_method
    def leave_group(self, group: Group, user: User) -> Group:
        """Remove ``user`` from the group members."""
        self._remove_member(group, user.id)
        self.db.commit()
        self.logger.info("User left group", extra={"group_id": group.id, "user_id": user.id})
        return group

    @service_method
    def kick_from_group(self, group: Group, user_id: int) -> Group:
        """Remove another user from the group on the owner's behalf."""
        target = self.db.get(User, user_id)
        if target is None:
            raise NotFoundError("User", user_id)

        if not group.is_member(target.id):
            self.logger.warning(
                "Request failed",
                extra={
                    "endpoint": "KickFromGroup",
                    "details": "The user to kick is not a member",
                    "group_id": group.id,
                    "user_id": target.id,
                },
            )
            raise PermissionDenied("The user to kick is not a member")

        self._remove_member(group, target.id)
        self.db.commit()
        self.logger.info("Kicked user from group", extra={"group_id": group.id, "user_id": target.id})
        return group

    def _remove_member(self, group: Group, user_id: int) -> None:
        for member in list(group.members):
            if member.id == user_id:
                group.members.remove(member)
