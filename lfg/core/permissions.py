"""
Permission pipeline for group routes.

Each route declares the group rules it needs with ``require_group``. The
rules run in the order given and the first failing rule rejects the request;
later rules never run. Rules are pure predicates over the loaded group and
the authenticated user's ID.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Body, Depends

from lfg.core.dependencies import get_current_user, get_group_service
from lfg.models.users import Group, User
from lfg.schemas.groups import GroupJoin
from lfg.services.base import ForbiddenError, PermissionDenied, ValidationError
from lfg.services.domain import GroupService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupRule:
    """A named predicate on ``(group, user_id)`` and the error raised when it fails."""
    name: str
    test: Callable[[Group, int], bool]
    message: str
    details: str

    def check(self, group: Group, user_id: int) -> None:
        if self.test(group, user_id):
            return
        logger.info(
            "Permission error",
            extra={
                "permission": self.name,
                "details": self.details,
                "group_id": group.id,
                "user_id": user_id,
            },
        )
        raise PermissionDenied(self.message)


GROUP_IS_OPEN = GroupRule(
    "AllowIfGroupIsOpen",
    lambda group, user_id: group.is_open(),
    "Group is not open",
    "Request denied because the group is not open",
)
GROUP_IS_NOT_FULL = GroupRule(
    "AllowIfGroupIsNotFull",
    lambda group, user_id: not group.is_full(),
    "Group is full",
    "Request denied because the group is full",
)
USER_IS_OWNER = GroupRule(
    "AllowIfUserIsOwner",
    lambda group, user_id: group.is_owner(user_id),
    "User is not the owner of the group",
    "Request denied because the user is not the owner of the group",
)
USER_IS_NOT_OWNER = GroupRule(
    "AllowIfUserIsNotOwner",
    lambda group, user_id: not group.is_owner(user_id),
    "User is the owner of the group",
    "Request denied because the user is the owner of the group",
)
USER_IS_MEMBER = GroupRule(
    "AllowIfUserIsMember",
    lambda group, user_id: group.is_member(user_id),
    "User is not a member of the group",
    "Request denied because the user is not a member of the group",
)
USER_IS_NOT_MEMBER = GroupRule(
    "AllowIfUserIsNotMember",
    lambda group, user_id: not group.is_member(user_id),
    "User is a member of the group",
    "Request denied because the user is a member of the group",
)


def get_group_object(
    group_id: int,
    service: GroupService = Depends(get_group_service)
) -> Group:
    """Load the group named in the path, or fail with 404."""
    return service.get_group(group_id)


def require_group(*rules: GroupRule) -> Callable[..., Group]:
    """
    Build a dependency that loads the path's group and applies ``rules`` in order.

    Usage:
        @router.post("/{group_id}/close")
        async def close_group(group: Group = Depends(require_group(USER_IS_OWNER, GROUP_IS_OPEN))):
            ...
    """
    def dependency(
        user: User = Depends(get_current_user),
        group: Group = Depends(get_group_object)
    ) -> Group:
        for rule in rules:
            rule.check(group, user.id)
        return group

    dependency.__name__ = "require_group_" + "_".join(rule.name for rule in rules)
    return dependency


def check_group_password(group: Group, payload: Optional[GroupJoin]) -> None:
    """Require the correct password for private groups; public groups pass."""
    if not group.is_private():
        return

    if payload is None or payload.password is None:
        logger.info(
            "Permission error",
            extra={
                "permission": "AllowIfCorrectGroupPassword",
                "details": "Request denied because the group password is missing",
                "group_id": group.id,
            },
        )
        raise ValidationError("Group password is required")

    if not group.check_password(payload.password):
        logger.info(
            "Permission error",
            extra={
                "permission": "AllowIfCorrectGroupPassword",
                "details": "Request denied because the group password is incorrect",
                "group_id": group.id,
            },
        )
        raise ForbiddenError("Incorrect password")


# Join runs the capacity, membership and ownership checks before the password
join_pipeline = require_group(
    GROUP_IS_NOT_FULL, USER_IS_NOT_MEMBER, USER_IS_NOT_OWNER, GROUP_IS_OPEN
)


def allow_if_correct_group_password(
    payload: Optional[GroupJoin] = Body(None),
    group: Group = Depends(join_pipeline)
) -> Group:
    """Join pipeline followed by the group password check."""
    check_group_password(group, payload)
    return group
