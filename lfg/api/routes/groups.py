"""
Group management API endpoints.

This module provides REST API endpoints for group CRUD operations,
lifecycle changes and membership management. Every endpoint requires an
authenticated user; endpoints acting on one group run that group through
the permission pipeline declared on the route.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from lfg.core.dependencies import get_current_user, get_group_service
from lfg.core.permissions import (
    GROUP_IS_OPEN, USER_IS_MEMBER, USER_IS_OWNER,
    allow_if_correct_group_password, get_group_object, require_group,
)
from lfg.models.users import Group, GroupStatus, User
from lfg.schemas.groups import GroupCreate, GroupPasswordUpdate, GroupResponse, GroupUpdate
from lfg.schemas.users import KickRequest
from lfg.services.domain import GroupService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("", response_model=List[GroupResponse])
async def list_groups(
    group_status: Optional[GroupStatus] = Query(None, alias="status", description="Filter by group status"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of records to return"),
    service: GroupService = Depends(get_group_service)
):
    """
    Retrieve a list of groups with optional filtering.

    - **status**: only return `open` or `closed` groups
    - **skip**: Number of records to skip for pagination
    - **limit**: Maximum number of records to return (1-1000)
    """
    groups = service.list_groups(status=group_status, skip=skip, limit=limit)
    logger.info("Request successful", extra={"endpoint": "ListGroups"})
    return [GroupResponse.from_group(g) for g in groups]


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
def create_group(
    group_data: GroupCreate,
    user: User = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """
    Create a new group owned by the caller.

    - **title**: required, at most 50 characters
    - **description**: required, at most 200 characters
    - **max_size**: 5 to 200 including the owner (default 5)
    - **password**: makes the group private when set
    """
    group = service.create_group(group_data, owner=user)
    logger.info("Request successful", extra={"endpoint": "CreateGroup"})
    return GroupResponse.from_group(group)


@router.get("/{group_id}", response_model=GroupResponse)
async def retrieve_group(group: Group = Depends(get_group_object)):
    """Retrieve a group with its members."""
    logger.info("Request successful", extra={"endpoint": "RetrieveGroup"})
    return GroupResponse.from_group(group)


@router.patch("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_data: GroupUpdate,
    group: Group = Depends(require_group(USER_IS_OWNER, GROUP_IS_OPEN)),
    service: GroupService = Depends(get_group_service)
):
    """
    Update the group details. Only the owner of an open group may do this.

    Omitted or empty fields keep their current value.
    """
    group = service.update_group(group, group_data)
    logger.info("Request successful", extra={"endpoint": "UpdateGroup"})
    return GroupResponse.from_group(group)


@router.patch("/{group_id}/password", response_model=GroupResponse)
def update_group_password(
    password_data: GroupPasswordUpdate,
    group: Group = Depends(require_group(USER_IS_OWNER, GROUP_IS_OPEN)),
    service: GroupService = Depends(get_group_service)
):
    """Set the group password, or clear it with an empty value."""
    group = service.update_password(group, password_data.password)
    logger.info("Request successful", extra={"endpoint": "UpdateGroupPassword"})
    return GroupResponse.from_group(group)


@router.post("/{group_id}/close", response_model=GroupResponse)
async def close_group(
    group: Group = Depends(require_group(USER_IS_OWNER, GROUP_IS_OPEN)),
    service: GroupService = Depends(get_group_service)
):
    """Close the group. Closing is permanent."""
    group = service.close_group(group)
    logger.info("Request successful", extra={"endpoint": "CloseGroup"})
    return GroupResponse.from_group(group)


@router.post("/{group_id}/join", response_model=GroupResponse)
def join_group(
    group: Group = Depends(allow_if_correct_group_password),
    user: User = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """
    Join a group.

    The group must have a free slot and be open, the caller must not be its
    owner or already a member, and private groups need `{"password": ...}`.
    """
    group = service.join_group(group, user)
    logger.info("Request successful", extra={"endpoint": "JoinGroup"})
    return GroupResponse.from_group(group)


@router.post("/{group_id}/leave", response_model=GroupResponse)
async def leave_group(
    group: Group = Depends(require_group(GROUP_IS_OPEN, USER_IS_MEMBER)),
    user: User = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Leave an open group the caller is a member of."""
    group = service.leave_group(group, user)
    logger.info("Request successful", extra={"endpoint": "LeaveGroup"})
    return GroupResponse.from_group(group)


@router.post("/{group_id}/kick", response_model=GroupResponse)
async def kick_from_group(
    kick_data: KickRequest,
    group: Group = Depends(require_group(GROUP_IS_OPEN, USER_IS_OWNER)),
    service: GroupService = Depends(get_group_service)
):
    """Remove a member from an open group. Only the owner may do this."""
    group = service.kick_from_group(group, kick_data.id)
    logger.info("Request successful", extra={"endpoint": "KickFromGroup"})
    return GroupResponse.from_group(group)
