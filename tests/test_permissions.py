"""
Tests for the order in which group permission rules are applied.

When several rules fail, the response names the first one in the route's
pipeline.
"""

import pytest

from lfg.core.permissions import (
    GROUP_IS_NOT_FULL, GROUP_IS_OPEN, USER_IS_MEMBER, USER_IS_NOT_MEMBER,
    USER_IS_NOT_OWNER, USER_IS_OWNER, check_group_password,
)
from lfg.core.security import hash_password
from lfg.models import Group, GroupStatus, User
from lfg.schemas.groups import GroupJoin
from lfg.services.base import ForbiddenError, PermissionDenied, ValidationError


@pytest.fixture
def group(db_session):
    owner = User(username="owner", password="x")
    member = User(username="member", password="x")
    db_session.add_all([owner, member])
    db_session.commit()
    group = Group(title="Group", description="desc", owner_id=owner.id, members=[member])
    db_session.add(group)
    db_session.commit()
    return group


def test_rules_pass_and_fail(group):
    owner_id = group.owner_id
    member_id = group.members[0].id

    USER_IS_OWNER.check(group, owner_id)
    USER_IS_NOT_OWNER.check(group, member_id)
    USER_IS_MEMBER.check(group, member_id)
    USER_IS_NOT_MEMBER.check(group, owner_id)
    GROUP_IS_OPEN.check(group, owner_id)
    GROUP_IS_NOT_FULL.check(group, owner_id)

    with pytest.raises(PermissionDenied, match="User is the owner of the group"):
        USER_IS_NOT_OWNER.check(group, owner_id)
    with pytest.raises(PermissionDenied, match="User is a member of the group"):
        USER_IS_NOT_MEMBER.check(group, member_id)


def test_check_group_password(group):
    check_group_password(group, None)

    group.password = hash_password("secret")
    check_group_password(group, GroupJoin(password="secret"))
    with pytest.raises(ValidationError):
        check_group_password(group, GroupJoin())
    with pytest.raises(ForbiddenError):
        check_group_password(group, GroupJoin(password="wrong"))


class TestJoinPipelineOrder:

    def _fill(self, client, register, group_id):
        for name in ("m1", "m2", "m3", "m4"):
            _, headers = register(name)
            client.post(f"/groups/{group_id}/join", headers=headers)

    def test_full_is_reported_before_closed(self, client, register, make_group):
        _, owner_headers = register("alice")
        _, bob_headers = register("bob")
        group = make_group(owner_headers)
        self._fill(client, register, group["id"])
        client.post(f"/groups/{group['id']}/close", headers=owner_headers)

        response = client.post(f"/groups/{group['id']}/join", headers=bob_headers)

        assert response.json() == {"message": "Group is full"}

    def test_owner_is_reported_before_closed(self, client, register, make_group):
        _, owner_headers = register("alice")
        group = make_group(owner_headers)
        client.post(f"/groups/{group['id']}/close", headers=owner_headers)

        response = client.post(f"/groups/{group['id']}/join", headers=owner_headers)

        assert response.status_code == 400
        assert response.json() == {"message": "User is the owner of the group"}

    def test_closed_is_reported_before_password(self, client, register, make_group):
        _, owner_headers = register("alice")
        _, bob_headers = register("bob")
        group = make_group(owner_headers, password="secret")
        client.post(f"/groups/{group['id']}/close", headers=owner_headers)

        response = client.post(f"/groups/{group['id']}/join", json={"password": "wrong"}, headers=bob_headers)

        assert response.status_code == 400
        assert response.json() == {"message": "Group is not open"}

    def test_missing_group_is_not_found(self, client, register):
        _, headers = register("bob")

        response = client.post("/groups/999/join", headers=headers)

        assert response.status_code == 404


class TestOwnerRoutesOrder:

    def test_update_checks_owner_before_open(self, client, register, make_group):
        _, owner_headers = register("alice")
        _, bob_headers = register("bob")
        group = make_group(owner_headers)
        client.post(f"/groups/{group['id']}/close", headers=owner_headers)

        response = client.patch(f"/groups/{group['id']}", json={"title": "x"}, headers=bob_headers)

        assert response.json() == {"message": "User is not the owner of the group"}

    def test_kick_checks_open_before_owner(self, client, register, make_group):
        _, owner_headers = register("alice")
        bob, bob_headers = register("bob")
        group = make_group(owner_headers)
        client.post(f"/groups/{group['id']}/join", headers=bob_headers)
        client.post(f"/groups/{group['id']}/close", headers=owner_headers)

        response = client.post(f"/groups/{group['id']}/kick", json={"id": bob["id"]}, headers=bob_headers)

        assert response.json() == {"message": "Group is not open"}

    def test_leave_checks_open_before_membership(self, client, register, make_group):
        _, owner_headers = register("alice")
        _, bob_headers = register("bob")
        group = make_group(owner_headers)
        client.post(f"/groups/{group['id']}/close", headers=owner_headers)

        response = client.post(f"/groups/{group['id']}/leave", headers=bob_headers)

        assert response.json() == {"message": "Group is not open"}
