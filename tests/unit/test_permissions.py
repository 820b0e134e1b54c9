import uuid

import pytest

from app.db.models.team import TeamRole
from app.domains.manuals.permissions import (
    Permission, resolve_permission, can_view, can_edit, can_delete, can_share
)

OWNER_ID = uuid.uuid4()
USER_ID = uuid.uuid4()


def test_manual_owner_is_owner_without_team_role():
    assert resolve_permission(OWNER_ID, OWNER_ID) == Permission.OWNER


def test_team_owner_is_owner_of_member_manual():
    assert resolve_permission(USER_ID, OWNER_ID, team_role=TeamRole.OWNER) == Permission.OWNER


@pytest.mark.parametrize("role,expected", [
    (TeamRole.EDITOR, Permission.EDITOR),
    (TeamRole.VIEWER, Permission.VIEWER),
])
def test_team_role_maps_to_permission(role, expected):
    assert resolve_permission(USER_ID, OWNER_ID, team_role=role) == expected


def test_team_role_wins_over_share():
    # Персональный доступ не повышает командную роль
    assert resolve_permission(
        USER_ID, OWNER_ID, team_role=TeamRole.VIEWER, share_permission=TeamRole.EDITOR
    ) == Permission.VIEWER


def test_share_applies_without_team_role():
    assert resolve_permission(USER_ID, OWNER_ID, share_permission=TeamRole.EDITOR) == Permission.EDITOR


def test_stranger_has_no_permission():
    assert resolve_permission(USER_ID, OWNER_ID) == Permission.NONE


def test_capabilities():
    assert not can_view(Permission.NONE)
    assert can_view(Permission.VIEWER)
    assert can_edit(Permission.EDITOR) and not can_edit(Permission.VIEWER)
    assert can_delete(Permission.OWNER) and not can_delete(Permission.EDITOR)
    assert can_share(Permission.OWNER) and not can_share(Permission.EDITOR)
