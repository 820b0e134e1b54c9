import enum
import uuid
from typing import Optional

from app.db.models.team import TeamRole


class Permission(str, enum.Enum):
    OWNER = "OWNER"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"
    NONE = "NONE"


def resolve_permission(
    user_id: uuid.UUID,
    owner_id: uuid.UUID,
    team_role: Optional[TeamRole] = None,
    share_permission: Optional[TeamRole] = None
) -> Permission:
    """
    Итоговое право пользователя на мануал.

    Порядок: владелец мануала или OWNER команды, затем роль в команде,
    затем персональный шаринг. Командная роль всегда важнее шаринга.
    """
    if user_id == owner_id or team_role == TeamRole.OWNER:
        return Permission.OWNER
    if team_role == TeamRole.EDITOR:
        return Permission.EDITOR
    if team_role == TeamRole.VIEWER:
        return Permission.VIEWER
    if share_permission is not None:
        return Permission(share_permission.value)
    return Permission.NONE


def can_view(permission: Permission) -> bool:
    return permission != Permission.NONE


def can_edit(permission: Permission) -> bool:
    return permission in (Permission.OWNER, Permission.EDITOR)


def can_delete(permission: Permission) -> bool:
    return permission == Permission.OWNER


def can_share(permission: Permission) -> bool:
    return permission == Permission.OWNER
