from app.core.db import Base
from app.db.models.user import User
from app.db.models.team import Team, TeamMember, Invitation, TeamRole, InvitationStatus
from app.db.models.manual import Manual, ManualSection, ContentBlock, BlockType
from app.db.models.sharing import ManualShare, ExternalShareLink, AccessType
from app.db.models.version import ManualVersion
from app.db.models.notification import Notification, NotificationType
from app.db.models.file import StoredFile

__all__ = [
    "Base",
    "User",
    "Team",
    "TeamMember",
    "Invitation",
    "TeamRole",
    "InvitationStatus",
    "Manual",
    "ManualSection",
    "ContentBlock",
    "BlockType",
    "ManualShare",
    "ExternalShareLink",
    "AccessType",
    "ManualVersion",
    "Notification",
    "NotificationType",
    "StoredFile",
]
