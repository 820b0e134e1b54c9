from app.db.repositories.user_repository import UserRepository
from app.db.repositories.team_repository import TeamRepository, TeamMemberRepository, InvitationRepository
from app.db.repositories.manual_repository import ManualRepository, SectionRepository, BlockRepository
from app.db.repositories.share_repository import ManualShareRepository, ExternalLinkRepository
from app.db.repositories.version_repository import ManualVersionRepository
from app.db.repositories.notification_repository import NotificationRepository
from app.db.repositories.file_repository import StoredFileRepository

__all__ = [
    "UserRepository",
    "TeamRepository",
    "TeamMemberRepository",
    "InvitationRepository",
    "ManualRepository",
    "SectionRepository",
    "BlockRepository",
    "ManualShareRepository",
    "ExternalLinkRepository",
    "ManualVersionRepository",
    "NotificationRepository",
    "StoredFileRepository"
]
