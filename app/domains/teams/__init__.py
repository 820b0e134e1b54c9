from app.domains.teams.entities import Team, TeamMember, Invitation
from app.domains.teams.schemas import (
    TeamCreate, TeamUpdate, TeamResponse, MyTeamResponse, TeamMemberResponse,
    MemberInvite, MemberRoleUpdate, OwnershipTransfer, InvitationResponse,
    InvitationCreatedResponse, InvitationDetailResponse
)
from app.domains.teams.services import TeamService, InvitationService

__all__ = [
    "Team", "TeamMember", "Invitation",
    "TeamCreate", "TeamUpdate", "TeamResponse", "MyTeamResponse", "TeamMemberResponse",
    "MemberInvite", "MemberRoleUpdate", "OwnershipTransfer", "InvitationResponse",
    "InvitationCreatedResponse", "InvitationDetailResponse",
    "TeamService", "InvitationService"
]
