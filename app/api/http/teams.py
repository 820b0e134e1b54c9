from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.api.deps import get_current_user
from app.core.db import get_db
from app.domains.identity.entities import User
from app.domains.identity.schemas import MessageResponse
from app.domains.teams.entities import Team, Invitation
from app.domains.teams.schemas import (
    TeamCreate, TeamUpdate, TeamResponse, MyTeamResponse, TeamMemberResponse, MemberUser,
    TeamManualSummary, MemberInvite, MemberRoleUpdate, OwnershipTransfer,
    InvitationResponse, InvitationCreatedResponse
)
from app.domains.teams.services import TeamService

router = APIRouter(prefix="/team", tags=["teams"])


async def build_team_response(team_service: TeamService, team: Team) -> TeamResponse:
    """Команда вместе с участниками и мануалами"""
    members, manuals = await team_service.get_team_details(team)
    return TeamResponse(
        uuid=team.uuid,
        name=team.name,
        description=team.description,
        icon=team.icon,
        owner_id=team.owner_id,
        created_at=team.created_at,
        updated_at=team.updated_at,
        members=[
            TeamMemberResponse(
                uuid=member.uuid,
                role=member.role,
                user=MemberUser(
                    uuid=user.uuid,
                    email=user.email,
                    name=user.name,
                    profile_image=user.profile_image
                ),
                joined_at=member.created_at
            )
            for member, user in members
        ],
        manuals=[
            TeamManualSummary(uuid=m.uuid, title=m.title, updated_at=m.updated_at)
            for m in manuals
        ]
    )


def invitation_response(invitation: Invitation) -> InvitationResponse:
    return InvitationResponse(
        uuid=invitation.uuid,
        email=invitation.email,
        role=invitation.role,
        status=invitation.status,
        expires_at=invitation.expires_at
    )


@router.get("", response_model=MyTeamResponse)
async def get_my_team(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Команда текущего пользователя или пустой ответ"""
    team_service = TeamService(db)
    found = await team_service.get_my_team(current_user)
    if not found:
        return MyTeamResponse()

    team, membership = found
    return MyTeamResponse(team=await build_team_response(team_service, team), role=membership.role)


@router.post("", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
async def create_team(
    team_data: TeamCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    team_service = TeamService(db)
    team = await team_service.create_team(current_user, team_data)
    return await build_team_response(team_service, team)


@router.put("", response_model=TeamResponse)
async def update_team(
    team_data: TeamUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    team_service = TeamService(db)
    team = await team_service.update_team(current_user, team_data)
    return await build_team_response(team_service, team)


@router.delete("", response_model=MessageResponse)
async def delete_team(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Удаление команды вместе с ее мануалами"""
    await TeamService(db).delete_team(current_user)
    return MessageResponse(message="Team deleted")


@router.post("/member", response_model=InvitationCreatedResponse, status_code=status.HTTP_201_CREATED)
async def invite_member(
    invite_data: MemberInvite,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Приглашение участника по email"""
    invitation, link = await TeamService(db).invite_member(current_user, invite_data)
    return InvitationCreatedResponse(invitation=invitation_response(invitation), invitation_link=link)


@router.put("/member/{member_uuid}", response_model=MessageResponse)
async def change_member_role(
    member_uuid: uuid.UUID,
    role_data: MemberRoleUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    member = await TeamService(db).change_member_role(current_user, member_uuid, role_data.role)
    return MessageResponse(message=f"Member role changed to {member.role.value}")


@router.delete("/member/{member_uuid}", response_model=MessageResponse)
async def remove_member(
    member_uuid: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await TeamService(db).remove_member(current_user, member_uuid)
    return MessageResponse(message="Member removed")


@router.post("/transfer", response_model=TeamResponse)
async def transfer_ownership(
    transfer_data: OwnershipTransfer,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Передача владения командой другому участнику"""
    team_service = TeamService(db)
    team = await team_service.transfer_ownership(current_user, transfer_data.member_id)
    return await build_team_response(team_service, team)
