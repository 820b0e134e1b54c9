from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.core.db import get_db
from app.domains.identity.entities import User
from app.domains.identity.schemas import MessageResponse
from app.domains.teams.schemas import InvitationDetailResponse, InvitationTeam
from app.domains.teams.services import InvitationService

router = APIRouter(prefix="/invite", tags=["invitations"])


@router.get("/{token}", response_model=InvitationDetailResponse)
async def get_invitation(token: str, db: AsyncSession = Depends(get_db)):
    """Просмотр приглашения по токену, без аутентификации"""
    invitation, team, sender = await InvitationService(db).get_invitation(token)
    return InvitationDetailResponse(
        uuid=invitation.uuid,
        email=invitation.email,
        role=invitation.role,
        team=InvitationTeam(uuid=team.uuid, name=team.name, description=team.description),
        sender_name=sender.name if sender else "",
        expires_at=invitation.expires_at
    )


@router.post("/{token}", response_model=MessageResponse)
async def accept_invitation(
    token: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    team = await InvitationService(db).accept_invitation(current_user, token)
    return MessageResponse(message=f"You joined {team.name}")


@router.post("/{token}/reject", response_model=MessageResponse)
async def reject_invitation(
    token: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await InvitationService(db).reject_invitation(current_user, token)
    return MessageResponse(message="Invitation rejected")
