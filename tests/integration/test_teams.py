import uuid
from datetime import datetime, timedelta

import pytest
from sqlalchemy import update

from app.db.models.team import Invitation as InvitationModel
from app.db.repositories.team_repository import InvitationRepository, TeamRepository


@pytest.mark.asyncio
async def test_create_team_makes_creator_owner(client, register, create_team):
    user, headers = await register("owner@example.com", name="Owner")
    team = await create_team(headers, name="Support")

    response = await client.get("/api/team", headers=headers)

    body = response.json()
    assert body["role"] == "OWNER"
    assert body["team"]["uuid"] == team["uuid"]
    assert [m["user"]["uuid"] for m in body["team"]["members"]] == [user["uuid"]]


@pytest.mark.asyncio
async def test_user_without_team_gets_empty_response(client, register):
    _, headers = await register("loner@example.com")

    response = await client.get("/api/team", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"team": None, "role": None}


@pytest.mark.asyncio
async def test_second_team_is_rejected_without_side_effects(client, register, create_team, db_session):
    _, headers = await register("busy@example.com")
    await create_team(headers)

    response = await client.post("/api/team", json={"name": "Another"}, headers=headers)

    assert response.status_code == 400
    assert await TeamRepository(db_session).count() == 1


@pytest.mark.asyncio
async def test_invited_signup_joins_team_and_notifies_owner(client, register, create_team, join_team):
    _, owner_headers = await register("lead@example.com", name="Lead")
    await create_team(owner_headers)

    member, member_headers = await join_team(owner_headers, "writer@example.com", role="EDITOR", name="Writer")

    team = (await client.get("/api/team", headers=member_headers)).json()
    assert team["role"] == "EDITOR"

    notifications = (await client.get("/api/notifications", headers=owner_headers)).json()
    assert notifications["unread_count"] == 1
    assert notifications["notifications"][0]["type"] == "MEMBER_JOINED"


@pytest.mark.asyncio
async def test_invitation_cannot_grant_owner(client, register, create_team):
    _, headers = await register("boss@example.com")
    await create_team(headers)

    response = await client.post("/api/team/member", json={"email": "x@example.com", "role": "OWNER"}, headers=headers)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_only_owner_can_invite(client, register, create_team, join_team):
    _, owner_headers = await register("o@example.com")
    await create_team(owner_headers)
    _, editor_headers = await join_team(owner_headers, "e@example.com", role="EDITOR")

    response = await client.post(
        "/api/team/member", json={"email": "new@example.com", "role": "VIEWER"}, headers=editor_headers
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_existing_user_accepts_invitation(client, register, create_team):
    _, owner_headers = await register("host@example.com", name="Host")
    await create_team(owner_headers, name="Guides")
    _, guest_headers = await register("guest@example.com")

    invite = await client.post(
        "/api/team/member", json={"email": "guest@example.com", "role": "VIEWER"}, headers=owner_headers
    )
    token = invite.json()["invitation_link"].rsplit("/", 1)[-1]

    received = (await client.get("/api/notifications", headers=guest_headers)).json()
    assert received["notifications"][0]["type"] == "INVITATION_RECEIVED"

    details = await client.get(f"/api/invite/{token}")
    assert details.status_code == 200
    assert details.json()["team"]["name"] == "Guides"
    assert details.json()["sender_name"] == "Host"

    accepted = await client.post(f"/api/invite/{token}", headers=guest_headers)
    assert accepted.status_code == 200
    assert (await client.get("/api/team", headers=guest_headers)).json()["role"] == "VIEWER"

    # Принятое приглашение больше не действует
    assert (await client.get(f"/api/invite/{token}")).status_code == 400


@pytest.mark.asyncio
async def test_invitation_for_other_email_cannot_be_accepted(client, register, create_team):
    _, owner_headers = await register("chief@example.com")
    await create_team(owner_headers)
    _, intruder_headers = await register("intruder@example.com")

    invite = await client.post(
        "/api/team/member", json={"email": "target@example.com", "role": "EDITOR"}, headers=owner_headers
    )
    token = invite.json()["invitation_link"].rsplit("/", 1)[-1]

    response = await client.post(f"/api/invite/{token}", headers=intruder_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_rejected_invitation_is_closed(client, register, create_team):
    _, owner_headers = await register("r-owner@example.com")
    await create_team(owner_headers)
    _, headers = await register("r-guest@example.com")

    invite = await client.post(
        "/api/team/member", json={"email": "r-guest@example.com", "role": "EDITOR"}, headers=owner_headers
    )
    token = invite.json()["invitation_link"].rsplit("/", 1)[-1]

    assert (await client.post(f"/api/invite/{token}/reject", headers=headers)).status_code == 200
    assert (await client.post(f"/api/invite/{token}", headers=headers)).status_code == 400


@pytest.mark.asyncio
async def test_role_change_cannot_create_second_owner(client, register, create_team, join_team):
    _, owner_headers = await register("solo@example.com")
    await create_team(owner_headers)
    await join_team(owner_headers, "helper@example.com", role="VIEWER")

    members = (await client.get("/api/team", headers=owner_headers)).json()["team"]["members"]
    helper = next(m for m in members if m["role"] == "VIEWER")
    me = next(m for m in members if m["role"] == "OWNER")

    promote = await client.put(f"/api/team/member/{helper['uuid']}", json={"role": "OWNER"}, headers=owner_headers)
    assert promote.status_code == 400

    demote_self = await client.put(f"/api/team/member/{me['uuid']}", json={"role": "EDITOR"}, headers=owner_headers)
    assert demote_self.status_code == 400

    ok = await client.put(f"/api/team/member/{helper['uuid']}", json={"role": "EDITOR"}, headers=owner_headers)
    assert ok.status_code == 200


@pytest.mark.asyncio
async def test_transfer_ownership_swaps_roles(client, register, create_team, join_team):
    owner, owner_headers = await register("old@example.com")
    await create_team(owner_headers)
    successor, successor_headers = await join_team(owner_headers, "new@example.com", role="EDITOR")

    members = (await client.get("/api/team", headers=owner_headers)).json()["team"]["members"]
    target = next(m for m in members if m["user"]["uuid"] == successor["uuid"])

    response = await client.post("/api/team/transfer", json={"member_id": target["uuid"]}, headers=owner_headers)

    assert response.status_code == 200
    assert response.json()["owner_id"] == successor["uuid"]
    assert (await client.get("/api/team", headers=owner_headers)).json()["role"] == "EDITOR"
    assert (await client.get("/api/team", headers=successor_headers)).json()["role"] == "OWNER"


@pytest.mark.asyncio
async def test_remove_member(client, register, create_team, join_team):
    _, owner_headers = await register("keeper@example.com")
    await create_team(owner_headers)
    member, member_headers = await join_team(owner_headers, "leaver@example.com")

    members = (await client.get("/api/team", headers=owner_headers)).json()["team"]["members"]
    target = next(m for m in members if m["user"]["uuid"] == member["uuid"])

    response = await client.delete(f"/api/team/member/{target['uuid']}", headers=owner_headers)

    assert response.status_code == 200
    assert (await client.get("/api/team", headers=member_headers)).json()["team"] is None


@pytest.mark.asyncio
async def test_expired_pending_invitation_can_be_reissued(client, register, create_team, db_session):
    _, owner_headers = await register("late-owner@example.com")
    team = await create_team(owner_headers)

    first = await client.post(
        "/api/team/member", json={"email": "late@example.com", "role": "EDITOR"}, headers=owner_headers
    )
    old_token = first.json()["invitation_link"].rsplit("/", 1)[-1]

    await db_session.execute(
        update(InvitationModel)
        .where(InvitationModel.token == old_token)
        .values(expires_at=datetime.utcnow() - timedelta(days=1))
    )
    await db_session.commit()

    second = await client.post(
        "/api/team/member", json={"email": "late@example.com", "role": "EDITOR"}, headers=owner_headers
    )

    assert second.status_code == 201
    new_token = second.json()["invitation_link"].rsplit("/", 1)[-1]
    assert new_token != old_token

    pending = await InvitationRepository(db_session).get_pending("late@example.com", uuid.UUID(team["uuid"]))
    assert pending.token == new_token
    assert (await client.get(f"/api/invite/{old_token}")).status_code == 400
    assert (await client.get(f"/api/invite/{new_token}")).status_code == 200
