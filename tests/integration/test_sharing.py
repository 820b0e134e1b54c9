from datetime import datetime, timedelta

import pytest


async def build_manual(client, headers, create_manual):
    """Мануал из двух уровней разделов с блоками на каждом уровне"""
    manual = await create_manual(headers, title="Handbook", description="Public handbook")
    base = f"/api/manual/{manual['uuid']}"
    root = (await client.post(f"{base}/section", json={"title": "Root"}, headers=headers)).json()
    child = (await client.post(
        f"{base}/section", json={"title": "Child", "parent_id": root["uuid"]}, headers=headers
    )).json()
    for section in (root, child):
        response = await client.post(
            f"{base}/block",
            json={"section_id": section["uuid"], "type": "BODY", "content": "<p>secret body</p>"},
            headers=headers
        )
        assert response.status_code == 201
    return manual


async def create_link(client, headers, manual_id, access_type, expires_at=None):
    payload = {"access_type": access_type}
    if expires_at:
        payload["expires_at"] = expires_at
    response = await client.post(f"/api/manual/{manual_id}/share/external", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def collect_blocks(sections):
    for section in sections:
        yield from section["blocks"]
        yield from collect_blocks(section["children"])


@pytest.mark.asyncio
async def test_title_only_link_hides_all_blocks(client, register, create_team, create_manual):
    _, headers = await register("pub@example.com", name="Publisher")
    await create_team(headers)
    manual = await build_manual(client, headers, create_manual)
    link = await create_link(client, headers, manual["uuid"], "TITLE_ONLY")
    assert link["url"].endswith(f"/share/{link['token']}")

    response = await client.get(f"/api/share/{link['token']}")

    assert response.status_code == 200
    body = response.json()
    assert body["access_type"] == "TITLE_ONLY"
    assert body["manual"]["owner"]["name"] == "Publisher"
    sections = body["manual"]["sections"]
    assert sections[0]["title"] == "Root"
    assert sections[0]["children"][0]["title"] == "Child"
    assert list(collect_blocks(sections)) == []
    assert "secret body" not in response.text


@pytest.mark.asyncio
async def test_full_access_link_returns_blocks(client, register, create_team, create_manual):
    _, headers = await register("full@example.com")
    await create_team(headers)
    manual = await build_manual(client, headers, create_manual)
    link = await create_link(client, headers, manual["uuid"], "FULL_ACCESS")

    response = await client.get(f"/api/share/{link['token']}")

    blocks = list(collect_blocks(response.json()["manual"]["sections"]))
    assert [b["content"] for b in blocks] == ["<p>secret body</p>", "<p>secret body</p>"]


@pytest.mark.asyncio
async def test_unknown_link_is_not_found(client):
    assert (await client.get("/api/share/deadbeef")).status_code == 404


@pytest.mark.asyncio
async def test_disabled_link_is_forbidden_even_when_expired(client, register, create_team, create_manual):
    _, headers = await register("toggle@example.com")
    await create_team(headers)
    manual = await create_manual(headers)
    past = (datetime.utcnow() - timedelta(days=1)).isoformat()
    link = await create_link(client, headers, manual["uuid"], "FULL_ACCESS", expires_at=past)

    response = await client.put(
        f"/api/manual/{manual['uuid']}/share/external/{link['uuid']}", json={"is_active": False}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    assert (await client.get(f"/api/share/{link['token']}")).status_code == 403


@pytest.mark.asyncio
async def test_expired_link_is_gone(client, register, create_team, create_manual):
    _, headers = await register("expired@example.com")
    await create_team(headers)
    manual = await create_manual(headers)
    past = (datetime.utcnow() - timedelta(minutes=1)).isoformat()
    link = await create_link(client, headers, manual["uuid"], "FULL_ACCESS", expires_at=past)

    response = await client.get(f"/api/share/{link['token']}")

    assert response.status_code == 410
    assert response.json()["code"] == "GONE"


@pytest.mark.asyncio
async def test_deleted_link_stops_working(client, register, create_team, create_manual):
    _, headers = await register("del-link@example.com")
    await create_team(headers)
    manual = await create_manual(headers)
    link = await create_link(client, headers, manual["uuid"], "TITLE_ONLY")

    response = await client.delete(f"/api/manual/{manual['uuid']}/share/external/{link['uuid']}", headers=headers)

    assert response.status_code == 200
    assert (await client.get(f"/api/share/{link['token']}")).status_code == 404


@pytest.mark.asyncio
async def test_share_settings_and_member_share(client, register, create_team, join_team, create_manual):
    _, owner_headers = await register("s-owner@example.com")
    await create_team(owner_headers)
    member, member_headers = await join_team(owner_headers, "s-member@example.com", role="VIEWER")
    manual = await create_manual(owner_headers, title="Shared guide")

    response = await client.post(
        f"/api/manual/{manual['uuid']}/share/team",
        json={"user_id": member["uuid"], "permission": "EDITOR"},
        headers=owner_headers
    )
    assert response.status_code == 201
    share = response.json()

    duplicate = await client.post(
        f"/api/manual/{manual['uuid']}/share",
        json={"user_id": member["uuid"], "permission": "VIEWER"},
        headers=owner_headers
    )
    assert duplicate.status_code == 400

    settings = (await client.get(f"/api/manual/{manual['uuid']}/share", headers=owner_headers)).json()
    assert [m["user_id"] for m in settings["team_members"]] == [member["uuid"]]
    assert settings["shared_users"][0]["permission"] == "EDITOR"

    notifications = (await client.get("/api/notifications", headers=member_headers)).json()["notifications"]
    assert notifications[0]["type"] == "MANUAL_SHARED"
    assert notifications[0]["related_id"] == manual["uuid"]

    changed = await client.put(
        f"/api/manual/{manual['uuid']}/share/team/{share['uuid']}",
        json={"permission": "VIEWER"},
        headers=owner_headers
    )
    assert changed.status_code == 200
    notifications = (await client.get("/api/notifications", headers=member_headers)).json()["notifications"]
    assert notifications[0]["type"] == "PERMISSION_CHANGED"

    removed = await client.delete(f"/api/manual/{manual['uuid']}/share/team/{share['uuid']}", headers=owner_headers)
    assert removed.status_code == 200


@pytest.mark.asyncio
async def test_share_with_non_member_is_rejected(client, register, create_team, create_manual):
    _, owner_headers = await register("n-owner@example.com")
    await create_team(owner_headers)
    manual = await create_manual(owner_headers)
    stranger, _ = await register("n-stranger@example.com")

    response = await client.post(
        f"/api/manual/{manual['uuid']}/share/team",
        json={"user_id": stranger["uuid"], "permission": "VIEWER"},
        headers=owner_headers
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_share_cannot_grant_owner(client, register, create_team, create_manual):
    user, headers = await register("grant@example.com")
    await create_team(headers)
    manual = await create_manual(headers)

    response = await client.post(
        f"/api/manual/{manual['uuid']}/share/team",
        json={"user_id": user["uuid"], "permission": "OWNER"},
        headers=headers
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_editor_cannot_manage_sharing(client, register, create_team, join_team, create_manual):
    _, owner_headers = await register("e-owner@example.com")
    await create_team(owner_headers)
    _, editor_headers = await join_team(owner_headers, "e-editor@example.com", role="EDITOR")
    manual = await create_manual(owner_headers)

    response = await client.get(f"/api/manual/{manual['uuid']}/share", headers=editor_headers)

    assert response.status_code == 403
