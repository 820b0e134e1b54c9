import uuid

import pytest


async def owner_with_two_notifications(register, create_team, join_team):
    _, owner_headers = await register("notify-owner@example.com")
    await create_team(owner_headers)
    await join_team(owner_headers, "first-joiner@example.com")
    await join_team(owner_headers, "second-joiner@example.com")
    return owner_headers


@pytest.mark.asyncio
async def test_mark_one_notification_read(client, register, create_team, join_team):
    headers = await owner_with_two_notifications(register, create_team, join_team)
    listed = (await client.get("/api/notifications", headers=headers)).json()
    assert listed["unread_count"] == 2

    target = listed["notifications"][0]["uuid"]
    response = await client.put(f"/api/notifications/{target}/read", headers=headers)
    assert response.status_code == 200

    unread = (await client.get("/api/notifications", params={"unread_only": True}, headers=headers)).json()
    assert unread["unread_count"] == 1
    assert target not in [n["uuid"] for n in unread["notifications"]]


@pytest.mark.asyncio
async def test_mark_all_read(client, register, create_team, join_team):
    headers = await owner_with_two_notifications(register, create_team, join_team)

    response = await client.put("/api/notifications/read-all", headers=headers)

    assert response.status_code == 200
    assert (await client.get("/api/notifications", headers=headers)).json()["unread_count"] == 0


@pytest.mark.asyncio
async def test_foreign_notification_is_not_found(client, register, create_team, join_team):
    owner_headers = await owner_with_two_notifications(register, create_team, join_team)
    target = (await client.get("/api/notifications", headers=owner_headers)).json()["notifications"][0]["uuid"]
    _, other_headers = await register("snoop@example.com")

    assert (await client.put(f"/api/notifications/{target}/read", headers=other_headers)).status_code == 404
    assert (await client.put(f"/api/notifications/{uuid.uuid4()}/read", headers=other_headers)).status_code == 404
