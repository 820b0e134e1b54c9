import uuid

import pytest

from app.db.repositories.version_repository import ManualVersionRepository
from app.domains.versions.entities import ManualVersion


def section_titles(sections):
    return [(s["title"], section_titles(s["children"])) for s in sections]


async def populate(client, headers, manual_id):
    base = f"/api/manual/{manual_id}"
    intro = (await client.post(f"{base}/section", json={"title": "Intro"}, headers=headers)).json()
    setup = (await client.post(f"{base}/section", json={"title": "Setup"}, headers=headers)).json()
    await client.post(f"{base}/section", json={"title": "Install", "parent_id": setup["uuid"]}, headers=headers)
    await client.post(
        f"{base}/block",
        json={"section_id": intro["uuid"], "type": "HEADING1", "content": {"text": "Welcome"}},
        headers=headers
    )


@pytest.mark.asyncio
async def test_restore_brings_back_snapshot(client, register, create_team, create_manual):
    _, headers = await register("ver@example.com")
    await create_team(headers)
    manual = await create_manual(headers, title="Original", description="First draft")
    base = f"/api/manual/{manual['uuid']}"
    await populate(client, headers, manual["uuid"])

    before = (await client.get(base, headers=headers)).json()
    version = await client.post(f"{base}/version", json={"summary": "Before rewrite"}, headers=headers)
    assert version.status_code == 201

    # Меняем все: заголовок, описание и дерево
    await client.put(base, json={"title": "Rewritten", "description": "Second draft"}, headers=headers)
    for section in before["sections"]:
        await client.delete(f"{base}/section/{section['uuid']}", headers=headers)
    await client.post(f"{base}/section", json={"title": "Something else"}, headers=headers)

    restored = await client.post(f"{base}/version/{version.json()['uuid']}/restore", headers=headers)
    assert restored.status_code == 200
    assert restored.json()["sections_restored"] == 3
    assert restored.json()["blocks_restored"] == 1

    after = (await client.get(base, headers=headers)).json()
    assert after["title"] == "Original"
    assert after["description"] == "First draft"
    assert section_titles(after["sections"]) == section_titles(before["sections"])
    # Новые идентификаторы
    assert {s["uuid"] for s in after["sections"]}.isdisjoint({s["uuid"] for s in before["sections"]})


@pytest.mark.asyncio
async def test_snapshot_of_restored_state_restores_identically(client, register, create_team, create_manual):
    _, headers = await register("twice@example.com")
    await create_team(headers)
    manual = await create_manual(headers)
    base = f"/api/manual/{manual['uuid']}"
    await populate(client, headers, manual["uuid"])

    first = (await client.post(f"{base}/version", json={}, headers=headers)).json()
    await client.post(f"{base}/version/{first['uuid']}/restore", headers=headers)
    restored_once = (await client.get(base, headers=headers)).json()

    second = (await client.post(f"{base}/version", json={}, headers=headers)).json()
    await client.post(f"{base}/version/{second['uuid']}/restore", headers=headers)
    restored_twice = (await client.get(base, headers=headers)).json()

    assert restored_twice["title"] == restored_once["title"]
    assert section_titles(restored_twice["sections"]) == section_titles(restored_once["sections"])


@pytest.mark.asyncio
async def test_version_list_and_detail(client, register, create_team, create_manual):
    user, headers = await register("list@example.com", name="Lister")
    await create_team(headers)
    manual = await create_manual(headers, title="Listed")
    base = f"/api/manual/{manual['uuid']}"
    await client.post(f"{base}/version", json={"summary": "Second"}, headers=headers)

    versions = (await client.get(f"{base}/version", headers=headers)).json()["versions"]
    assert [v["summary"] for v in versions] == ["Second", "Initial version"]
    assert versions[0]["creator"]["name"] == "Lister"

    detail = (await client.get(f"{base}/version/{versions[0]['uuid']}", headers=headers)).json()
    assert detail["content"]["title"] == "Listed"
    assert detail["content"]["sections"] == []


@pytest.mark.asyncio
async def test_viewer_cannot_snapshot_or_restore(client, register, create_team, join_team, create_manual):
    _, owner_headers = await register("vr-owner@example.com")
    await create_team(owner_headers)
    _, viewer_headers = await join_team(owner_headers, "vr-viewer@example.com", role="VIEWER")
    manual = await create_manual(owner_headers)
    base = f"/api/manual/{manual['uuid']}"
    versions = (await client.get(f"{base}/version", headers=viewer_headers)).json()["versions"]

    assert (await client.post(f"{base}/version", json={}, headers=viewer_headers)).status_code == 403
    restore = await client.post(f"{base}/version/{versions[0]['uuid']}/restore", headers=viewer_headers)
    assert restore.status_code == 403


@pytest.mark.asyncio
async def test_corrupted_version_is_rejected(client, register, create_team, create_manual, db_session):
    user, headers = await register("broken@example.com")
    await create_team(headers)
    manual = await create_manual(headers, title="Keep me")
    broken = await ManualVersionRepository(db_session).create(ManualVersion.create_version(
        manual_id=uuid.UUID(manual["uuid"]),
        content="{not json",
        created_by=uuid.UUID(user["uuid"]),
        summary="Broken"
    ))
    await db_session.commit()

    response = await client.post(f"/api/manual/{manual['uuid']}/version/{broken.uuid}/restore", headers=headers)

    assert response.status_code == 400
    assert (await client.get(f"/api/manual/{manual['uuid']}", headers=headers)).json()["title"] == "Keep me"
