import os

import pytest

from app.core.config import settings

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.mark.asyncio
async def test_upload_image(client, register, create_team, create_manual):
    _, headers = await register("uploader@example.com")
    await create_team(headers)
    manual = await create_manual(headers)

    response = await client.post(
        "/api/upload",
        files={"file": ("diagram.png", PNG_BYTES, "image/png")},
        data={"manual_id": manual["uuid"]},
        headers=headers
    )

    assert response.status_code == 200, response.text
    stored = response.json()["file"]
    assert stored["filename"] == "diagram.png"
    assert stored["size"] == len(PNG_BYTES)
    assert stored["url"].startswith("/uploads/") and stored["url"].endswith(".png")
    assert set(stored) == {"uuid", "filename", "url", "mime_type", "size"}
    with open(os.path.join(settings.upload_dir, stored["url"].rsplit("/", 1)[-1]), "rb") as saved:
        assert saved.read() == PNG_BYTES


@pytest.mark.asyncio
async def test_upload_rejects_unsupported_type(client, register):
    _, headers = await register("exe@example.com")

    response = await client.post(
        "/api/upload",
        files={"file": ("tool.exe", b"MZ" + b"\x00" * 10, "application/octet-stream")},
        headers=headers
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_upload_to_invisible_manual_is_not_found(client, register, create_team, create_manual):
    _, owner_headers = await register("hidden-owner@example.com")
    await create_team(owner_headers)
    manual = await create_manual(owner_headers)
    _, stranger_headers = await register("hidden-stranger@example.com")

    response = await client.post(
        "/api/upload",
        files={"file": ("a.png", PNG_BYTES, "image/png")},
        data={"manual_id": manual["uuid"]},
        headers=stranger_headers
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_upload_requires_session(client):
    response = await client.post("/api/upload", files={"file": ("a.png", PNG_BYTES, "image/png")})
    assert response.status_code == 401
