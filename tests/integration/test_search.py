import pytest


async def seed(client, headers, create_manual):
    manual = await create_manual(headers, title="Deployment guide", description="How we ship")
    base = f"/api/manual/{manual['uuid']}"
    section = (await client.post(f"{base}/section", json={"title": "Deploy to staging"}, headers=headers)).json()
    await client.post(
        f"{base}/block",
        json={"section_id": section["uuid"], "type": "BODY", "content": "<p>Run the <b>deploy</b> script</p>"},
        headers=headers
    )
    return manual


@pytest.mark.asyncio
async def test_search_finds_manuals_sections_and_blocks(client, register, create_team, create_manual):
    _, headers = await register("seeker@example.com")
    await create_team(headers, name="Ops")
    manual = await seed(client, headers, create_manual)

    response = await client.get("/api/search", params={"q": "DEPLOY"}, headers=headers)

    assert response.status_code == 200
    results = response.json()["results"]
    assert [m["uuid"] for m in results["manuals"]] == [manual["uuid"]]
    assert results["manuals"][0]["team_name"] == "Ops"
    assert results["sections"][0]["title"] == "Deploy to staging"
    assert results["sections"][0]["manual_title"] == "Deployment guide"
    block = results["blocks"][0]
    assert block["raw_preview"] == "Run the deploy script"
    assert block["preview"] == "Run the <mark>deploy</mark> script"
    assert response.json()["total_results"] == 3


@pytest.mark.asyncio
async def test_blank_query_returns_nothing(client, register):
    _, headers = await register("blank@example.com")

    response = await client.get("/api/search", params={"q": "   "}, headers=headers)

    assert response.status_code == 200
    assert response.json()["total_results"] == 0


@pytest.mark.asyncio
async def test_search_is_scoped_to_accessible_manuals(client, register, create_team, create_manual):
    _, owner_headers = await register("scoped@example.com")
    await create_team(owner_headers)
    await seed(client, owner_headers, create_manual)

    _, other_headers = await register("other-team@example.com")
    await create_team(other_headers, name="Other")

    response = await client.get("/api/search", params={"q": "deploy"}, headers=other_headers)

    assert response.json()["total_results"] == 0


@pytest.mark.asyncio
async def test_like_wildcards_match_only_literally(client, register, create_team, create_manual):
    _, headers = await register("literal@example.com")
    await create_team(headers)
    await seed(client, headers, create_manual)

    for query in ("%", "_", "dep%oy", "d_ploy"):
        response = await client.get("/api/search", params={"q": query}, headers=headers)
        assert response.status_code == 200
        assert response.json()["total_results"] == 0, query

    await create_manual(headers, title="100% uptime", description="snake_case names")

    response = await client.get("/api/search", params={"q": "%"}, headers=headers)
    manuals = response.json()["results"]["manuals"]
    assert [m["title"] for m in manuals] == ["100% uptime"]

    response = await client.get("/api/search", params={"q": "e_c"}, headers=headers)
    manuals = response.json()["results"]["manuals"]
    assert [m["title"] for m in manuals] == ["100% uptime"]
