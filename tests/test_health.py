import pytest


@pytest.mark.asyncio
async def test_health(client):
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"ok": True}


@pytest.mark.asyncio
async def test_root_banner(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.json()["success"] is True
