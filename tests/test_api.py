"""HTTP-level tests for the notes API routes."""

import httpx
import pytest
import pytest_asyncio

from config.database import get_db
from main import app
from utils import minio_client


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


async def _register(client, name="owner", password="secret-pass"):
    response = await client.post("/api/v1/user/register", json={"name": name, "password": password})
    assert response.status_code == 200
    return response.json()


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


async def test_health(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_first_account_is_site_owner(client):
    owner = await _register(client)
    second = await _register(client, "guest")

    assert owner["user"]["role"] == "superadmin"
    assert second["user"]["role"] == "user"

    response = await client.get("/api/v1/public/site-info")
    assert response.status_code == 200
    assert response.json() == {"id": owner["user"]["id"], "name": "owner", "image": ""}


async def test_duplicate_name_is_rejected(client):
    await _register(client)
    response = await client.post("/api/v1/user/register", json={"name": "owner", "password": "another-pass"})
    assert response.status_code == 400


async def test_login(client):
    await _register(client)

    ok = await client.post("/api/v1/user/login", json={"name": "owner", "password": "secret-pass"})
    assert ok.status_code == 200
    assert ok.json()["token"]

    bad = await client.post("/api/v1/user/login", json={"name": "owner", "password": "wrong-pass"})
    assert bad.status_code == 401
    assert bad.json()["detail"]["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer not-a-token"}])
async def test_note_routes_require_auth(client, headers):
    response = await client.post("/api/v1/note/list", json={}, headers=headers)
    assert response.status_code == 401


async def test_upsert_then_list(client):
    token = (await _register(client))["token"]

    created = await client.post(
        "/api/v1/note/upsert",
        json={"content": "hello #api/test", "isShare": True},
        headers=_auth(token),
    )
    assert created.status_code == 200
    body = created.json()
    assert body["attachmentsFailed"] is False
    note_id = body["note"]["id"]
    assert sorted(link["tag"]["name"] for link in body["note"]["tags"]) == ["api", "test"]

    listed = await client.post("/api/v1/note/list", json={"searchText": "hello"}, headers=_auth(token))
    assert [n["id"] for n in listed.json()] == [note_id]

    public = await client.post("/api/v1/note/public-detail", json={"id": note_id})
    assert public.json()["content"] == "hello #api/test"


async def test_update_unknown_note_is_404(client):
    token = (await _register(client))["token"]
    response = await client.post(
        "/api/v1/note/upsert", json={"id": 999, "content": "x"}, headers=_auth(token)
    )
    assert response.status_code == 404
    assert response.json()["detail"]["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_batch_trash_and_delete(client, deleted_files):
    token = (await _register(client))["token"]
    note = (await client.post("/api/v1/note/upsert", json={"content": "bye"}, headers=_auth(token))).json()
    ids = [note["note"]["id"]]

    trashed = await client.post("/api/v1/note/batch-trash", json={"ids": ids}, headers=_auth(token))
    assert trashed.json() == {"count": 1}
    recycle = await client.post("/api/v1/note/list", json={"isRecycle": True}, headers=_auth(token))
    assert [n["id"] for n in recycle.json()] == ids

    deleted = await client.post("/api/v1/note/batch-delete", json={"ids": ids}, headers=_auth(token))
    assert deleted.json() == {"ok": True}
    detail = await client.post("/api/v1/note/detail", json={"id": ids[0]}, headers=_auth(token))
    assert detail.json() is None


async def test_config_update_and_list(client):
    token = (await _register(client))["token"]

    updated = await client.post(
        "/api/v1/config/update",
        json={"key": "isOrderByCreateTime", "value": True},
        headers=_auth(token),
    )
    assert updated.json() == {"key": "isOrderByCreateTime", "value": True}

    listed = await client.get("/api/v1/config/list", headers=_auth(token))
    assert listed.json() == {"isOrderByCreateTime": True}


async def test_follow_from_is_public(client):
    owner = await _register(client)
    payload = {
        "mySiteAccountId": owner["user"]["id"],
        "siteUrl": "https://remote.example",
        "siteName": "Remote",
        "siteAvatar": "",
    }

    response = await client.post("/api/v1/follows/follow-from", json=payload)
    assert response.status_code == 200
    assert response.json()["success"] is True

    followers = await client.get("/api/v1/follows/followers", headers=_auth(owner["token"]))
    assert [f["siteUrl"] for f in followers.json()] == ["https://remote.example"]


async def test_follow_with_bad_url(client):
    token = (await _register(client))["token"]
    response = await client.post(
        "/api/v1/follows/follow",
        json={"siteUrl": "gopher://old.example", "mySiteUrl": "https://mine.example"},
        headers=_auth(token),
    )
    assert response.status_code == 400
    assert response.json()["detail"]["error"]["code"] == "VALIDATION_ERROR"


async def test_private_file_needs_its_uploader(client, monkeypatch):
    async def fake_download(object_name):
        return b"secret"

    monkeypatch.setattr(minio_client, "download_file", fake_download)
    owner = await _register(client)
    guest = await _register(client, "guest")
    url = f"/api/file/{owner['user']['id']}/abc.txt"

    assert (await client.get(url)).status_code == 404
    assert (await client.get(url, headers=_auth(guest["token"]))).status_code == 404
    allowed = await client.get(url, headers=_auth(owner["token"]))
    assert allowed.status_code == 200
    assert allowed.content == b"secret"
