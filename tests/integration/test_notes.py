"""Integration tests for the note endpoints."""

import uuid

import pytest
from httpx import AsyncClient


async def auth_headers(client: AsyncClient, email: str) -> dict:
    await client.post("/auth/register", json={"email": email, "password": "pw1"})
    res = await client.post("/auth/login", json={"email": email, "password": "pw1"})
    return {"Authorization": f"Bearer {res.json()['accessToken']}"}


async def create_note(client: AsyncClient, headers: dict, **fields) -> dict:
    payload = {"title": "N", "content": "C", "color": "#fff", **fields}
    res = await client.post("/notes", json=payload, headers=headers)
    assert res.status_code == 200
    return res.json()


@pytest.mark.asyncio
async def test_notes_require_authentication(client: AsyncClient):
    for res in (
        await client.get("/notes"),
        await client.post("/notes", json={"title": "N", "content": "C", "color": "#fff"}),
        await client.delete(f"/notes/{uuid.uuid4()}"),
    ):
        assert res.status_code == 401
        assert res.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_notes_reject_invalid_token(client: AsyncClient):
    res = await client.get("/notes", headers={"Authorization": "Bearer not-a-token"})

    assert res.status_code == 401


@pytest.mark.asyncio
async def test_notes_reject_refresh_token(client: AsyncClient):
    await client.post("/auth/register", json={"email": "a@x.com", "password": "pw1"})
    tokens = (
        await client.post("/auth/login", json={"email": "a@x.com", "password": "pw1"})
    ).json()

    res = await client.get(
        "/notes", headers={"Authorization": f"Bearer {tokens['refreshToken']}"}
    )

    assert res.status_code == 401


@pytest.mark.asyncio
async def test_create_note_response_shape(client: AsyncClient):
    headers = await auth_headers(client, "a@x.com")

    note = await create_note(client, headers, id=None)

    assert set(note) == {"id", "title", "content", "color", "createdAt"}
    assert uuid.UUID(note["id"])
    assert (note["title"], note["content"], note["color"]) == ("N", "C", "#fff")


@pytest.mark.asyncio
async def test_upsert_updates_in_place(client: AsyncClient):
    headers = await auth_headers(client, "a@x.com")
    created = await create_note(client, headers)

    updated = await create_note(
        client, headers, id=created["id"], title="N2", content="C2", color="#000"
    )

    assert updated["id"] == created["id"]
    assert (updated["title"], updated["content"], updated["color"]) == ("N2", "C2", "#000")
    listed = (await client.get("/notes", headers=headers)).json()
    assert len(listed) == 1
    assert listed[0]["title"] == "N2"


@pytest.mark.asyncio
async def test_unparseable_id_creates_new_note(client: AsyncClient):
    headers = await auth_headers(client, "a@x.com")

    note = await create_note(client, headers, id="not-a-uuid")

    assert note["id"] != "not-a-uuid"


@pytest.mark.asyncio
@pytest.mark.parametrize("raw_id", [123, 1.5, True, {"x": 1}, ["a"]])
async def test_non_string_id_creates_new_note(client: AsyncClient, raw_id):
    headers = await auth_headers(client, "a@x.com")

    note = await create_note(client, headers, id=raw_id)

    assert uuid.UUID(note["id"])
    listed = (await client.get("/notes", headers=headers)).json()
    assert [n["id"] for n in listed] == [note["id"]]


@pytest.mark.asyncio
async def test_missing_title_is_400(client: AsyncClient):
    headers = await auth_headers(client, "a@x.com")

    res = await client.post("/notes", json={"content": "C", "color": "#fff"}, headers=headers)

    assert res.status_code == 400


@pytest.mark.asyncio
async def test_users_only_see_their_own_notes(client: AsyncClient):
    alice = await auth_headers(client, "alice@x.com")
    bob = await auth_headers(client, "bob@x.com")
    await create_note(client, alice, title="alice note")
    await create_note(client, bob, title="bob note")

    alice_notes = (await client.get("/notes", headers=alice)).json()
    bob_notes = (await client.get("/notes", headers=bob)).json()

    assert [n["title"] for n in alice_notes] == ["alice note"]
    assert [n["title"] for n in bob_notes] == ["bob note"]


@pytest.mark.asyncio
async def test_cannot_overwrite_other_users_note(client: AsyncClient):
    alice = await auth_headers(client, "alice@x.com")
    bob = await auth_headers(client, "bob@x.com")
    note = await create_note(client, alice)

    res = await client.post(
        "/notes",
        json={"id": note["id"], "title": "hijacked", "content": "x", "color": "x"},
        headers=bob,
    )

    assert res.status_code == 400
    assert res.json()["error"] == "note_not_found"
    alice_notes = (await client.get("/notes", headers=alice)).json()
    assert alice_notes[0]["title"] == "N"


@pytest.mark.asyncio
async def test_delete_own_note(client: AsyncClient):
    headers = await auth_headers(client, "a@x.com")
    note = await create_note(client, headers)

    res = await client.delete(f"/notes/{note['id']}", headers=headers)

    assert res.status_code == 200
    assert (await client.get("/notes", headers=headers)).json() == []


@pytest.mark.asyncio
async def test_delete_other_users_note_fails(client: AsyncClient):
    alice = await auth_headers(client, "alice@x.com")
    bob = await auth_headers(client, "bob@x.com")
    note = await create_note(client, alice)

    res = await client.delete(f"/notes/{note['id']}", headers=bob)

    assert res.status_code == 400
    assert len((await client.get("/notes", headers=alice)).json()) == 1


@pytest.mark.asyncio
async def test_delete_missing_note(client: AsyncClient):
    headers = await auth_headers(client, "a@x.com")

    res = await client.delete(f"/notes/{uuid.uuid4()}", headers=headers)

    assert res.status_code == 400
