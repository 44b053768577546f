import pytest
from sqlalchemy import select

from app.dependencies import get_account_service
from app.main import app
from app.models.account import Account
from app.services.accounts import AccountService
from app.services.passwords import verify_password
from app.utils.exceptions import StoreError


async def _login(client, login, password):
    return await client.post("/login", json={"login": login, "password": password})


@pytest.mark.asyncio
async def test_alice_scenario(client, db_session, auth_headers):
    response = await client.post("/person/sign-up", json={"login": "alice", "password": "hunter2"})
    assert response.status_code == 200
    assert response.content == b""

    response = await client.get("/person/", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == [{"id": 1, "login": "alice"}]
    assert "password" not in response.text

    response = await client.patch(
        "/person/", json={"login": "alice", "password": "newpass1"}, headers=auth_headers
    )
    assert response.status_code == 200

    assert (await _login(client, "alice", "hunter2")).status_code == 401
    assert (await _login(client, "alice", "newpass1")).status_code == 200

    stored = (await db_session.execute(select(Account).where(Account.login == "alice"))).scalars().one()
    assert stored.password_hash not in ("hunter2", "newpass1")
    assert verify_password("newpass1", stored.password_hash)


@pytest.mark.asyncio
async def test_sign_up_conflict(client):
    body = {"login": "alice", "password": "hunter2"}
    first = await client.post("/person/sign-up", json=body)
    second = await client.post("/person/sign-up", json=body)

    assert first.status_code == 200
    assert second.status_code == 409
    assert second.json()["message"] == "Login 'alice' is already taken"


@pytest.mark.asyncio
async def test_sign_up_field_errors(client):
    response = await client.post("/person/sign-up", json={"login": "", "password": "abc"})

    assert response.status_code == 400
    assert set(response.json()) == {"login", "password"}


@pytest.mark.asyncio
async def test_sign_up_missing_field(client):
    response = await client.post("/person/sign-up", json={"login": "alice"})

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Some of fields empty"
    assert "password" in body["details"]


@pytest.mark.asyncio
async def test_sign_up_null_field(client):
    response = await client.post("/person/sign-up", json={"login": None, "password": "hunter2"})

    assert response.status_code == 400
    assert response.json()["message"] == "Some of fields empty"


@pytest.mark.asyncio
async def test_create_returns_201_with_record(client, auth_headers):
    response = await client.post("/person/", json={"login": "bob", "password": "secret99"}, headers=auth_headers)

    assert response.status_code == 201
    assert response.json() == {"id": 1, "login": "bob"}


@pytest.mark.asyncio
async def test_create_invalid_body(client, auth_headers):
    response = await client.post("/person/", json={"login": "bob", "password": "123"}, headers=auth_headers)

    assert response.status_code == 400
    assert "password" in response.json()


@pytest.mark.asyncio
async def test_create_duplicate(client, auth_headers):
    await client.post("/person/", json={"login": "bob", "password": "secret99"}, headers=auth_headers)
    response = await client.post("/person/", json={"login": "bob", "password": "secret99"}, headers=auth_headers)

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_find_by_id(client, auth_headers):
    await client.post("/person/sign-up", json={"login": "alice", "password": "hunter2"})

    found = await client.get("/person/1", headers=auth_headers)
    missing = await client.get("/person/7", headers=auth_headers)

    assert found.status_code == 200
    assert found.json() == {"id": 1, "login": "alice"}
    assert missing.status_code == 404
    assert missing.json()["message"] == "Person with id 7 not found"


@pytest.mark.asyncio
async def test_update(client, auth_headers):
    await client.post("/person/sign-up", json={"login": "alice", "password": "hunter2"})

    response = await client.put(
        "/person/", json={"id": 1, "login": "alicia", "password": "brandnew1"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert (await client.get("/person/1", headers=auth_headers)).json() == {"id": 1, "login": "alicia"}
    assert (await _login(client, "alicia", "brandnew1")).status_code == 200
    assert (await _login(client, "alice", "hunter2")).status_code == 401


@pytest.mark.asyncio
async def test_update_unknown_id(client, auth_headers):
    response = await client.put(
        "/person/", json={"id": 7, "login": "alice", "password": "hunter2"}, headers=auth_headers
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_to_taken_login(client, auth_headers):
    await client.post("/person/sign-up", json={"login": "alice", "password": "hunter2"})
    await client.post("/person/sign-up", json={"login": "bob", "password": "hunter3"})

    response = await client.put(
        "/person/", json={"id": 2, "login": "alice", "password": "hunter3"}, headers=auth_headers
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_update_requires_id(client, auth_headers):
    response = await client.put("/person/", json={"id": 0, "login": "alice", "password": "hunter2"}, headers=auth_headers)

    assert response.status_code == 400
    assert "id" in response.json()


@pytest.mark.asyncio
async def test_update_password_unknown_login(client, auth_headers):
    response = await client.patch("/person/", json={"login": "nobody", "password": "newpass1"}, headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "Person with login 'nobody' not found"


@pytest.mark.asyncio
async def test_delete_twice(client, auth_headers):
    for login in ("a", "b", "c", "d", "e", "f", "g"):
        await client.post("/person/sign-up", json={"login": login, "password": "hunter2"})

    first = await client.delete("/person/7", headers=auth_headers)
    second = await client.delete("/person/7", headers=auth_headers)

    assert first.status_code == 200
    assert second.status_code == 404
    assert [p["id"] for p in (await client.get("/person/", headers=auth_headers)).json()] == [1, 2, 3, 4, 5, 6]


@pytest.mark.asyncio
async def test_store_failure_is_summarised(client, auth_headers):
    class BrokenStore:
        async def list_all(self):
            raise StoreError("Failed to list accounts")

    app.dependency_overrides[get_account_service] = lambda: AccountService(BrokenStore())
    response = await client.get("/person/", headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {
        "message": "Storage failure",
        "details": "The account store could not complete the operation",
    }


@pytest.mark.asyncio
async def test_sign_up_unencodable_password(client):
    response = await client.post(
        "/person/sign-up",
        content=b'{"login": "alice", "password": "abcdef\\ud800"}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"password": "Password must be valid UTF-8"}


@pytest.mark.asyncio
async def test_patch_unencodable_login(client, auth_headers):
    response = await client.patch(
        "/person/",
        content=b'{"login": "al\\ud800ce", "password": "newpass1"}',
        headers={**auth_headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"login": "Login must be valid UTF-8"}
