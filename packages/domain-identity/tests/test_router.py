"""HTTP tests for the /users routes."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

NEW_USER = {"userName": "jdoe", "email": "jdoe@acme.io", "userRole": "TenantAdmin"}


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def created(client: TestClient) -> str:
    response = client.post("/users", json=NEW_USER)
    assert response.status_code == 201
    return response.json()["data"]["userName"]


@pytest.mark.unit
class TestCreateRoute:
    def test_created(self, client: TestClient) -> None:
        response = client.post("/users", json=NEW_USER)
        assert response.status_code == 201
        assert response.json() == {"data": {"userName": "jdoe"}}

    def test_duplicate(self, client: TestClient, created: str) -> None:
        response = client.post("/users", json=NEW_USER)
        assert response.status_code == 409
        assert response.json() == {"message": "User jdoe already exists"}

    def test_missing_body(self, client: TestClient) -> None:
        response = client.post("/users")
        assert response.status_code == 400
        assert response.json() == {"message": "Missing request body"}

    def test_missing_field(self, client: TestClient) -> None:
        response = client.post("/users", json={"userName": "jdoe"})
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid request body"}


@pytest.mark.unit
class TestReadRoutes:
    def test_get(self, client: TestClient, created: str) -> None:
        response = client.get(f"/users/{created}")
        assert response.status_code == 200
        user = response.json()["data"]
        assert user["userName"] == "jdoe"
        assert user["email"] == "jdoe@acme.io"
        assert user["userRole"] == "TenantAdmin"
        assert user["enabled"] is True
        assert "created" in user

    def test_get_missing(self, client: TestClient) -> None:
        response = client.get("/users/ghost")
        assert response.status_code == 404
        assert response.json() == {"message": "User ghost not found"}

    def test_list_until_exhausted(self, client: TestClient) -> None:
        names = {f"user-{n}" for n in range(3)}
        for name in names:
            client.post("/users", json={**NEW_USER, "userName": name})
        seen: list[str] = []
        params: dict[str, object] = {"limit": 2}
        while True:
            body = client.get("/users", params=params).json()
            seen.extend(user["userName"] for user in body["data"])
            if "next_token" not in body:
                break
            params["next_token"] = body["next_token"]
        assert sorted(seen) == sorted(names)

    def test_list_bad_limit(self, client: TestClient) -> None:
        response = client.get("/users", params={"limit": 0})
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid request parameters"}


@pytest.mark.unit
class TestUpdateRoutes:
    def test_update(self, client: TestClient, created: str) -> None:
        response = client.put(f"/users/{created}", json={"userRole": "TenantUser"})
        assert response.status_code == 200
        assert response.json() == {"message": "User updated"}
        assert client.get(f"/users/{created}").json()["data"]["userRole"] == "TenantUser"

    def test_update_without_fields(self, client: TestClient, created: str) -> None:
        response = client.put(f"/users/{created}", json={})
        assert response.status_code == 400
        assert response.json() == {"message": "Nothing to update: provide email or userRole"}

    def test_update_missing_user(self, client: TestClient) -> None:
        response = client.put("/users/ghost", json={"email": "ghost@acme.io"})
        assert response.status_code == 404

    def test_disable_and_enable(self, client: TestClient, created: str) -> None:
        response = client.delete(f"/users/{created}/disable")
        assert response.json() == {"message": "User disabled"}
        assert client.get(f"/users/{created}").json()["data"]["enabled"] is False

        response = client.put(f"/users/{created}/enable")
        assert response.json() == {"message": "User enabled"}
        assert client.get(f"/users/{created}").json()["data"]["enabled"] is True

    def test_disable_missing_user(self, client: TestClient) -> None:
        response = client.delete("/users/ghost/disable")
        assert response.status_code == 404
        assert response.json() == {"message": "User ghost not found"}


@pytest.mark.unit
class TestDeleteRoute:
    def test_delete(self, client: TestClient, created: str) -> None:
        response = client.delete(f"/users/{created}")
        assert response.status_code == 200
        assert response.json() == {"message": "User deleted"}
        assert client.get(f"/users/{created}").status_code == 404

    def test_delete_missing_user(self, client: TestClient) -> None:
        response = client.delete("/users/ghost")
        assert response.status_code == 200
        assert response.json() == {"message": "User deleted"}
