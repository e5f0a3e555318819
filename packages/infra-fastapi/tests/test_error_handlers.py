"""Unit tests for tessera.infra.fastapi.error_handlers."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi import Body, FastAPI, Query
from fastapi.testclient import TestClient
from pydantic import BaseModel

from tessera.foundation.domain.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    UpstreamServiceError,
    UpstreamTransportError,
    ValidationError,
)
from tessera.infra.fastapi.error_handlers import register_exception_handlers


class NestedPayload(BaseModel):
    items: dict[str, Any]


def _app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/not-found")
    def not_found() -> None:
        raise NotFoundError(
            "TenantRegistration", "reg-1", message="Tenant registration not found for id reg-1"
        )

    @app.get("/validation")
    def validation() -> None:
        raise ValidationError("body", "Missing request body")

    @app.get("/conflict")
    def conflict() -> None:
        raise ConflictError("Registration id already exists")

    @app.get("/upstream")
    def upstream() -> None:
        raise UpstreamServiceError("Failed to create tenant", status_code=502)

    @app.get("/transport")
    def transport() -> None:
        raise UpstreamTransportError("connection refused")

    @app.get("/domain")
    def domain() -> None:
        raise DomainError("Bad things")

    @app.get("/crash")
    def crash() -> None:
        raise RuntimeError("secret=hunter2")

    @app.get("/page")
    def page(limit: int = Query(10, ge=1)) -> dict[str, int]:
        return {"limit": limit}

    @app.post("/echo")
    def echo(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
        return payload

    @app.post("/nested")
    def nested(payload: NestedPayload = Body(...)) -> dict[str, Any]:
        return payload.items

    return app


@pytest.fixture
def client() -> TestClient:
    return TestClient(_app(), raise_server_exceptions=False)


@pytest.mark.unit
class TestErrorMapping:
    @pytest.mark.parametrize(
        ("path", "status", "message"),
        [
            ("/not-found", 404, "Tenant registration not found for id reg-1"),
            ("/validation", 400, "Missing request body"),
            ("/conflict", 409, "Registration id already exists"),
            ("/upstream", 500, "Failed to create tenant"),
            ("/transport", 500, "connection refused"),
            ("/domain", 400, "Bad things"),
        ],
    )
    def test_domain_errors(self, client: TestClient, path: str, status: int, message: str) -> None:
        response = client.get(path)
        assert response.status_code == status
        assert response.json() == {"message": message}

    def test_unhandled_exception_hides_details(self, client: TestClient) -> None:
        response = client.get("/crash")
        assert response.status_code == 500
        assert response.json() == {"message": "Internal Server Error"}


@pytest.mark.unit
class TestRequestValidation:
    def test_missing_body(self, client: TestClient) -> None:
        response = client.post("/echo")
        assert response.status_code == 400
        assert response.json() == {"message": "Missing request body"}

    def test_non_object_body(self, client: TestClient) -> None:
        response = client.post("/echo", json=[1, 2, 3])
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid request body"}

    def test_object_body_passes(self, client: TestClient) -> None:
        response = client.post("/echo", json={"tenantName": "acme"})
        assert response.status_code == 200

    def test_invalid_query_parameter(self, client: TestClient) -> None:
        response = client.get("/page", params={"limit": 0})
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid request parameters"}

    def test_null_body(self, client: TestClient) -> None:
        response = client.post("/echo", content=b"null", headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert response.json() == {"message": "Missing request body"}

    def test_null_field_is_invalid_body_not_missing_body(self, client: TestClient) -> None:
        response = client.post("/nested", json={"items": None})
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid request body"}
