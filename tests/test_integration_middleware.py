"""Integration tests -- middleware stack behaviour through the control plane app."""

from __future__ import annotations

from uuid import UUID

import pytest


@pytest.mark.integration
class TestRequestIdPropagation:
    """RequestIdMiddleware generates / propagates X-Request-ID."""

    def test_generates_request_id(self, client) -> None:
        resp = client.get("/healthz")
        UUID(resp.headers.get("X-Request-ID", ""))

    def test_propagates_provided_request_id(self, client) -> None:
        provided = "12345678-1234-5678-1234-567812345678"
        resp = client.get("/healthz", headers={"X-Request-ID": provided})
        assert resp.headers["X-Request-ID"] == provided

    def test_replaces_unsafe_request_id(self, client) -> None:
        resp = client.get("/healthz", headers={"X-Request-ID": "bad id; drop table"})
        assert resp.headers["X-Request-ID"] != "bad id; drop table"
        UUID(resp.headers["X-Request-ID"])

    def test_error_responses_carry_request_id(self, client) -> None:
        resp = client.get("/tenant-registrations/missing-id")
        assert resp.status_code == 404
        assert "X-Request-ID" in resp.headers
