"""Unit tests for the HTTP audit log."""
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from roomboard.logging_middleware import add_audit_middleware


@pytest.fixture()
def audited(tmp_path, request):
    service = f"audit-{request.node.name}"
    app = FastAPI()
    add_audit_middleware(app, service, tmp_path)

    @app.get("/ping")
    def ping():
        return {"ok": True}

    @app.get("/boom")
    def boom():
        raise RuntimeError("boom")

    return TestClient(app, raise_server_exceptions=False), tmp_path / f"{service}.log"


class TestAuditMiddleware:
    """Test one audit line per request."""

    def test_success_is_logged_as_info(self, audited):
        client, log_file = audited

        client.get("/ping?date=2024-06-03")

        line = log_file.read_text().strip().splitlines()[-1]
        assert "| INFO |" in line
        assert "GET /ping?date=2024-06-03" in line
        assert "status=200" in line

    def test_client_error_is_logged_as_warning(self, audited):
        client, log_file = audited

        client.get("/missing")

        line = log_file.read_text().strip().splitlines()[-1]
        assert "| WARNING |" in line
        assert "status=404" in line

    def test_unhandled_error_is_logged(self, audited):
        client, log_file = audited

        response = client.get("/boom")

        assert response.status_code == 500
        assert "GET /boom | client=testclient | status=500" in log_file.read_text()
