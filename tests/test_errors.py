"""Tests for the error envelope and app-level endpoints."""

import json

from storefront.core.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    ProcessorError,
    ValidationError,
    app_error_handler,
    unhandled_exception_handler,
)


def _request_stub():
    from fastapi import Request

    return Request({"type": "http", "method": "GET", "path": "/boom", "headers": []})


class TestErrorTypes:
    def test_default_statuses(self):
        assert ValidationError("x").status_code == 422
        assert NotFoundError("x").status_code == 404
        assert AuthError("x").status_code == 401
        assert ConflictError("x").status_code == 409
        assert ProcessorError("x").status_code == 400

    def test_status_override(self):
        error = ProcessorError("Declined", 402, "card_declined")
        assert error.status_code == 402
        assert error.code == "card_declined"
        assert ProcessorError("x").status_code == 400


class TestHandlers:
    async def test_app_error_envelope(self):
        response = await app_error_handler(_request_stub(), NotFoundError("Order not found"))
        assert response.status_code == 404
        assert json.loads(response.body) == {
            "message": "Order not found",
            "errorType": "NotFoundError",
            "status": 404,
        }

    async def test_unhandled_error_hides_details(self, caplog):
        response = await unhandled_exception_handler(_request_stub(), RuntimeError("db password"))
        assert response.status_code == 500
        body = json.loads(response.body)
        assert body == {
            "message": "Internal server error",
            "errorType": "InternalError",
            "status": 500,
        }
        assert "Unhandled error on GET /boom" in caplog.text


class TestApp:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/no-such-route")
        assert response.status_code == 404
        assert response.json() == {"message": "Not Found", "errorType": "HTTPError", "status": 404}

    def test_wrong_method(self, client):
        response = client.put("/health")
        assert response.status_code == 405
        assert response.json()["errorType"] == "HTTPError"

    def test_malformed_json_body(self, client, auth_headers):
        response = client.post(
            "/orders",
            content="{not json",
            headers={**auth_headers, "Content-Type": "application/json"},
        )
        assert response.status_code == 422
        assert response.json()["errorType"] == "ValidationError"

    def test_init_db_is_idempotent(self):
        from sqlalchemy import inspect

        from storefront.core import database as db_module
        from storefront.core.database import init_db

        init_db()
        tables = set(inspect(db_module.engine).get_table_names())
        assert {"users", "orders", "payment_cards", "payments"} <= tables
