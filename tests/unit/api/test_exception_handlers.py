"""Unit tests for exception handlers."""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from api.exception_handlers import setup_exception_handlers
from core.config import settings
from core.exceptions import (
    GroupNotFoundError,
    MustBeLoggedInError,
    NotAdminError,
    PasswordRequiredError,
)


def _create_test_app(exc: Exception) -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/raise")
    async def _() -> None:
        raise exc

    return app


async def _get(app: FastAPI) -> tuple[int, dict]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        response = await c.get("/raise")
    return response.status_code, response.json()


class TestAppExceptions:
    @pytest.mark.asyncio
    async def test_tagged_body_with_details(self) -> None:
        status, body = await _get(_create_test_app(GroupNotFoundError("iceland-2025")))

        assert status == 404
        assert body["error_code"] == "GROUP_NOT_FOUND"
        assert "iceland-2025" in body["message"]
        assert body["details"] == {"group": "iceland-2025"}

    @pytest.mark.asyncio
    async def test_password_gate_error(self) -> None:
        status, body = await _get(_create_test_app(PasswordRequiredError()))

        assert status == 401
        assert body == {
            "error_code": "PASSWORD_REQUIRED",
            "message": "Password required",
            "details": None,
        }

    @pytest.mark.asyncio
    async def test_not_admin_is_visible_by_default(self) -> None:
        status, body = await _get(_create_test_app(NotAdminError("g-1")))

        assert status == 403
        assert body["error_code"] == "NOT_ADMIN"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("exc", [NotAdminError("g-1"), MustBeLoggedInError()])
    async def test_masked_authorization_errors_look_like_not_found(
        self, monkeypatch: pytest.MonkeyPatch, exc: Exception
    ) -> None:
        monkeypatch.setattr(settings, "mask_authorization_errors", True)

        status, body = await _get(_create_test_app(exc))

        assert status == 404
        assert body["error_code"] == "NOT_FOUND"
        assert body["details"] is None

    @pytest.mark.asyncio
    async def test_masking_leaves_other_errors_alone(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings, "mask_authorization_errors", True)

        status, body = await _get(_create_test_app(PasswordRequiredError()))

        assert status == 401
        assert body["error_code"] == "PASSWORD_REQUIRED"


class TestFrameworkErrors:
    @pytest.mark.asyncio
    async def test_unknown_route_is_not_found(self) -> None:
        app = _create_test_app(RuntimeError())
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.get("/nope")

        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_validation_error_returns_field_details(self) -> None:
        from pydantic import BaseModel, Field

        app = FastAPI()
        setup_exception_handlers(app)

        class Body(BaseModel):
            display_name: str = Field(..., min_length=2)

        @app.post("/validate")
        async def _(body: Body) -> dict[str, bool]:
            return {"ok": True}

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.post("/validate", json={"display_name": ""})

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["details"][0]["field"] == "body.display_name"

    @pytest.mark.asyncio
    async def test_database_error_returns_503(self) -> None:
        app = _create_test_app(OperationalError("SELECT 1", {}, Exception("down")))
        handler = app.exception_handlers[SQLAlchemyError]
        mock_request = MagicMock()
        mock_request.state.request_id = "req-db"

        response = await handler(mock_request, OperationalError("SELECT 1", {}, Exception("down")))  # type: ignore[misc]

        assert response.status_code == 503
        body = json.loads(response.body)
        assert body["error_code"] == "DATABASE_ERROR"
        assert body["details"]["request_id"] == "req-db"

    @pytest.mark.asyncio
    async def test_unhandled_exception_returns_500(self) -> None:
        app = _create_test_app(RuntimeError())
        handler = app.exception_handlers[Exception]
        mock_request = MagicMock()
        mock_request.state.request_id = "test-req-id"

        response = await handler(mock_request, RuntimeError("Something went wrong"))  # type: ignore[misc]

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error_code"] == "INTERNAL_ERROR"
        assert body["details"]["request_id"] == "test-req-id"
