from __future__ import annotations

import logging
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from prompt_registry.domain.entity_kind import EntityKind
from prompt_registry.domain.errors import (
    ActiveVersionConflictError,
    DuplicateEmailError,
    EntityNotFoundError,
    InvalidCredentialsError,
    NoActiveVersionError,
    NoFieldsProvidedError,
    NotFoundReason,
)
from prompt_registry.infrastructure.http.error_envelope import install_error_handlers
from prompt_registry.infrastructure.http.request_logging import RequestLoggingMiddleware


class EchoBody(BaseModel):
    name: str


def _build_app(*, expose_error_stack: bool = False) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)
    install_error_handlers(app, expose_error_stack=expose_error_stack)

    @app.get("/no-fields")
    async def no_fields() -> None:
        raise NoFieldsProvidedError()

    @app.get("/duplicate")
    async def duplicate() -> None:
        raise DuplicateEmailError()

    @app.get("/credentials")
    async def credentials() -> None:
        raise InvalidCredentialsError()

    @app.get("/missing-project")
    async def missing_project() -> None:
        raise EntityNotFoundError(
            kind=EntityKind.PROJECT,
            entity_id=uuid4(),
            reason=NotFoundReason.DELETED,
        )

    @app.get("/no-active")
    async def no_active() -> None:
        raise NoActiveVersionError(prompt_id=uuid4())

    @app.get("/conflict")
    async def conflict() -> None:
        raise ActiveVersionConflictError(prompt_id=uuid4())

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("database exploded")

    @app.post("/echo")
    async def echo(body: EchoBody) -> dict[str, str]:
        return {"name": body.name}

    return app


@pytest.mark.parametrize(
    ("path", "status_code", "message"),
    [
        ("/no-fields", 400, "No valid fields to update"),
        ("/duplicate", 400, "Unable to create account. Please try again."),
        ("/credentials", 401, "Invalid email or password"),
        ("/missing-project", 404, "Project not found"),
        ("/no-active", 404, "No active version found for this prompt"),
    ],
)
def test_domain_errors_map_to_envelope(path: str, status_code: int, message: str) -> None:
    with TestClient(_build_app()) as client:
        response = client.get(path)

    assert response.status_code == status_code
    assert response.json() == {"success": False, "error": {"message": message}}


def test_conflict_maps_to_409() -> None:
    with TestClient(_build_app()) as client:
        response = client.get("/conflict")

    assert response.status_code == 409
    assert response.json()["success"] is False


def test_request_validation_errors_map_to_400() -> None:
    with TestClient(_build_app()) as client:
        response = client.post("/echo", json={"unexpected": True})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "name" in body["error"]["message"]


def test_unknown_route_reports_path() -> None:
    with TestClient(_build_app()) as client:
        response = client.get("/nowhere")

    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "error": {"message": "Route /nowhere not found"},
    }


def test_stack_is_exposed_only_when_enabled() -> None:
    with TestClient(_build_app(expose_error_stack=True)) as client:
        response = client.get("/credentials")

    assert response.status_code == 401
    assert "InvalidCredentialsError" in response.json()["error"]["stack"]


def test_request_logging_records_status_and_request_id(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="prompt_registry.infrastructure.http.request_logging")

    with TestClient(_build_app()) as client:
        response = client.get("/no-active", headers={"authorization": "Bearer secret-token"})

    assert response.headers["x-request-id"]
    records = [r for r in caplog.records if "http_request" in r.getMessage()]
    assert len(records) == 1
    assert records[0].levelno == logging.WARNING
    assert "path=/no-active" in records[0].getMessage()
    assert "status=404" in records[0].getMessage()
    assert "secret-token" not in caplog.text


def test_unhandled_error_response_carries_logged_request_id(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger="prompt_registry.infrastructure.http")

    with TestClient(_build_app(), raise_server_exceptions=False) as client:
        response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": {"message": "Internal Server Error"},
    }
    request_id = response.headers["x-request-id"]
    request_lines = [r for r in caplog.records if "http_request" in r.getMessage()]
    error_lines = [r for r in caplog.records if "unhandled_request_error" in r.getMessage()]
    assert len(request_lines) == 1
    assert f"request_id={request_id}" in request_lines[0].getMessage()
    assert "status=500" in request_lines[0].getMessage()
    assert f"request_id={request_id}" in error_lines[0].getMessage()
    assert "database exploded" not in response.text
