"""
Shared fixtures: a FastAPI application used as the live HTTP target.

Requests are routed to the application in-process through
``httpx.ASGITransport``; the base URL is ``http://testserver``.
"""

import asyncio
import json

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse, Response


BASE_URL = "http://testserver"


def create_target_app() -> FastAPI:
    """Create the target application."""
    app = FastAPI(title="Runner test target")

    @app.get("/get")
    async def get(request: Request):
        return {
            "args": dict(request.query_params),
            "headers": dict(request.headers),
        }

    @app.api_route("/anything/{path:path}", methods=["GET", "POST", "PUT", "DELETE", "PATCH"])
    @app.api_route("/anything", methods=["GET", "POST", "PUT", "DELETE", "PATCH"])
    async def anything(request: Request, path: str = ""):
        raw = (await request.body()).decode("utf-8")
        try:
            parsed = json.loads(raw) if raw else None
        except json.JSONDecodeError:
            parsed = None
        return {
            "method": request.method,
            "path": path,
            "args": dict(request.query_params),
            "headers": dict(request.headers),
            "body": raw,
            "json": parsed,
        }

    @app.api_route("/status/{code}", methods=["GET", "POST", "PUT", "DELETE", "PATCH"])
    async def status(code: int):
        return Response(status_code=code)

    @app.get("/delay/{seconds}")
    async def delay(seconds: float):
        await asyncio.sleep(seconds)
        return {"delayed": seconds}

    @app.get("/bytes")
    async def undecodable():
        return Response(content=b"\xff\xfe\xfa\x00", media_type="text/plain")

    @app.get("/text")
    async def text():
        return Response(content="plain body", media_type="text/plain")

    @app.get("/redirect")
    async def redirect():
        return RedirectResponse("/get", status_code=302)

    return app


@pytest.fixture(scope="session")
def target_app() -> FastAPI:
    return create_target_app()


@pytest.fixture
def transport(target_app) -> httpx.ASGITransport:
    """Transport that routes requests to the target application."""
    return httpx.ASGITransport(app=target_app)


@pytest.fixture
def call(transport):
    """Run an async callable that takes a client bound to the target application."""
    def _call(func, **client_options):
        async def runner():
            async with httpx.AsyncClient(transport=transport, **client_options) as client:
                return await func(client)
        return asyncio.run(runner())
    return _call
