"""Shared pytest fixtures."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import create_app, get_http_client
from services.config import Settings, get_settings

OLLAMA_URL = "http://ollama.test/api/generate"


@pytest.fixture
def settings() -> Settings:
    return Settings(model_name="test-model", ollama_url=OLLAMA_URL)


@pytest.fixture
def chunked() -> Callable[..., AsyncIterator[bytes]]:
    async def iterate(*chunks: bytes) -> AsyncIterator[bytes]:
        for chunk in chunks:
            yield chunk

    return iterate


@pytest.fixture
def app(settings: Settings):
    application = create_app()
    application.dependency_overrides[get_settings] = lambda: settings
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def use_transport(app):
    """Route the backend's model-server traffic through a MockTransport."""
    clients: list[httpx.AsyncClient] = []

    def install(transport: httpx.MockTransport) -> None:
        http_client = httpx.AsyncClient(transport=transport)
        clients.append(http_client)
        app.dependency_overrides[get_http_client] = lambda: http_client

    yield install

    for http_client in clients:
        asyncio.run(http_client.aclose())
