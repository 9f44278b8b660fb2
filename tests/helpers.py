"""Shared test helpers: NDJSON bodies and a fake model server."""

from __future__ import annotations

import json
from typing import Callable

import httpx


def ndjson(*records: dict) -> bytes:
    return b"".join(json.dumps(record).encode() + b"\n" for record in records)


def ollama_server(reply: Callable[[str], httpx.Response], calls: list) -> httpx.MockTransport:
    """Fake model server; `reply` maps the request prompt to a response."""

    def handler(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        calls.append({"url": str(request.url), "payload": payload, "headers": request.headers})
        return reply(payload["prompt"])

    return httpx.MockTransport(handler)


def is_reform(prompt: str) -> bool:
    return "well formatted task description" in prompt
