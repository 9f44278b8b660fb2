from __future__ import annotations

import codecs
import json
import logging
from typing import AsyncIterator, Optional

import httpx

from services.errors import MalformedRecord, RequestFailed, StreamUnavailable

logger = logging.getLogger(__name__)


def parse_record(line: str) -> str:
    """Return the text fragment carried by one NDJSON line ("" if none)."""
    try:
        data = json.loads(line)
    except json.JSONDecodeError as exc:
        raise MalformedRecord(line) from exc

    if not isinstance(data, dict):
        logger.debug("ignoring non-object stream record: %r", line)
        return ""
    fragment = data.get("response")
    return fragment if isinstance(fragment, str) else ""


async def accumulate_stream(chunks: AsyncIterator[bytes]) -> str:
    """
    Consume a chunked NDJSON body and return the concatenated `response`
    fragments, stripped.

    A partial trailing line is carried into the next chunk, so a record
    split across a chunk boundary is still parsed.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    buffer = ""
    full_response = ""

    def consume(lines: list[str]) -> str:
        text = ""
        for line in lines:
            if not line.strip():
                continue
            try:
                text += parse_record(line)
            except MalformedRecord as exc:
                # Skip invalid JSON lines
                logger.warning("%s", exc)
        return text

    async for chunk in chunks:
        buffer += decoder.decode(chunk)
        *lines, buffer = buffer.split("\n")
        full_response += consume(lines)

    buffer += decoder.decode(b"", final=True)
    full_response += consume([buffer])

    return full_response.strip()


async def call_ollama(
    url: str,
    model: str,
    prompt: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """POST a streaming generate request and return the accumulated text."""
    payload = {"model": model, "prompt": prompt, "stream": True}
    headers = {"Content-Type": "application/json"}

    if client is None:
        async with httpx.AsyncClient(timeout=None) as own_client:
            return await _stream_generate(own_client, url, payload, headers)
    return await _stream_generate(client, url, payload, headers)


async def _stream_generate(
    client: httpx.AsyncClient, url: str, payload: dict, headers: dict
) -> str:
    logger.debug("POST %s model=%s", url, payload["model"])
    async with client.stream("POST", url, json=payload, headers=headers) as response:
        if not response.is_success:
            raise RequestFailed(response.status_code)
        try:
            return await accumulate_stream(response.aiter_bytes())
        except httpx.StreamError as exc:
            raise StreamUnavailable() from exc
