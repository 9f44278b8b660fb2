# backend/app/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import Depends, FastAPI, HTTPException, Request

# ── local modules ─────────────────────────────────────────────────────────────
from app.completion_cache import PendingCompletionCache
from app.schemas import (
    CompletionRequest,
    CompletionResponse,
    InlineCompletionItem,
    InlineCompletionRequest,
    InlineCompletionResponse,
    Range,
)
from services.config import Settings, get_settings
from services.errors import LLMRequestFailed
from services.langchain_pipeline import generate

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
#  Dependencies (overridable in tests via app.dependency_overrides)
# ------------------------------------------------------------------------------
def get_cache(request: Request) -> PendingCompletionCache:
    return request.app.state.completions


def get_http_client(request: Request) -> Optional[httpx.AsyncClient]:
    # only present while the lifespan is running
    return getattr(request.app.state, "http_client", None)


def get_generator():
    return generate


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with httpx.AsyncClient(timeout=None) as client:
        app.state.http_client = client
        yield
    del app.state.http_client


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="llcg backend", lifespan=lifespan)
    app.state.completions = PendingCompletionCache()

    # --------------------------------------------------------------------------
    #  /complete  ── "Complete with LLM" command entry point
    # --------------------------------------------------------------------------
    @app.post("/complete", response_model=CompletionResponse)
    async def complete(
        req: CompletionRequest,
        cache: PendingCompletionCache = Depends(get_cache),
        settings: Settings = Depends(get_settings),
        client: Optional[httpx.AsyncClient] = Depends(get_http_client),
        generator=Depends(get_generator),
    ):
        """
        1. Run the reform → generate pipeline on the selection.
        2. Park the result at the selection's end position.
        3. Tell the extension to re-trigger inline suggestions there.
        """
        if not req.selected_text:
            raise HTTPException(
                status_code=400, detail="Please select some text to complete with LLM"
            )

        effective = settings.with_overrides(req.model_name, req.ollama_url)
        logger.info("generating completion with model %s", effective.model_name)

        try:
            completion = await generator(
                req.selected_text, settings=effective, client=client
            )
        except LLMRequestFailed as exc:
            raise HTTPException(
                status_code=502, detail=f"Failed to generate completion: {exc}"
            ) from exc

        cache.store(completion, req.position)
        return CompletionResponse(completion=completion, position=req.position)

    # --------------------------------------------------------------------------
    #  /inline  ── inline completion provider query
    # --------------------------------------------------------------------------
    @app.post("/inline", response_model=InlineCompletionResponse)
    async def inline(
        req: InlineCompletionRequest,
        cache: PendingCompletionCache = Depends(get_cache),
    ):
        text = cache.consume_if_at(req.position)
        if text is None:
            return InlineCompletionResponse()

        item = InlineCompletionItem(
            insert_text=text, range=Range(start=req.position, end=req.position)
        )
        return InlineCompletionResponse(items=[item])

    @app.get("/")
    async def root():
        return {"status": "llcg backend up"}

    return app


app = create_app()
