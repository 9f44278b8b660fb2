from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

import httpx
from langchain_core.runnables import Runnable, RunnableLambda

from services.config import Settings
from services.errors import LLMRequestFailed
from services.ollama_client import call_ollama
from services.prompt_builder import CODING_PROMPT, REFORM_PROMPT, clean_completion, fill

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    IDLE = "idle"
    REFORMING = "reforming"
    GENERATING = "generating"
    POST_PROCESSING = "post_processing"
    DONE = "done"
    FAILED = "failed"


StageCallback = Callable[[Stage], None]


def _log_stage(stage: Stage) -> None:
    logger.debug("pipeline stage -> %s", stage.value)


# ── Build the LCEL graph  ──────────────────────────────────────────────────────
def build_chain(
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
    on_stage: StageCallback = _log_stage,
) -> Runnable:
    """{prompt} → reform → generate → clean → completion text"""

    async def reform(vars: dict) -> dict:
        on_stage(Stage.REFORMING)
        prompt = fill(REFORM_PROMPT, prompt=vars["prompt"])
        improved = await call_ollama(
            settings.ollama_url, settings.model_name, prompt, client=client
        )
        logger.info("reformulated prompt: %s", improved)
        return {"improved_prompt": improved, "original_prompt": vars["prompt"]}

    async def generate_code(vars: dict) -> str:
        on_stage(Stage.GENERATING)
        prompt = fill(
            CODING_PROMPT,
            improved_prompt=vars["improved_prompt"],
            original_prompt=vars["original_prompt"],
        )
        return await call_ollama(
            settings.ollama_url, settings.model_name, prompt, client=client
        )

    def post_process(raw: str) -> str:
        on_stage(Stage.POST_PROCESSING)
        return clean_completion(raw)

    return RunnableLambda(reform) | RunnableLambda(generate_code) | RunnableLambda(post_process)


# ── Core helper ---------------------------------------------------------------
async def generate(
    selected_text: str,
    *,
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
    on_stage: Optional[StageCallback] = None,
) -> str:
    """Reformulate the selection, generate code for it, return the cleaned text."""
    report = on_stage or _log_stage
    chain = build_chain(settings, client, report)

    report(Stage.IDLE)
    try:
        completion = await chain.ainvoke({"prompt": selected_text})
    except Exception as exc:
        report(Stage.FAILED)
        logger.error("completion pipeline failed: %s", exc)
        raise LLMRequestFailed(exc) from exc

    report(Stage.DONE)
    return completion
