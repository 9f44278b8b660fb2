import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

# Load variables from .env into the environment
load_dotenv()

DEFAULT_MODEL_NAME = "Question_reformer_qwen:latest"
DEFAULT_OLLAMA_URL = "http://localhost:11434/api/generate"

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_name: str = DEFAULT_MODEL_NAME
    ollama_url: str = DEFAULT_OLLAMA_URL
    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _known_log_level(cls, value: object) -> str:
        level = str(value or "").upper()
        # unknown names come back as "Level <name>" rather than an int
        if not isinstance(logging.getLevelName(level), int):
            logger.warning("unknown log level %r, using INFO", value)
            return "INFO"
        return level

    def with_overrides(
        self, model_name: Optional[str] = None, ollama_url: Optional[str] = None
    ) -> "Settings":
        """Apply per-request values from the editor; empty values are ignored."""
        update = {}
        if model_name:
            update["model_name"] = model_name
        if ollama_url:
            update["ollama_url"] = ollama_url
        return self.model_copy(update=update) if update else self


def get_settings() -> Settings:
    # empty strings fall back to the defaults, same as the editor config
    return Settings(
        model_name=os.getenv("LLCG_MODEL_NAME") or DEFAULT_MODEL_NAME,
        ollama_url=os.getenv("LLCG_OLLAMA_URL") or DEFAULT_OLLAMA_URL,
        log_level=os.getenv("LLCG_LOG_LEVEL") or "INFO",
    )
