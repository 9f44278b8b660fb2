from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class CursorPosition(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int = Field(ge=0)
    character: int = Field(ge=0)


class Range(BaseModel):
    start: CursorPosition
    end: CursorPosition


class CompletionRequest(BaseModel):
    """Sent by the `completeWithLLM` command with the current selection."""
    model_config = ConfigDict(protected_namespaces=())

    selected_text: str
    position: CursorPosition              # end of the selection
    model_name: Optional[str] = None      # editor config, overrides env
    ollama_url: Optional[str] = None


class CompletionResponse(BaseModel):
    completion: str
    position: CursorPosition
    message: str = "Completion ready! Press Tab to accept."
    trigger_inline_suggest: bool = True


class InlineCompletionRequest(BaseModel):
    position: CursorPosition


class InlineCompletionItem(BaseModel):
    insert_text: str
    range: Range


class InlineCompletionResponse(BaseModel):
    items: list[InlineCompletionItem] = []
