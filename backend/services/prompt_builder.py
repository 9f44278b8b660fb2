import re
from typing import Union

from langchain_core.prompts import PromptTemplate

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")
_FENCE = "```"
_INDENT = "\n    "

# ── Chat templates (ChatML) ───────────────────────────────────────────────────
REFORM_PROMPT = PromptTemplate.from_template(
    """<|im_start|>system
Give me a well formatted task description that matches the user's code snippet.<|im_end|>
<|im_start|>user
{prompt}<|im_end|>
<|im_start|>assistant"""
)

CODING_PROMPT = PromptTemplate.from_template(
    """<|im_start|>system
You are a helpful assistant.<|im_end|>
<|im_start|>user
{improved_prompt}<|im_end|>
<|im_start|>assistant
```python
{original_prompt}
"""
)


def fill(template: Union[PromptTemplate, str], **bindings: str) -> str:
    """
    Substitute the first occurrence of each bound placeholder with its raw value.

    Unbound placeholders are left as they are. Values are inserted verbatim and
    never re-scanned, so a value containing `{name}` is not substituted again.
    For a PromptTemplate only its declared input variables are substituted.
    """
    if isinstance(template, PromptTemplate):
        text = template.template
        names = set(template.input_variables) & set(bindings)
    else:
        text = template
        names = set(bindings)
    seen: set[str] = set()

    def substitute(match: re.Match) -> str:
        name = match.group(1)
        if name not in names or name in seen:
            return match.group(0)
        seen.add(name)
        return bindings[name]

    return _PLACEHOLDER_RE.sub(substitute, text)


def clean_completion(raw: str) -> str:
    """Drop a closing code fence and indent the result as a code body."""
    if raw.endswith(_FENCE):
        raw = raw[: -len(_FENCE)].rstrip()
    return _INDENT + raw
