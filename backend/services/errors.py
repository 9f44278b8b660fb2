from __future__ import annotations


class LLMError(Exception):
    """Base class for failures talking to the model server."""


class RequestFailed(LLMError):
    def __init__(self, status: int):
        self.status = status
        super().__init__(f"HTTP error! status: {status}")


class StreamUnavailable(LLMError):
    def __init__(self, message: str = "No response body reader available"):
        super().__init__(message)


class MalformedRecord(LLMError):
    """A stream line that is not valid JSON. Never leaves the reader."""

    def __init__(self, line: str):
        self.line = line
        super().__init__(f"Failed to parse JSON line: {line!r}")


class LLMRequestFailed(LLMError):
    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"LLM API call failed: {cause}")
