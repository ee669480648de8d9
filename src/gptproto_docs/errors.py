from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    INDEX_UNAVAILABLE = "INDEX_UNAVAILABLE"
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"


class DocsError(Exception):
    """Raised for all expected failure conditions visible to the agent.

    Caught by server.py and serialised into the MCP error response.
    Fetch and parse failures of individual index sources never surface as
    DocsError; they are recovered inside the IndexStore.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestion": self.suggestion,
                "recoverable": self.recoverable,
            }
        }
