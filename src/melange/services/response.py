"""Response and RouteError — the contract between router and UI layer.

INVARIANT: Every Response carries ``Access-Control-Allow-Origin: *``,
including zero-length and error responses.  Some webview runtimes drop a
response whose header set is empty, so the header is always present.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

CORS_HEADER = "Access-Control-Allow-Origin"
COMMAND_MIME_TYPE = "text/strings"
COMMAND_NOT_FOUND_BODY = b"Command not found in config!"


class ErrorCode(StrEnum):
    """Per-request failure classes."""

    UNSUPPORTED_SCHEME = "UNSUPPORTED_SCHEME"
    PATH_FORBIDDEN = "PATH_FORBIDDEN"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    IO_ERROR = "IO_ERROR"
    COMMAND_NOT_FOUND = "COMMAND_NOT_FOUND"
    COMMAND_FAILED = "COMMAND_FAILED"
    PROCESS_SPAWN_ERROR = "PROCESS_SPAWN_ERROR"
    COMMAND_TIMEOUT = "COMMAND_TIMEOUT"


class RouteError(BaseModel):
    """Structured error payload within a Response."""

    model_config = {"frozen": True}

    code: ErrorCode
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


def _default_headers() -> dict[str, str]:
    return {CORS_HEADER: "*"}


class Response(BaseModel):
    """Result of routing one request.

    Attributes:
        status: HTTP-style status code.
        mime_type: Content type of *body*; ``""`` when unknown.
        headers: Always contains the CORS header.
        body: Raw bytes handed to the UI.
        error: Set for every non-2xx response.
        meta: Optional metadata (timing when telemetry is enabled).
    """

    model_config = {"frozen": True, "ser_json_bytes": "base64"}

    status: int
    mime_type: str = ""
    headers: dict[str, str] = Field(default_factory=_default_headers)
    body: bytes = b""
    error: RouteError | None = None
    meta: dict[str, Any] | None = None

    def model_post_init(self, __context: Any) -> None:
        self.headers.setdefault(CORS_HEADER, "*")

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @classmethod
    def success(cls, body: bytes, mime_type: str) -> Response:
        return cls(status=200, mime_type=mime_type, body=body)

    @classmethod
    def failure(
        cls,
        status: int,
        code: ErrorCode,
        message: str,
        *,
        body: bytes | None = None,
        mime_type: str = "text/plain",
        **detail: Any,
    ) -> Response:
        """Build an error response. The body defaults to *message*."""
        return cls(
            status=status,
            mime_type=mime_type,
            body=message.encode("utf-8") if body is None else body,
            error=RouteError(code=code, message=message, detail=detail),
        )
