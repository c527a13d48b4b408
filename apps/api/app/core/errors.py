"""
Gateway error vocabulary.

Everything that goes wrong while serving a request ends up as one of these,
and main.py renders them as {"error": <message>} with status_code.
"""
from __future__ import annotations

from typing import Dict, Optional


class GatewayError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.headers = headers or {}
        super().__init__(self.message)


class NotFound(GatewayError):
    status_code = 404
    default_message = "Repository not found"


class RateLimited(GatewayError):
    status_code = 429
    default_message = "Rate limited by GitHub"


class UpstreamError(GatewayError):
    status_code = 502
    default_message = "GitHub API error"


class Internal(GatewayError):
    status_code = 500
    default_message = "Internal server error"
