"""
Turns whatever the GitHub adapter raised into the gateway's own errors.

Order matters, first match wins:
  not found  -> NotFound (404)
  rate limit -> RateLimited (429)
  any other structured GitHub error -> UpstreamError, status/message passed through
  anything else -> Internal (500), details stay in the log
"""
from __future__ import annotations

import time
from typing import Dict

from loguru import logger

from app.core.errors import GatewayError, Internal, NotFound, RateLimited, UpstreamError
from app.services.github.client import GitHubAPIError
from app.services.github.tree import TreeDepthExceeded

RATE_LIMIT_MARKERS = ("rate limit", "abuse detection")


def _is_not_found(err: GitHubAPIError) -> bool:
    return "not found" in err.message.lower()


def _is_rate_limited(err: GitHubAPIError) -> bool:
    msg = err.message.lower()
    if any(marker in msg for marker in RATE_LIMIT_MARKERS):
        return True
    if err.status_code == 429:
        return True
    return err.status_code == 403 and err.rate_limit.remaining == 0


def _retry_after(err: GitHubAPIError) -> Dict[str, str]:
    reset = err.rate_limit.reset_epoch
    if reset is None:
        return {}
    return {"Retry-After": str(max(0, reset - int(time.time())))}


def translate_upstream_error(exc: Exception) -> GatewayError:
    if isinstance(exc, GatewayError):
        return exc

    if isinstance(exc, GitHubAPIError):
        if _is_not_found(exc):
            logger.info("GitHub not found: status={} message={}", exc.status_code, exc.message)
            return NotFound()
        if _is_rate_limited(exc):
            logger.warning(
                "GitHub rate limit: status={} remaining={} reset={}",
                exc.status_code,
                exc.rate_limit.remaining,
                exc.rate_limit.reset_epoch,
            )
            return RateLimited(headers=_retry_after(exc))

        logger.warning(
            "GitHub API error: status={} message={} docs={}",
            exc.status_code,
            exc.message,
            exc.documentation_url,
        )
        if exc.status_code is not None and 400 <= exc.status_code <= 599:
            return UpstreamError(exc.message, status_code=exc.status_code)
        return UpstreamError()

    if isinstance(exc, TreeDepthExceeded):
        logger.warning("Tree walk aborted: {}", exc)
        return UpstreamError(f"Repository tree exceeds maximum depth of {exc.max_depth}")

    logger.opt(exception=exc).error("Unexpected failure talking to GitHub")
    return Internal()
