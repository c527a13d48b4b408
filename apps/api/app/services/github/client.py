from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from loguru import logger


@dataclass
class GitHubRateLimit:
    remaining: Optional[int]
    reset_epoch: Optional[int]


class GitHubAPIError(Exception):
    """A structured error response from the GitHub API (status >= 400)."""

    def __init__(
        self,
        status_code: Optional[int],
        message: str,
        documentation_url: Optional[str] = None,
        rate_limit: Optional[GitHubRateLimit] = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.documentation_url = documentation_url
        self.rate_limit = rate_limit or GitHubRateLimit(remaining=None, reset_epoch=None)
        super().__init__(f"GitHub API error status={status_code} message={message}")


class GitHubClient:
    """
    One authenticated connection pool to the GitHub REST API.
    Built once at startup and shared read-only by every request.
    """

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base,
            headers=self._headers(token),
            timeout=timeout,
            transport=transport,
            # renamed/transferred repos answer 301
            follow_redirects=True,
        )

    @staticmethod
    def _headers(token: str) -> Dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "User-Agent": "loro-api/0.1",
            "X-GitHub-Api-Version": "2022-11-28",
            "Authorization": f"Bearer {token}",
        }

    @staticmethod
    def _rate_limit(resp: httpx.Response) -> GitHubRateLimit:
        def _to_int(v: Optional[str]) -> Optional[int]:
            try:
                return int(v) if v is not None else None
            except ValueError:
                return None

        remaining = _to_int(resp.headers.get("x-ratelimit-remaining"))
        reset = _to_int(resp.headers.get("x-ratelimit-reset"))
        return GitHubRateLimit(remaining=remaining, reset_epoch=reset)

    def _error_from(self, resp: httpx.Response) -> GitHubAPIError:
        message = resp.reason_phrase or "GitHub API error"
        documentation_url = None
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message") or message
            documentation_url = body.get("documentation_url")
        return GitHubAPIError(
            status_code=resp.status_code,
            message=message,
            documentation_url=documentation_url,
            rate_limit=self._rate_limit(resp),
        )

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        logger.debug("GitHub request: GET {} params={}", path, params)
        resp = await self._http.get(path, params=params)
        logger.debug("GitHub response: GET {} status={}", path, resp.status_code)

        if resp.status_code >= 400:
            raise self._error_from(resp)

        return resp.json()

    async def get_repo(self, owner: str, repo: str) -> Dict[str, Any]:
        return await self._get(f"/repos/{quote(owner)}/{quote(repo)}")

    async def get_contents(self, owner: str, repo: str, path: str = "") -> List[Dict[str, Any]]:
        """
        List a directory via the contents API, in upstream order.
        A path pointing at a single file comes back as a one-element list.
        """
        endpoint = f"/repos/{quote(owner)}/{quote(repo)}/contents"
        if path:
            endpoint += "/" + quote(path.strip("/"))
        data = await self._get(endpoint)
        if isinstance(data, dict):
            return [data]
        return data

    async def get_git_tree(self, owner: str, repo: str, ref: str = "HEAD") -> Dict[str, Any]:
        return await self._get(
            f"/repos/{quote(owner)}/{quote(repo)}/git/trees/{quote(ref)}",
            params={"recursive": "1"},
        )

    async def aclose(self) -> None:
        await self._http.aclose()
