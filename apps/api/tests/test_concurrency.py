"""
Two requests for different repositories must be in flight at the same time.

The fake upstream sleeps on every call and records how many calls are open
at once. Serialized handling would show a peak of 1 and take twice the delay.
"""

import asyncio
import time

import httpx

from app.main import create_app
from app.services.github.client import GitHubClient
from conftest import make_settings, repo_payload

DELAY = 0.3


def test_requests_for_different_repos_overlap():
    in_flight = 0
    peak = 0

    async def upstream(request: httpx.Request) -> httpx.Response:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(DELAY)
        in_flight -= 1
        owner, name = request.url.path.split("/")[2:4]
        return httpx.Response(200, json=repo_payload(owner, name))

    async def go():
        gh = GitHubClient(token="ghp_abc", transport=httpx.MockTransport(upstream))
        app = create_app(make_settings(), github=gh)
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://gateway") as c:
            started = time.perf_counter()
            first, second = await asyncio.gather(
                c.get("/repo/alice/one"),
                c.get("/repo/bob/two"),
            )
            elapsed = time.perf_counter() - started
        await gh.aclose()
        return first, second, elapsed

    first, second, elapsed = asyncio.run(go())

    assert first.status_code == 200 and first.json()["owner"] == "alice"
    assert second.status_code == 200 and second.json()["name"] == "two"
    assert peak == 2
    assert elapsed < DELAY * 1.8
