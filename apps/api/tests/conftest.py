"""Shared fixtures: a fake GitHub behind httpx.MockTransport and an app wired to it."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app
from app.services.github.client import GitHubClient

TOKEN = "ghp_testtoken123"


class FakeGitHub:
    """
    Routes GET paths to canned (status, body, headers) responses and
    remembers every path it was asked for, in order.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, path, body, status=200, headers=None):
        self.routes[path] = (status, body, headers or {})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request.url.path)
        if request.url.path not in self.routes:
            return httpx.Response(404, json={"message": "Not Found"})
        status, body, headers = self.routes[request.url.path]
        if isinstance(body, (dict, list)):
            return httpx.Response(status, content=json.dumps(body), headers={"content-type": "application/json", **headers})
        return httpx.Response(status, text=body, headers=headers)

    def client(self):
        return GitHubClient(token=TOKEN, transport=httpx.MockTransport(self.handler))


def make_settings(**overrides):
    return Settings(_env_file=None, GITHUB_TOKEN=TOKEN, **overrides)


def repo_payload(owner, name, **extra):
    payload = {
        "id": 1,
        "name": name,
        "full_name": f"{owner}/{name}",
        "owner": {"login": owner, "id": 7, "type": "User"},
        "description": "A test repository",
        "html_url": f"https://github.com/{owner}/{name}",
        "default_branch": "main",
        "private": False,
        "fork": False,
        "archived": False,
        "language": "Python",
        "topics": ["gateway"],
        "stargazers_count": 12,
        "forks_count": 3,
        "open_issues_count": 1,
        "watchers_count": 12,
        "created_at": "2024-01-02T03:04:05Z",
        "updated_at": "2024-02-02T03:04:05Z",
        "pushed_at": "2024-03-02T03:04:05Z",
    }
    payload.update(extra)
    return payload


def dir_entry(path):
    return {"name": path.rsplit("/", 1)[-1], "path": path, "type": "dir"}


def file_entry(path):
    return {"name": path.rsplit("/", 1)[-1], "path": path, "type": "file", "size": 10}


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def client(fake_github, settings):
    app = create_app(settings, github=fake_github.client())
    with TestClient(app) as c:
        yield c
