"""Fixtures for API tests: a fresh app wired to in-memory repositories and a mock relay."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import get_container
from modules.ratelimit.service import RateLimiter
from modules.storage.service import RelayStorageGateway


class MockRelay:
    """Just enough of the bot API for upload and download round trips."""

    def __init__(self, settings):
        self.prefix = f"/bot{settings.relay_bot_token}"
        self.file_prefix = f"/file/bot{settings.relay_bot_token}/"
        self.uploads = 0
        self.content = b"relayed bytes"
        self.requests: list[httpx.Request] = []
        self.fail_downloads = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == f"{self.prefix}/sendDocument":
            self.uploads += 1
            file_id = f"file-{self.uploads}"
            return httpx.Response(200, json={
                "ok": True,
                "result": {
                    "message_id": self.uploads,
                    "document": {
                        "file_id": file_id,
                        "file_unique_id": f"uniq-{file_id}",
                    },
                },
            })

        if path == f"{self.prefix}/getFile":
            if self.fail_downloads:
                return httpx.Response(502, json={"ok": False, "error_code": 502, "description": "Bad Gateway"})
            file_id = json.loads(request.content)["file_id"]
            return httpx.Response(200, json={
                "ok": True,
                "result": {"file_id": file_id, "file_unique_id": f"uniq-{file_id}", "file_path": f"documents/{file_id}"},
            })

        if path.startswith(self.file_prefix):
            return httpx.Response(200, content=self.content)

        if path in (f"{self.prefix}/getMe", f"{self.prefix}/getChat"):
            return httpx.Response(200, json={"ok": True, "result": {"id": 1}})

        return httpx.Response(404, json={"ok": False, "error_code": 404, "description": "Not Found"})


@pytest.fixture
def relay(settings) -> MockRelay:
    return MockRelay(settings)


@pytest.fixture
def limiter(clock) -> RateLimiter:
    return RateLimiter(clock=clock)


@pytest.fixture
def container(accounts, file_repository, relay, limiter, settings):
    container = get_container()
    container.accounts = accounts
    container.file_repository = file_repository
    container.rate_limiter = limiter
    container.storage = RelayStorageGateway.from_settings(
        settings, client=httpx.AsyncClient(transport=httpx.MockTransport(relay))
    )
    return container


@pytest.fixture
def client(container) -> TestClient:
    return TestClient(create_app())


@pytest.fixture
def auth_headers(container, user_account) -> dict[str, str]:
    token = container.auth.sign_token(user_account.id, user_account.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(container, admin_account) -> dict[str, str]:
    token = container.auth.sign_token(admin_account.id, admin_account.email)
    return {"Authorization": f"Bearer {token}"}
