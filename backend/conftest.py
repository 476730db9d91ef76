"""Shared fixtures: an app on a throwaway SQLite file and a fake upstream web."""

from typing import Callable, Dict, List, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from datapal.core.config import Settings
from datapal.main import create_app


class Upstream:
    """Answers outbound httpx calls from a (method, url) table and records them."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def on(self, method: str, url: str, status_code: int = 200, json=None, handler=None):
        if handler is None:
            def handler(request, _status=status_code, _json=json):
                return httpx.Response(_status, json=_json if _json is not None else {})
        self.routes[(method.upper(), url)] = handler

    def calls(self, method: str, url: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and self._key_url(r) == url]

    @staticmethod
    def _key_url(request: httpx.Request) -> str:
        return f"{request.url.scheme}://{request.url.host}{request.url.path}"

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, self._key_url(request)))
        if handler is None:
            return httpx.Response(404, json={"error": "no route"})
        return handler(request)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        sqlite_path=str(tmp_path / "datapal-test.db"),
        app_url="https://datapal.test",
        base_url="https://app.datapal.test",
        google_client_id="ga-client-id",
        google_client_secret="ga-client-secret",
        demo_user_email="demo@datapal.cl",
        demo_user_password="demo-pass",
        cloudinary_cloud_name="demo-cloud",
        cloudinary_api_key="cloud-key",
        cloudinary_api_secret="cloud-secret",
    )


@pytest.fixture
def upstream():
    return Upstream()


@pytest.fixture
def app(settings, upstream):
    app = create_app(settings)
    app.state.http_transport = httpx.MockTransport(upstream.handle)
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def auth_headers(user_id="user-1", email="ana@example.com", name="Ana"):
    return {"X-User-ID": user_id, "X-User-Email": email, "X-User-Name": name}


@pytest.fixture
def headers():
    return auth_headers()
