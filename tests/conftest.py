import itertools
from urllib.parse import parse_qs

import httpx
import pytest

from stravapush import StravaClient

CLIENT_ID = "5"
CLIENT_SECRET = "7b2946535949ae70f015d696d8ac602830ece412"
BASE_PATH = "/api/v3/push_subscriptions"


class FakeStrava:
    """In-memory stand-in for the Strava push subscription API."""

    def __init__(self, client_id: str = CLIENT_ID, client_secret: str = CLIENT_SECRET):
        self.client_id = client_id
        self.client_secret = client_secret
        self.subscriptions = {}
        self.requests = []
        self._ids = itertools.count(100)
        self._failures = {}

    # ── Test controls ────────────────────────────────────────────

    def fail_next(self, method: str, status: int, message: str = "Bad Request", errors=None):
        """Answer the next ``method`` request with an error response."""
        self._failures.setdefault(method.upper(), []).append(
            httpx.Response(status, json={"message": message, "errors": errors or []})
        )

    def add(self, callback_url: str, subscription_id: int = None) -> int:
        sid = subscription_id if subscription_id is not None else next(self._ids)
        self.subscriptions[sid] = {
            "id": sid,
            "resource_state": 2,
            "application_id": int(self.client_id),
            "callback_url": callback_url,
            "created_at": "2026-10-18T09:00:00Z",
            "updated_at": "2026-10-18T09:00:00Z",
        }
        return sid

    def calls(self, method: str):
        return [r for r in self.requests if r.method == method.upper()]

    # ── Transport ────────────────────────────────────────────────

    def _authorized(self, creds: dict) -> bool:
        return creds.get("client_id") == self.client_id and creds.get("client_secret") == self.client_secret

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        pending = self._failures.get(request.method)
        if pending:
            return pending.pop(0)

        path = request.url.path
        if request.method == "POST" and path == BASE_PATH:
            form = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
            if not self._authorized(form):
                return httpx.Response(401, json={"message": "Authorization Error", "errors": []})
            sid = self.add(form["callback_url"])
            return httpx.Response(201, json={"id": sid})

        creds = dict(request.url.params)
        if not self._authorized(creds):
            return httpx.Response(401, json={"message": "Authorization Error", "errors": []})

        if request.method == "GET" and path == BASE_PATH:
            return httpx.Response(200, json=list(self.subscriptions.values()))

        if request.method == "DELETE" and path.startswith(BASE_PATH + "/"):
            sid = int(path.rsplit("/", 1)[1])
            if self.subscriptions.pop(sid, None) is None:
                return httpx.Response(404, json={
                    "message": "Resource Not Found",
                    "errors": [{"resource": "PushSubscription", "field": "id", "code": "not found"}],
                })
            return httpx.Response(204)

        return httpx.Response(404, json={"message": "Record Not Found", "errors": []})


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("STRAVA_CLIENT_ID", "STRAVA_CLIENT_SECRET", "STRAVA_API_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_strava():
    return FakeStrava()


@pytest.fixture
def client(fake_strava):
    with StravaClient(CLIENT_ID, CLIENT_SECRET, transport=httpx.MockTransport(fake_strava.handler)) as c:
        yield c
