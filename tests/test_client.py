"""
stravapush client tests
=======================

Mocked tests for StravaClient, the push subscription resource and the
Strava error mapping. Does NOT require network access.
"""

import logging
from urllib.parse import parse_qs

import httpx
import pytest

import stravapush
from stravapush import StravaClient
from stravapush.client import TIMING_EXTENSION
from stravapush.exceptions import (
    AuthenticationError,
    BadRequestError,
    NotFoundError,
    RateLimitError,
    ServerError,
    StravaAPIError,
    StravaPushError,
    raise_for_status,
)
from stravapush.types import SubscriptionRecord

from conftest import CLIENT_ID, CLIENT_SECRET


# ──────────────────────────────────────────────
# 1. Client Initialization
# ──────────────────────────────────────────────


class TestClientInit:
    def test_default_base_url(self):
        client = StravaClient("5", "secret")
        assert client.base_url == "https://www.strava.com/api/v3"

    def test_base_url_from_env(self, monkeypatch):
        monkeypatch.setenv("STRAVA_API_URL", "http://strava.local/api/v3/")
        client = StravaClient("5", "secret")
        assert client.base_url == "http://strava.local/api/v3"

    def test_missing_credentials_rejected(self):
        with pytest.raises(StravaPushError):
            StravaClient("5", "")

    def test_repr_hides_secret(self):
        client = StravaClient("5", "super-secret")
        assert "StravaClient" in repr(client)
        assert "super-secret" not in repr(client)

    def test_context_manager(self):
        with StravaClient("5", "secret") as client:
            assert client.client_id == "5"

    def test_version_exposed(self):
        assert isinstance(stravapush.__version__, str)

    def test_user_agent_header(self):
        def handler(request):
            assert request.headers["User-Agent"] == f"stravapush/{stravapush.__version__}"
            return httpx.Response(200, json=[])

        client = StravaClient("5", "secret", transport=httpx.MockTransport(handler))
        assert client.push_subscriptions.list() == []


# ──────────────────────────────────────────────
# 2. Push Subscriptions Resource
# ──────────────────────────────────────────────


class TestPushSubscriptionsResource:
    def test_create_sends_form_credentials(self, client, fake_strava):
        record = client.push_subscriptions.create("https://example.com/hook", "t0k3n")

        assert isinstance(record, SubscriptionRecord)
        assert record.id == 100
        request = fake_strava.calls("POST")[0]
        form = parse_qs(request.content.decode())
        assert form["client_id"] == [CLIENT_ID]
        assert form["client_secret"] == [CLIENT_SECRET]
        assert form["callback_url"] == ["https://example.com/hook"]
        assert form["verify_token"] == ["t0k3n"]

    def test_list_returns_records(self, client, fake_strava):
        fake_strava.add("https://a.example.com/hook")
        fake_strava.add("https://b.example.com/hook")

        records = client.push_subscriptions.list()

        assert [r.callback_url for r in records] == [
            "https://a.example.com/hook",
            "https://b.example.com/hook",
        ]
        assert all(r.resource_state == 2 for r in records)
        assert fake_strava.calls("GET")[0].url.params["client_id"] == CLIENT_ID

    def test_get_filters_listing(self, client, fake_strava):
        fake_strava.add("https://a.example.com/hook")
        sid = fake_strava.add("https://b.example.com/hook")

        record = client.push_subscriptions.get(sid)
        assert record.id == sid
        assert record.callback_url == "https://b.example.com/hook"

    def test_get_missing_raises_not_found(self, client):
        with pytest.raises(NotFoundError) as exc:
            client.push_subscriptions.get(999)
        assert exc.value.status_code == 404

    def test_delete(self, client, fake_strava):
        sid = fake_strava.add("https://example.com/hook")
        assert client.push_subscriptions.delete(sid) is None
        assert sid not in fake_strava.subscriptions
        assert fake_strava.calls("DELETE")[0].url.path == f"/api/v3/push_subscriptions/{sid}"

    def test_delete_missing_raises_not_found(self, client):
        with pytest.raises(NotFoundError):
            client.push_subscriptions.delete(12345)

    def test_wrong_secret_raises_authentication_error(self, fake_strava):
        client = StravaClient(CLIENT_ID, "wrong", transport=httpx.MockTransport(fake_strava.handler))
        with pytest.raises(AuthenticationError) as exc:
            client.push_subscriptions.list()
        assert exc.value.status_code == 401

    def test_send_time_kept_on_request(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[])

        client = StravaClient("5", "secret", transport=httpx.MockTransport(handler))
        client.push_subscriptions.list()
        assert isinstance(seen[0].extensions[TIMING_EXTENSION], float)
        assert not hasattr(client, "_timings")

    def test_failed_send_leaves_no_timing_state(self, caplog):
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) == 1:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json=[])

        client = StravaClient("5", "secret", transport=httpx.MockTransport(handler))
        with pytest.raises(httpx.ConnectError):
            client.push_subscriptions.list()

        with caplog.at_level(logging.DEBUG, logger="stravapush"):
            assert client.push_subscriptions.list() == []
        # The second response is timed from its own request, not a stale one.
        assert attempts[1].extensions[TIMING_EXTENSION] >= attempts[0].extensions[TIMING_EXTENSION]
        assert "← 200" in caplog.text

    def test_request_logging_masks_secret(self, client, caplog):
        with caplog.at_level(logging.DEBUG, logger="stravapush"):
            client.push_subscriptions.list()
        assert "push_subscriptions" in caplog.text
        assert CLIENT_SECRET not in caplog.text
        assert "client_secret=***" in caplog.text


# ──────────────────────────────────────────────
# 3. Error Handling
# ──────────────────────────────────────────────


class TestErrorHandling:
    def test_400_includes_strava_error_details(self, client, fake_strava):
        fake_strava.fail_next("POST", 400, errors=[{
            "resource": "PushSubscription",
            "field": "callback url",
            "code": "GET to callback URL does not return 200",
        }])
        with pytest.raises(BadRequestError) as exc:
            client.push_subscriptions.create("https://example.com/hook", "t0k3n")
        assert exc.value.status_code == 400
        assert "GET to callback URL does not return 200" in str(exc.value)
        assert exc.value.errors[0]["field"] == "callback url"

    def test_429_carries_retry_after(self):
        response = httpx.Response(429, headers={"retry-after": "15"}, json={"message": "Rate Limit Exceeded"})
        with pytest.raises(RateLimitError) as exc:
            raise_for_status(response)
        assert exc.value.retry_after == 15.0

    def test_500_raises_server_error(self):
        with pytest.raises(ServerError) as exc:
            raise_for_status(httpx.Response(503, text="upstream unavailable"))
        assert "503" in str(exc.value)
        assert "upstream unavailable" in str(exc.value)

    def test_other_4xx_raises_base_api_error(self):
        with pytest.raises(StravaAPIError) as exc:
            raise_for_status(httpx.Response(409, json={"message": "Conflict"}))
        assert type(exc.value) is StravaAPIError
        assert exc.value.status_code == 409

    def test_success_does_not_raise(self):
        raise_for_status(httpx.Response(204))
