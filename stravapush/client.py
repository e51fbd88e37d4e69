from __future__ import annotations
import os
import time
from functools import cached_property
from typing import Optional, TYPE_CHECKING

import httpx

from ._logging import log_request, log_response

if TYPE_CHECKING:
    from .resources.push_subscriptions import PushSubscriptionsResource

DEFAULT_BASE_URL = "https://www.strava.com/api/v3"

# Request extension holding the perf_counter() value taken when the request was sent.
TIMING_EXTENSION = "stravapush_start"


class StravaClient:
    """
    Strava API client for push subscription management.

        client = StravaClient(client_id="5", client_secret="...")
        client.push_subscriptions.list()

    Every push subscription call authenticates with the application's
    client id and secret rather than an athlete token.
    """

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        max_retries: int = 2,
        **kwargs,
    ):
        """
        Args:
            client_id: Strava API application ID.
            client_secret: Strava API application secret.
            base_url: API root (default: https://www.strava.com/api/v3 or STRAVA_API_URL env var)
            timeout: Request timeout in seconds (default: 30)
            max_retries: Number of connection retries (default: 2). These transport-level
                retries re-attempt only failed connects and apply to every method,
                DELETE included; lifecycle operations themselves never retry.
            **kwargs: Additional arguments passed to httpx.Client
        """
        if not client_id or not client_secret:
            from .exceptions import StravaPushError
            raise StravaPushError("Both client_id and client_secret are required.")

        base_url = base_url or os.environ.get("STRAVA_API_URL", DEFAULT_BASE_URL)

        self.client_id = str(client_id)
        self._client_secret = str(client_secret)
        self.base_url = base_url.rstrip("/")

        # Only set retry transport if user hasn't provided their own transport
        if "transport" not in kwargs and max_retries > 0:
            kwargs["transport"] = httpx.HTTPTransport(retries=max_retries)

        def _log_req(request: httpx.Request):
            request.extensions[TIMING_EXTENSION] = time.perf_counter()
            log_request(request.method, str(request.url))

        def _log_res(response: httpx.Response):
            start = response.request.extensions.get(TIMING_EXTENSION, time.perf_counter())
            elapsed = (time.perf_counter() - start) * 1000
            log_response(response.status_code, str(response.url), elapsed)

        from . import __version__
        self._http = httpx.Client(
            base_url=self.base_url,
            headers={"User-Agent": f"stravapush/{__version__}"},
            timeout=timeout,
            event_hooks={"request": [_log_req], "response": [_log_res]},
            **kwargs,
        )

    def __repr__(self) -> str:
        return f"StravaClient(base_url={self.base_url!r}, client_id={self.client_id!r})"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self):
        """Close the underlying HTTP connection pool."""
        self._http.close()

    @property
    def credentials(self) -> dict:
        """Client id and secret as sent with every push subscription call."""
        return {"client_id": self.client_id, "client_secret": self._client_secret}

    # ── Resource Properties (cached) ───────────────────────────

    @cached_property
    def push_subscriptions(self) -> "PushSubscriptionsResource":
        from .resources.push_subscriptions import PushSubscriptionsResource
        return PushSubscriptionsResource(self)
