"""Resource for managing Strava webhook push subscriptions."""

from typing import List

from ..exceptions import NotFoundError, raise_for_status
from ..types import SubscriptionRecord


class PushSubscriptionsResource:
    """Strava API resource for push subscriptions.

    Usage::

        sub = client.push_subscriptions.create(
            callback_url="https://example.com/hook",
            verify_token="t0k3n",
        )
        client.push_subscriptions.delete(sub.id)

    An application may hold a single subscription at a time on Strava's side;
    that limit is enforced remotely and surfaces as a ``BadRequestError``.
    """

    def __init__(self, client) -> None:
        self._client = client

    # ── CRUD ─────────────────────────────────────────────────────────────────

    def create(self, callback_url: str, verify_token: str) -> SubscriptionRecord:
        """Create a push subscription.

        Strava validates ``callback_url`` synchronously by issuing a GET
        challenge carrying ``verify_token`` before it answers.

        Returns:
            A partial record; Strava only echoes back the new ``id``.
        """
        data = dict(self._client.credentials)
        data["callback_url"] = callback_url
        data["verify_token"] = verify_token
        resp = self._client._http.post("/push_subscriptions", data=data)
        raise_for_status(resp)
        return SubscriptionRecord(**resp.json())

    def list(self) -> List[SubscriptionRecord]:
        """List all push subscriptions of the configured application."""
        resp = self._client._http.get("/push_subscriptions", params=self._client.credentials)
        raise_for_status(resp)
        return [SubscriptionRecord(**item) for item in resp.json()]

    def get(self, subscription_id: int) -> SubscriptionRecord:
        """Get a single push subscription by ID.

        Strava offers no single-item endpoint, so this filters the listing.
        Raises ``NotFoundError`` if no subscription has that ID.
        """
        for record in self.list():
            if record.id == int(subscription_id):
                return record
        raise NotFoundError(
            f"Resource not found: push subscription {subscription_id} does not exist",
            status_code=404,
        )

    def delete(self, subscription_id: int) -> None:
        """Delete a push subscription."""
        resp = self._client._http.delete(
            f"/push_subscriptions/{int(subscription_id)}",
            params=self._client.credentials,
        )
        raise_for_status(resp)
