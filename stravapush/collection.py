"""Read-only data source listing every push subscription."""

import logging

import httpx

from .exceptions import RemoteCallError, StravaAPIError
from .schema import INT64, LIST_NESTED, STRING, Attribute, Schema
from .types import COLLECTION_ID, SubscriptionCollection, SubscriptionRecord

logger = logging.getLogger("stravapush.collection")

DATA_SOURCE_TYPE_SUFFIX = "_push_subscriptions"

_PUBLIC_FIELDS = ("id", "resource_state", "application_id", "callback_url", "created_at", "updated_at")


class PushSubscriptionsReader:
    """Fetches the list of push subscriptions, unfiltered and unpaged."""

    def __init__(self, client) -> None:
        self._client = client

    @staticmethod
    def type_name(provider_type_name: str = "strava") -> str:
        return provider_type_name + DATA_SOURCE_TYPE_SUFFIX

    @staticmethod
    def schema() -> Schema:
        return Schema(
            description="Fetches the list of push subscriptions.",
            attributes={
                "id": Attribute(STRING, "Placeholder identifier attribute.", computed=True),
                "push_subscriptions": Attribute(
                    LIST_NESTED,
                    "List of push subscriptions.",
                    computed=True,
                    nested={
                        "id": Attribute(INT64, "Push subscription ID.", computed=True),
                        "resource_state": Attribute(INT64, "State of the subscription.", computed=True),
                        "application_id": Attribute(INT64, "Strava API application ID.", computed=True),
                        "callback_url": Attribute(
                            STRING,
                            "Address where webhook events will be sent; maximum length of 255 characters.",
                            computed=True,
                        ),
                        "created_at": Attribute(STRING, "Date and time the subscription was created.", computed=True),
                        "updated_at": Attribute(STRING, "Date and time the subscription was last updated.", computed=True),
                    },
                ),
            },
        )

    def read(self) -> SubscriptionCollection:
        try:
            records = self._client.push_subscriptions.list()
        except (StravaAPIError, httpx.HTTPError) as err:
            raise RemoteCallError("list", "list", str(err), cause=err) from err

        # Drop any extra fields the API returned beyond the public ones.
        projected = [
            SubscriptionRecord(**record.model_dump(include=set(_PUBLIC_FIELDS)))
            for record in records
        ]
        logger.debug("Listed %d push subscriptions", len(projected))
        return SubscriptionCollection(id=COLLECTION_ID, push_subscriptions=projected)
