"""
Lifecycle of a single managed push subscription.

Strava has no in-place update for push subscriptions, so both user-facing
attributes are replace-on-change and ``update`` is delete-then-create.
"""

import logging
import re
from typing import Callable, TypeVar

import httpx

from .exceptions import (
    ImportFormatError,
    ImportIDError,
    RemoteCallError,
    StravaAPIError,
)
from .schema import (
    INT64,
    REQUIRES_REPLACE,
    STRING,
    USE_STATE_FOR_UNKNOWN,
    Attribute,
    Schema,
)
from .types import (
    CALLBACK_URL_MAX_LENGTH,
    ImportedState,
    ReconciledState,
    SubscriptionSpec,
    now_rfc3339,
)

logger = logging.getLogger("stravapush.reconciler")

T = TypeVar("T")

RESOURCE_TYPE_SUFFIX = "_push_subscription"

_REMOTE_ERRORS = (StravaAPIError, httpx.HTTPError)

_IMPORT_ID = re.compile(r"[+-]?[0-9]+")
_INT64_MIN, _INT64_MAX = -(2 ** 63), 2 ** 63 - 1


def _call(operation: str, phase: str, fn: Callable[[], T], remote_absent: bool = False) -> T:
    """Run one remote call, wrapping any failure in ``RemoteCallError``."""
    try:
        return fn()
    except _REMOTE_ERRORS as err:
        raise RemoteCallError(
            operation, phase, str(err), cause=err, remote_absent=remote_absent
        ) from err


class PushSubscriptionReconciler:
    """Drives one remote push subscription through create/read/update/delete.

    Usage::

        reconciler = PushSubscriptionReconciler(client)
        state = reconciler.create(SubscriptionSpec(callback_url=..., verify_token=...))
        state = reconciler.read(state)
        reconciler.delete(state.id)
    """

    def __init__(self, client) -> None:
        self._client = client

    @staticmethod
    def type_name(provider_type_name: str = "strava") -> str:
        return provider_type_name + RESOURCE_TYPE_SUFFIX

    @staticmethod
    def schema() -> Schema:
        return Schema(
            description="Manages a Strava push subscription.",
            attributes={
                "id": Attribute(
                    INT64,
                    "Push subscription ID.",
                    computed=True,
                    plan_modifiers=(USE_STATE_FOR_UNKNOWN,),
                ),
                "last_updated": Attribute(
                    STRING,
                    "Timestamp of the last update to the push subscription.",
                    computed=True,
                ),
                "resource_state": Attribute(INT64, "State of the push subscription.", computed=True),
                "application_id": Attribute(INT64, "Strava API application ID.", computed=True),
                "callback_url": Attribute(
                    STRING,
                    "Address where webhook events will be sent; maximum length of 255 characters.",
                    required=True,
                    max_length=CALLBACK_URL_MAX_LENGTH,
                    plan_modifiers=(REQUIRES_REPLACE,),
                ),
                "verify_token": Attribute(
                    STRING,
                    "String chosen by the application owner for client security. An identical "
                    "string will be included in the validation request made by Strava's "
                    "subscription service.",
                    required=True,
                    sensitive=True,
                    plan_modifiers=(REQUIRES_REPLACE,),
                ),
                "created_at": Attribute(STRING, "Date and time the subscription was created.", computed=True),
                "updated_at": Attribute(STRING, "Date and time the subscription was last updated.", computed=True),
            },
        )

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def create(self, spec: SubscriptionSpec) -> ReconciledState:
        """Create the subscription and return its freshly read state.

        The create response only carries the new id, so the record is read
        back before any state is returned.
        """
        return self._create(spec, "create")

    def _create(self, spec: SubscriptionSpec, operation: str) -> ReconciledState:
        subs = self._client.push_subscriptions
        remote_absent = operation == "update"
        created = _call(
            operation,
            "create",
            lambda: subs.create(spec.callback_url, spec.verify_token),
            remote_absent=remote_absent,
        )
        record = _call(operation, "read", lambda: subs.get(created.id), remote_absent=remote_absent)
        state = ReconciledState.from_record(spec, record, last_updated=now_rfc3339())
        logger.info("Created push subscription %d for %s", state.id, state.callback_url)
        return state

    def read(self, state: ReconciledState) -> ReconciledState:
        """Refresh the remote-owned fields of ``state``.

        A subscription removed out-of-band raises ``RemoteCallError`` with
        ``not_found`` set; it is not reported as gone.
        """
        record = _call("read", "read", lambda: self._client.push_subscriptions.get(state.id))
        refreshed = state.refreshed(record)
        if refreshed.callback_url != state.callback_url:
            logger.info(
                "Push subscription %d drifted: callback_url %s -> %s",
                state.id, state.callback_url, refreshed.callback_url,
            )
        return refreshed

    def update(self, spec: SubscriptionSpec, existing_id: int) -> ReconciledState:
        """Replace subscription ``existing_id`` with a new one matching ``spec``.

        The delete is unconditional. If the create or read-back that follows
        fails, the error has ``remote_absent`` set: the old subscription is
        already gone.
        """
        _call("update", "delete", lambda: self._client.push_subscriptions.delete(existing_id))
        logger.debug("Deleted push subscription %d ahead of replacement", existing_id)
        try:
            state = self._create(spec, "update")
        except RemoteCallError as err:
            logger.warning(
                "Push subscription %d was deleted but its replacement failed during %s; "
                "no remote subscription exists",
                existing_id, err.phase,
            )
            raise
        logger.info("Replaced push subscription %d with %d", existing_id, state.id)
        return state

    def delete(self, subscription_id: int) -> None:
        _call("delete", "delete", lambda: self._client.push_subscriptions.delete(subscription_id))
        logger.info("Deleted push subscription %d", subscription_id)

    # ── Import ───────────────────────────────────────────────────────────────

    @staticmethod
    def import_state(composite_id: str) -> ImportedState:
        """Parse an import identifier of the form ``<id>,<verify_token>``."""
        parts = composite_id.split(",")
        if len(parts) < 2:
            raise ImportFormatError(
                "Could not import item (ID should be in the format <id>,<verify_token>): "
                + composite_id
            )
        raw_id = parts[0]
        if not _IMPORT_ID.fullmatch(raw_id):
            raise ImportIDError(
                f"Could not import item (the <id> part should be an integer): {raw_id!r}"
            )
        subscription_id = int(raw_id)
        if not _INT64_MIN <= subscription_id <= _INT64_MAX:
            raise ImportIDError(
                f"Could not import item (the <id> part is out of int64 range): {raw_id}"
            )
        return ImportedState(id=subscription_id, verify_token=parts[1])
