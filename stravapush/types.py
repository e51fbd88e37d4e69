"""Pydantic models for push subscriptions and their reconciled state."""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

CALLBACK_URL_MAX_LENGTH = 255

COLLECTION_ID = "placeholder"


def now_rfc3339() -> str:
    """Current UTC time in RFC 3339 form, second precision."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class StravaModel(BaseModel):
    """Base model with dict-access compatibility."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def __getitem__(self, item):
        return getattr(self, item)

    def __contains__(self, item):
        return item in self.model_dump()


class SubscriptionSpec(StravaModel):
    """Desired push subscription, as authored by the operator.

    Both fields are replace-on-change: altering either requires a new
    remote subscription.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    callback_url: str = Field(min_length=1, max_length=CALLBACK_URL_MAX_LENGTH)
    verify_token: str = Field(min_length=1, repr=False)

    def __repr__(self) -> str:
        return f"SubscriptionSpec(callback_url={self.callback_url!r}, verify_token='***')"


class SubscriptionRecord(StravaModel):
    """A push subscription as reported by Strava."""
    id: int
    resource_state: Optional[int] = None
    application_id: Optional[int] = None
    callback_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def __repr__(self) -> str:
        return f"SubscriptionRecord(id={self.id}, callback_url={self.callback_url!r})"


class ReconciledState(StravaModel):
    """Locally cached state of a managed push subscription."""
    id: int
    callback_url: str
    verify_token: str = Field(repr=False)
    resource_state: Optional[int] = None
    application_id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    last_updated: Optional[str] = None

    @classmethod
    def from_record(
        cls,
        spec: SubscriptionSpec,
        record: SubscriptionRecord,
        last_updated: Optional[str] = None,
    ) -> "ReconciledState":
        return cls(
            id=record.id,
            callback_url=record.callback_url if record.callback_url is not None else spec.callback_url,
            verify_token=spec.verify_token,
            resource_state=record.resource_state,
            application_id=record.application_id,
            created_at=record.created_at,
            updated_at=record.updated_at,
            last_updated=last_updated,
        )

    def refreshed(self, record: SubscriptionRecord) -> "ReconciledState":
        """Overlay the remote-owned fields of ``record`` onto this state."""
        return self.model_copy(update={
            "resource_state": record.resource_state,
            "application_id": record.application_id,
            "callback_url": record.callback_url if record.callback_url is not None else self.callback_url,
            "created_at": record.created_at,
            "updated_at": record.updated_at,
        })

    @property
    def spec(self) -> SubscriptionSpec:
        return SubscriptionSpec(callback_url=self.callback_url, verify_token=self.verify_token)

    def __repr__(self) -> str:
        return (
            f"ReconciledState(id={self.id}, callback_url={self.callback_url!r}, "
            f"last_updated={self.last_updated!r})"
        )


class ImportedState(StravaModel):
    """Partial state recovered from an import identifier."""
    id: int
    verify_token: str = Field(repr=False)


class SubscriptionCollection(StravaModel):
    """Every push subscription visible to the configured application."""
    id: str = COLLECTION_ID
    push_subscriptions: List[SubscriptionRecord] = []

    def ids(self) -> List[int]:
        return [s.id for s in self.push_subscriptions]
