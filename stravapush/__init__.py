"""
stravapush — declarative management of Strava webhook push subscriptions.

Usage:

    from stravapush import StravaProvider, SubscriptionSpec

    provider = StravaProvider()
    client = provider.configure()  # STRAVA_CLIENT_ID / STRAVA_CLIENT_SECRET
    reconciler = provider.resource("strava_push_subscription", client)
    state = reconciler.create(SubscriptionSpec(
        callback_url="https://example.com/hook",
        verify_token="t0k3n",
    ))
"""

__version__ = "0.1.0"

from .client import StravaClient
from .collection import PushSubscriptionsReader
from .config import CLIENT_ID_ENV, CLIENT_SECRET_ENV, UNKNOWN, ProviderConfig, resolve_config
from .provider import StravaProvider
from .reconciler import PushSubscriptionReconciler
from .types import (
    ImportedState,
    ReconciledState,
    SubscriptionCollection,
    SubscriptionRecord,
    SubscriptionSpec,
)
from .exceptions import (
    StravaPushError,
    ConfigurationError,
    Diagnostic,
    StravaAPIError,
    BadRequestError,
    AuthenticationError,
    PermissionError,
    NotFoundError,
    ValidationError,
    RateLimitError,
    ServerError,
    RemoteCallError,
    ImportStateError,
    ImportFormatError,
    ImportIDError,
)

__all__ = [
    # Provider / lifecycle
    "StravaProvider",
    "StravaClient",
    "PushSubscriptionReconciler",
    "PushSubscriptionsReader",
    # Configuration
    "resolve_config",
    "ProviderConfig",
    "UNKNOWN",
    "CLIENT_ID_ENV",
    "CLIENT_SECRET_ENV",
    # Types
    "SubscriptionSpec",
    "SubscriptionRecord",
    "ReconciledState",
    "ImportedState",
    "SubscriptionCollection",
    # Exceptions
    "StravaPushError",
    "ConfigurationError",
    "Diagnostic",
    "StravaAPIError",
    "BadRequestError",
    "AuthenticationError",
    "PermissionError",
    "NotFoundError",
    "ValidationError",
    "RateLimitError",
    "ServerError",
    "RemoteCallError",
    "ImportStateError",
    "ImportFormatError",
    "ImportIDError",
    # Metadata
    "__version__",
]
