"""
Provider entry point.

The provider resolves credentials once, builds a single ``StravaClient`` and
hands it explicitly to each resource and data source it instantiates.

    provider = StravaProvider()
    client = provider.configure(client_id="5", client_secret="...")
    reconciler = provider.resource("strava_push_subscription", client)
"""

import logging
from typing import Callable, Dict, List, Mapping, Optional

import httpx

from .client import StravaClient
from .collection import PushSubscriptionsReader
from .config import ConfigValue, resolve_config
from .exceptions import ConfigurationError, Diagnostic, StravaPushError
from .reconciler import PushSubscriptionReconciler
from .schema import STRING, Attribute, Schema

logger = logging.getLogger("stravapush.provider")

PROVIDER_TYPE_NAME = "strava"


class StravaProvider:
    type_name = PROVIDER_TYPE_NAME

    @staticmethod
    def schema() -> Schema:
        return Schema(
            description="Interact with Strava.",
            attributes={
                "client_id": Attribute(
                    STRING,
                    "Strava API application ID. May also be provided via the "
                    "STRAVA_CLIENT_ID environment variable.",
                    optional=True,
                ),
                "client_secret": Attribute(
                    STRING,
                    "Strava API application secret. May also be provided via the "
                    "STRAVA_CLIENT_SECRET environment variable.",
                    optional=True,
                    sensitive=True,
                ),
            },
        )

    def configure(
        self,
        client_id: ConfigValue = None,
        client_secret: ConfigValue = None,
        environ: Optional[Mapping[str, str]] = None,
        **client_kwargs,
    ) -> StravaClient:
        """Resolve credentials and build the client shared by resources and data sources.

        Raises:
            ConfigurationError: credentials are unknown or missing, or the
                client could not be constructed.
        """
        logger.info("Configuring Strava client")

        config = resolve_config(client_id, client_secret, environ=environ)

        logger.debug("Creating Strava client (client_id=%s, client_secret=***)", config.client_id)
        try:
            client = StravaClient(config.client_id, config.client_secret, **client_kwargs)
        except (StravaPushError, httpx.HTTPError, TypeError, ValueError) as err:
            raise ConfigurationError([
                Diagnostic(
                    attribute="",
                    summary="Unable to Create Strava API Client",
                    detail=(
                        "An unexpected error occurred when creating the Strava API client. "
                        "If the error is not clear, please contact the provider developers.\n\n"
                        f"Strava Client Error: {err}"
                    ),
                )
            ]) from err

        logger.info("Configured Strava client (success=True)")
        return client

    # ── Factories ────────────────────────────────────────────────────────────

    def resources(self) -> List[Callable[[StravaClient], PushSubscriptionReconciler]]:
        return [PushSubscriptionReconciler]

    def data_sources(self) -> List[Callable[[StravaClient], PushSubscriptionsReader]]:
        return [PushSubscriptionsReader]

    def _registry(self) -> Dict[str, Callable]:
        registry = {}
        for factory in self.resources() + self.data_sources():
            registry[factory.type_name(self.type_name)] = factory
        return registry

    def resource(self, type_name: str, client: StravaClient):
        """Instantiate the resource or data source registered under ``type_name``."""
        try:
            factory = self._registry()[type_name]
        except KeyError:
            raise StravaPushError(f"Unknown resource type: {type_name!r}") from None
        return factory(client)
