"""
Provider credential resolution.

An explicit value wins over the environment default. Every field is checked
before anything is reported, so the operator sees all problems at once.
"""

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Union

from .exceptions import ConfigurationError, Diagnostic

CLIENT_ID_ENV = "STRAVA_CLIENT_ID"
CLIENT_SECRET_ENV = "STRAVA_CLIENT_SECRET"


class _Unknown:
    """Sentinel for a value that is not resolved yet (computed later by the driver)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNKNOWN"

    def __bool__(self) -> bool:
        return False


UNKNOWN = _Unknown()

ConfigValue = Union[str, _Unknown, None]


@dataclass(frozen=True)
class _Field:
    attribute: str
    label: str
    env: str


_FIELDS = (
    _Field("client_id", "Strava API Client ID", CLIENT_ID_ENV),
    _Field("client_secret", "Strava API Client Secret", CLIENT_SECRET_ENV),
)


@dataclass(frozen=True)
class ProviderConfig:
    client_id: str
    client_secret: str = field(repr=False)

    def __repr__(self) -> str:
        return f"ProviderConfig(client_id={self.client_id!r}, client_secret='***')"


def _unknown_diagnostic(f: _Field) -> Diagnostic:
    return Diagnostic(
        attribute=f.attribute,
        summary=f"Unknown {f.label}",
        detail=(
            f"The provider cannot create the Strava API client as there is an unknown "
            f"configuration value for the {f.label}. Either target apply the source of the "
            f"value first, set the value statically in the configuration, or use the "
            f"{f.env} environment variable."
        ),
    )


def _missing_diagnostic(f: _Field) -> Diagnostic:
    return Diagnostic(
        attribute=f.attribute,
        summary=f"Missing {f.label}",
        detail=(
            f"The provider cannot create the Strava API client as there is a missing or "
            f"empty value for the {f.label}. Set the {f.attribute} value in the "
            f"configuration or use the {f.env} environment variable. If either is already "
            f"set, ensure the value is not empty."
        ),
    )


def resolve_config(
    client_id: ConfigValue = None,
    client_secret: ConfigValue = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ProviderConfig:
    """
    Resolve the provider credentials.

    Args:
        client_id: Explicit value, ``None`` to use the environment, or ``UNKNOWN``.
        client_secret: Same as ``client_id``.
        environ: Environment mapping (default: ``os.environ``).

    Raises:
        ConfigurationError: listing every unknown or missing credential.
    """
    environ = os.environ if environ is None else environ
    explicit = {"client_id": client_id, "client_secret": client_secret}

    diagnostics: List[Diagnostic] = [
        _unknown_diagnostic(f) for f in _FIELDS if explicit[f.attribute] is UNKNOWN
    ]
    if diagnostics:
        raise ConfigurationError(diagnostics)

    resolved = {}
    for f in _FIELDS:
        value = environ.get(f.env, "")
        if explicit[f.attribute] is not None:
            value = explicit[f.attribute]
        resolved[f.attribute] = value

    diagnostics = [_missing_diagnostic(f) for f in _FIELDS if resolved[f.attribute] == ""]
    if diagnostics:
        raise ConfigurationError(diagnostics)

    return ProviderConfig(**resolved)
