"""Client modules for the SportX SDK."""

from .signing_client import (
    SportXSigningClient,
    SigningConfig,
    ResolvedSigningConfig,
    resolve_config,
)

__all__ = [
    "SportXSigningClient",
    "SigningConfig",
    "ResolvedSigningConfig",
    "resolve_config",
]
