"""SportX SDK: order signing for the SportX betting exchange."""

from .errors import SportXError, SchemaError, RangeError, SigningFailure
from .chain import TokenMetadataReader, Web3TokenReader
from .client import SportXSigningClient, SigningConfig, ResolvedSigningConfig

__version__ = "0.1.0"

__all__ = [
    "SportXError",
    "SchemaError",
    "RangeError",
    "SigningFailure",
    "TokenMetadataReader",
    "Web3TokenReader",
    "SportXSigningClient",
    "SigningConfig",
    "ResolvedSigningConfig",
]
