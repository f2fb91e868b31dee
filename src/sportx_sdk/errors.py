"""Exceptions raised by the SportX signing SDK."""


class SportXError(Exception):
    """Base class for SDK errors."""


class SchemaError(SportXError, ValueError):
    """Caller supplied data that cannot be hashed or signed.

    Raised before any hashing or signing happens.
    """


class RangeError(SportXError, ValueError):
    """Odds value outside the convertible range."""


class SigningFailure(SportXError):
    """The external signer rejected the request or failed."""
