"""Client secret parsing for identity verification sessions."""
from importlib.metadata import PackageNotFoundError, version

from .domain.client_secret import (
    ClientSecretError,
    ClientSecretField,
    MalformedReason,
    MalformedSecretError,
    VerificationClientSecret,
    parse_client_secret,
    to_canonical_string,
    try_parse_client_secret,
)

try:
    __version__ = version("verification-client-secret")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = [
    "ClientSecretError",
    "ClientSecretField",
    "MalformedReason",
    "MalformedSecretError",
    "VerificationClientSecret",
    "parse_client_secret",
    "to_canonical_string",
    "try_parse_client_secret",
]
