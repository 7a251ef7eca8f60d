from __future__ import annotations

import re
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer

from ..logging_conf import get_logger

__all__ = [
    "SESSION_TYPE_TAGS",
    "SECRET_SEPARATOR",
    "VerificationClientSecret",
    "ClientSecretError",
    "MalformedSecretError",
    "MalformedReason",
    "ClientSecretField",
    "parse_client_secret",
    "try_parse_client_secret",
    "to_canonical_string",
]

logger = get_logger("domain.client_secret")

SESSION_TYPE_TAGS = ("vi", "vs")
SECRET_SEPARATOR = "secret"
_EXPECTED_SEGMENTS = 4

# Unicode space separators, tab and line breaks. Unlike str.strip(), leaves the
# \x1c-\x1f information separators in place.
_TRIM_CHARS = (
    "\t\n\x0b\x0c\r\x85\u2028\u2029"
    " \xa0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u202f\u205f\u3000"
)

# ASCII only; str.isalnum() alone would accept any Unicode letter or digit.
_CLIENT_SECRET_RE = re.compile(r"(vi|vs)_([0-9A-Za-z]+)_secret_([0-9A-Za-z]+)")
_SESSION_ID_PATTERN = r"^(vi|vs)_[0-9A-Za-z]+$"
_URL_TOKEN_PATTERN = r"^[0-9A-Za-z]+$"


# ------------------------
# Errors
# ------------------------
class ClientSecretError(ValueError):
    """Base class for client secret errors.

    The `code` attribute is a stable machine code callers can surface as-is.
    """

    code: str = "invalid_client_secret"


class MalformedReason(str, Enum):
    not_a_string = "not_a_string"
    segment_count = "segment_count"
    type_tag = "type_tag"
    session_body = "session_body"
    separator = "separator"
    url_token = "url_token"


class MalformedSecretError(ClientSecretError):
    """Raised when a raw client secret does not match the expected grammar.

    The message names the failing component only; the raw input is never
    echoed back since it may carry a live url token.
    """

    code = "malformed_client_secret"

    _MESSAGES = {
        MalformedReason.not_a_string: "Client secret must be a string",
        MalformedReason.segment_count: "Client secret must have the form <tag>_<id>_secret_<token>",
        MalformedReason.type_tag: "Client secret type tag must be one of: vi, vs",
        MalformedReason.session_body: "Client secret session id must be non-empty ASCII alphanumeric",
        MalformedReason.separator: 'Client secret is missing the "secret" separator',
        MalformedReason.url_token: "Client secret url token must be non-empty ASCII alphanumeric",
    }

    def __init__(self, reason: MalformedReason) -> None:
        self.reason = reason
        super().__init__(self._MESSAGES[reason])

    def __reduce__(self):
        return (type(self), (self.reason,))


# ------------------------
# Schema
# ------------------------
class VerificationClientSecret(BaseModel):
    """Structured client secret for a single identity verification session.

    Canonical string form: ``<session_id>_secret_<url_token>``.
    """

    model_config = ConfigDict(frozen=True)

    session_id: str = Field(..., pattern=_SESSION_ID_PATTERN)  # e.g. "vi_1a2b3c"
    url_token: str = Field(..., pattern=_URL_TOKEN_PATTERN, repr=False)

    @classmethod
    def from_string(cls, raw: str) -> VerificationClientSecret:
        return parse_client_secret(raw)

    @property
    def type_tag(self) -> str:
        return self.session_id.partition("_")[0]

    def to_canonical_string(self) -> str:
        return f"{self.session_id}_{SECRET_SEPARATOR}_{self.url_token}"

    def __str__(self) -> str:
        return self.to_canonical_string()


# ------------------------
# Internals
# ------------------------

def _is_ascii_alnum(segment: str) -> bool:
    return bool(segment) and segment.isascii() and segment.isalnum()


def _diagnose(candidate: str) -> MalformedReason:
    """Name the first grammar step a non-matching candidate fails.

    Splitting is capped so surplus underscores stay in the final segment,
    where they fail the url token check instead of being dropped.
    """
    segments = candidate.split("_", _EXPECTED_SEGMENTS - 1)
    if len(segments) != _EXPECTED_SEGMENTS:
        return MalformedReason.segment_count
    tag, body, separator, token = segments
    if tag not in SESSION_TYPE_TAGS:
        return MalformedReason.type_tag
    if not _is_ascii_alnum(body):
        return MalformedReason.session_body
    if separator != SECRET_SEPARATOR:
        return MalformedReason.separator
    return MalformedReason.url_token


def _reject(reason: MalformedReason) -> MalformedSecretError:
    logger.debug(
        "client_secret.rejected",
        extra={"event": "client_secret_rejected", "reason": reason.value},
    )
    return MalformedSecretError(reason)


# ------------------------
# Public parse/serialize
# ------------------------

def parse_client_secret(raw: str) -> VerificationClientSecret:
    """Parse and validate a raw client secret string.

    Leading and trailing whitespace (including newlines) is ignored. The
    remainder must match ``(vi|vs)_<alnum+>_secret_<alnum+>`` exactly.

    Raises:
        MalformedSecretError: with a `reason` naming the failing component.
    """
    if not isinstance(raw, str):
        raise _reject(MalformedReason.not_a_string)

    candidate = raw.strip(_TRIM_CHARS)
    match = _CLIENT_SECRET_RE.fullmatch(candidate)
    if match is None:
        raise _reject(_diagnose(candidate))

    tag, body, token = match.groups()
    return VerificationClientSecret(session_id=f"{tag}_{body}", url_token=token)


def try_parse_client_secret(raw: str) -> VerificationClientSecret | None:
    """Like `parse_client_secret`, but return None instead of raising."""
    try:
        return parse_client_secret(raw)
    except MalformedSecretError:
        return None


def to_canonical_string(secret: VerificationClientSecret) -> str:
    return secret.to_canonical_string()


def _coerce_client_secret(value: Any) -> Any:
    # Strings go through the grammar; models and mappings fall through to
    # regular field validation.
    if isinstance(value, str):
        return parse_client_secret(value)
    return value


# Field type for request/response schemas that carry a client secret.
ClientSecretField = Annotated[
    VerificationClientSecret,
    BeforeValidator(_coerce_client_secret),
    PlainSerializer(to_canonical_string, return_type=str),
]
