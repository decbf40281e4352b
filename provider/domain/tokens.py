from __future__ import annotations

import base64
import time
from collections.abc import Callable

__all__ = [
    "BEARER_PREFIX",
    "ONE_HOUR_MS",
    "TOKEN_BYTES",
    "Clock",
    "TokenError",
    "MalformedTokenError",
    "now_ms",
    "encode_timestamp",
    "decode_timestamp",
    "is_valid_credential",
    "TokenGenerator",
    "TokenValidator",
]

BEARER_PREFIX = "Bearer "
ONE_HOUR_MS = 60 * 60 * 1000
# A token is one big-endian signed 64-bit integer, nothing more.
TOKEN_BYTES = 8

# Wall-clock source returning epoch milliseconds.
Clock = Callable[[], int]


# ------------------------
# Errors
# ------------------------
class TokenError(ValueError):
    """Base class for token-related errors.

    The `code` attribute gives log lines a stable machine code. Callers of the
    validator never see these: every `TokenError` is a rejection.
    """

    code: str = "invalid_token"


class MalformedTokenError(TokenError):
    code = "malformed_token"


def now_ms() -> int:
    """Return current time in epoch milliseconds."""
    return int(time.time() * 1000)


# ------------------------
# Public encode/decode
# ------------------------

def encode_timestamp(timestamp_ms: int) -> str:
    """Encode epoch milliseconds as padded standard base64 of 8 big-endian bytes.

    Raises OverflowError if the value does not fit a signed 64-bit integer.
    """
    raw = timestamp_ms.to_bytes(TOKEN_BYTES, "big", signed=True)
    return base64.b64encode(raw).decode("ascii")


def decode_timestamp(token: str) -> int:
    """Decode a token back into the epoch milliseconds it carries.

    Raises `MalformedTokenError` if the token is not strict base64 or does not
    decode to exactly 8 bytes.
    """
    try:
        raw = base64.b64decode(token, validate=True)
    except ValueError as e:  # binascii.Error and non-ASCII input
        raise MalformedTokenError("Token is not valid base64") from e

    if len(raw) != TOKEN_BYTES:
        raise MalformedTokenError(f"Token decodes to {len(raw)} bytes, expected {TOKEN_BYTES}")

    return int.from_bytes(raw, "big", signed=True)


def is_valid_credential(
    header_value: str | None, now: int, window_ms: int = ONE_HOUR_MS
) -> bool:
    """Return True iff `header_value` is a well-formed bearer token no older than the window.

    The age is a plain subtraction: a token stamped in the future (clock skew
    between caller and server) has a negative age and is accepted.
    """
    if not header_value or not header_value.startswith(BEARER_PREFIX):
        return False
    try:
        issued_at = decode_timestamp(header_value[len(BEARER_PREFIX):])
    except TokenError:
        return False
    # NOTE: no lower bound on age; future-dated tokens pass.
    return now - issued_at <= window_ms


class TokenGenerator:
    """Client side: mint a fresh bearer credential from the current time."""

    def __init__(self, clock: Clock = now_ms) -> None:
        self._clock = clock

    def generate(self) -> str:
        return BEARER_PREFIX + encode_timestamp(self._clock())


class TokenValidator:
    """Server side: accept or reject a presented `Authorization` header value."""

    def __init__(self, clock: Clock = now_ms, *, window_ms: int = ONE_HOUR_MS) -> None:
        self._clock = clock
        self.window_ms = window_ms

    def validate(self, header_value: str | None) -> bool:
        return is_valid_credential(header_value, self._clock(), self.window_ms)
