"""Access token expiry helpers.

Tokens are issued and verified by the rental API; this side only reads
the unverified claims to decide whether a stored token is still worth
sending. No signature check happens here.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from jose import JWTError, jwt

from fleetcache.core.constants import MS_PER_MINUTE
from fleetcache.shared.utils.clock import Clock, SystemClock, to_datetime_utc

logger = logging.getLogger(__name__)


def _read_claims(token: Any) -> dict[str, Any] | None:
    """Return unverified claims, or None if token is not a decodable JWT."""
    if not token or not isinstance(token, str):
        return None
    if len(token.split(".")) != 3:
        return None
    try:
        return jwt.get_unverified_claims(token)
    except JWTError as e:
        logger.warning("Token parsing error: %s", e)
        return None


def _exp_seconds(claims: dict[str, Any]) -> float | None:
    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return None
    return exp


def is_token_valid(token: Any, clock: Clock | None = None) -> bool:
    """Return True if token looks like a JWT and is not expired.

    A token without an exp claim is considered valid.

    Args:
        token: Candidate token (anything; non-strings are invalid).
        clock: Time source; defaults to SystemClock.

    Returns:
        True if token has three parts, decodable claims and exp not in the past.
    """
    claims = _read_claims(token)
    if claims is None:
        return False
    exp = _exp_seconds(claims)
    if exp is None:
        return True
    now_seconds = (clock or SystemClock()).now_ms() // 1000
    return exp >= now_seconds


def get_token_expiration_time(token: Any) -> datetime | None:
    """Return the token's exp claim as a UTC datetime, or None if unknown."""
    claims = _read_claims(token)
    if claims is None:
        return None
    exp = _exp_seconds(claims)
    if exp is None:
        return None
    try:
        return to_datetime_utc(int(exp * 1000))
    except (OverflowError, ValueError, OSError) as e:
        logger.warning("Token exp claim out of range: %r (%s)", exp, e)
        return None


def is_token_expiring_soon(
    token: Any,
    minutes_threshold: float = 5,
    clock: Clock | None = None,
) -> bool:
    """Return True if the token expires within minutes_threshold.

    Already-expired tokens count as expiring soon. Tokens without a known
    expiry never do.
    """
    expiration = get_token_expiration_time(token)
    if expiration is None:
        return False
    now_ms = (clock or SystemClock()).now_ms()
    remaining_ms = expiration.timestamp() * 1000 - now_ms
    return remaining_ms / MS_PER_MINUTE <= minutes_threshold
