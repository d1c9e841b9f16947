"""
JWT Service — session token issuance and verification.

Session token:  JWT_EXPIRES_HOURS hours (default 24)
Algorithm:      HS256
Signing key:    JWT_SECRET_KEY (falls back to SECRET_KEY), read from app config

Token payload:
{
    "sub": <user_id>,
    "iat": <issued_at>,
    "exp": <expires_at>,
    "jti": <unique_id>
}

There is no server-side revocation list: a token stays valid until it
expires, and logout only tells the client to discard it.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app

from studioboard.core.exceptions import TokenExpiredError, TokenInvalidError

logger = logging.getLogger(__name__)

# ─── Defaults ────────────────────────────────────────────────
DEFAULT_EXPIRES_HOURS = 24
ALGORITHM = "HS256"


def _get_secret():
    """Get the JWT signing key from app config."""
    return current_app.config.get("JWT_SECRET_KEY") or current_app.config["SECRET_KEY"]


def _get_expires():
    hours = current_app.config.get("JWT_EXPIRES_HOURS", DEFAULT_EXPIRES_HOURS)
    return timedelta(hours=float(hours))


# ═══════════════════════════════════════════════════════════════
# Token Generation
# ═══════════════════════════════════════════════════════════════
def issue_token(user_id: str, expires_in: timedelta | None = None) -> str:
    """Issue a signed session token for `user_id`.

    Args:
        user_id: Id of the authenticated user (becomes the `sub` claim).
        expires_in: Lifetime override; defaults to JWT_EXPIRES_HOURS.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + (expires_in if expires_in is not None else _get_expires()),
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, _get_secret(), algorithm=ALGORITHM)


# ═══════════════════════════════════════════════════════════════
# Token Verification
# ═══════════════════════════════════════════════════════════════
def decode_token(token: str) -> dict:
    """
    Decode and verify a session token.

    Returns the payload dict on success.
    Raises TokenExpiredError once `exp` is reached, TokenInvalidError for
    anything malformed, forged or missing the `sub` claim.
    """
    try:
        payload = jwt.decode(
            token,
            _get_secret(),
            algorithms=[ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpiredError() from exc
    except jwt.InvalidTokenError as exc:
        logger.debug("Rejected token: %s", exc)
        raise TokenInvalidError() from exc

    if not payload.get("sub"):
        raise TokenInvalidError()
    return payload


def verify_token(token: str) -> str:
    """Verify a session token and return the user id it was issued for."""
    return decode_token(token)["sub"]
