"""Unverified JWT payload inspection.

The helpers here read the claims of a bearer token **without checking its
signature**.  Their output is for display only and must never feed an
authorization decision.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging

logger = logging.getLogger(__name__)


def peek_claims(token: str) -> dict[str, object]:
    """Return the payload claims of *token*, or ``{}`` if it cannot be read."""
    try:
        payload = token.split(".")[1]
        payload += "=" * (-len(payload) % 4)
        claims = json.loads(base64.urlsafe_b64decode(payload))
    except (
        AttributeError,
        IndexError,
        binascii.Error,
        RecursionError,
        UnicodeDecodeError,
        ValueError,
    ) as exc:
        logger.debug("Ignoring unreadable token payload: %s", exc)
        return {}
    if not isinstance(claims, dict):
        logger.debug("Ignoring token payload of type %s", type(claims).__name__)
        return {}
    return claims
