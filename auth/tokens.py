"""
Opaque access tokens.

A token is random hex assigned once when the user row is inserted and
never rotated.  Clients send it back verbatim in the ``Authorization``
header; a ``Bearer `` prefix is tolerated.
"""

from __future__ import annotations

import secrets
from typing import Optional

from config.settings import config

_BEARER_SCHEME = "bearer"


def generate_access_token() -> str:
    return secrets.token_hex(config.access_token_bytes)


def parse_authorization_header(value: Optional[str]) -> Optional[str]:
    """Return the token carried by an ``Authorization`` header, or None."""
    if value is None:
        return None
    token = value.strip()
    scheme, _, rest = token.partition(" ")
    if scheme.lower() == _BEARER_SCHEME:
        token = rest.strip()
    return token or None
