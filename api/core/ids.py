"""
Row identifier generation.
"""

from __future__ import annotations

import secrets

ID_BYTES = 4


def new_id() -> str:
    """
    Return an 8-character uppercase hex id (32 random bits).

    Collisions are not checked here; the primary key constraint is the backstop.
    """
    return secrets.token_hex(ID_BYTES).upper()
