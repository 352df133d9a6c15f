# Overview: Service-layer operations for operator sessions; opaque bearer tokens.

"""
Operator sessions.

The client gets a random 64-hex-char token; the database only ever sees its
SHA-256 digest. Sessions expire SESSION_HOURS after login and die early on
logout or when the operator is deactivated.
"""

import hashlib
import secrets
from datetime import timedelta

from flask import current_app

from ..extensions import db
from ..models import SessionToken, Operator
from tuldokbenta.time_utils import utcnow


def generate_token() -> str:
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    # Tokens are high-entropy, so a plain digest is enough (no bcrypt)
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _unrevoked(token: str) -> SessionToken | None:
    return (
        db.session.query(SessionToken)
        .filter(SessionToken.token_hash == hash_token(token), SessionToken.is_revoked.is_(False))
        .one_or_none()
    )


def create_session(operator_id: int) -> tuple[SessionToken, str]:
    """Open a session; returns (row, plaintext token for the client)."""
    token = generate_token()
    issued = utcnow()
    lifetime = timedelta(hours=current_app.config.get("SESSION_HOURS", 12))

    row = SessionToken(
        operator_id=operator_id,
        token_hash=hash_token(token),
        created_at=issued,
        expires_at=issued + lifetime,
        is_revoked=False,
    )
    db.session.add(row)
    db.session.commit()
    return row, token


def validate_session(token: str) -> Operator | None:
    """The active operator behind a live token, else None."""
    row = _unrevoked(token)
    if row is None or row.expires_at < utcnow():
        return None

    operator = row.operator
    if operator is None or not operator.is_active:
        return None
    return operator


def revoke_session(token: str) -> bool:
    """Logout. False when the token is unknown or already revoked."""
    row = _unrevoked(token)
    if row is None:
        return False

    row.is_revoked = True
    row.revoked_at = utcnow()
    db.session.commit()
    current_app.logger.info("Revoked session %s for operator %s", row.id, row.operator_id)
    return True
