# Overview: Service-layer operations for operator accounts; bcrypt hashing and login.

"""
Operator authentication.

WHY: the web client used to gate its screens with one password compiled
into the bundle. Credentials now live server-side: operators are rows in
the operators table with bcrypt password hashes, and a successful login
yields a bearer session token (see session_service.py).

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor 12)
- Minimum 8 characters, at least one letter and one digit
"""

import bcrypt
import re
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Operator
from ..validation import ConflictError
from tuldokbenta.time_utils import utcnow


class PasswordValidationError(Exception):
    """Raised when password doesn't meet strength requirements."""
    pass


def validate_password_strength(password: str) -> None:
    if len(password) < 8:
        raise PasswordValidationError("Password must be at least 8 characters long")

    if not re.search(r'[A-Za-z]', password):
        raise PasswordValidationError("Password must contain at least one letter")

    if not re.search(r'\d', password):
        raise PasswordValidationError("Password must contain at least one digit")


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt with cost factor 12.

    Raises PasswordValidationError if password is too weak.
    """
    validate_password_strength(password)
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """Timing-safe bcrypt check; malformed hashes never verify."""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def create_operator(username: str, password: str) -> Operator:
    username = (username or "").strip()
    if not username:
        raise ValueError("username is required")

    if db.session.query(Operator).filter_by(username=username).first():
        raise ConflictError(f"Operator '{username}' already exists")

    operator = Operator(username=username, password_hash=hash_password(password), is_active=True)
    db.session.add(operator)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(f"Operator '{username}' already exists")
    return operator


def authenticate(username: str, password: str) -> Operator | None:
    """
    Returns the Operator if credentials are valid, None otherwise.
    Updates last_login_at on success.
    """
    operator = db.session.query(Operator).filter(
        Operator.username == username,
        Operator.is_active.is_(True),
    ).first()

    if not operator:
        return None

    if verify_password(password, operator.password_hash):
        operator.last_login_at = utcnow()
        db.session.commit()
        return operator

    return None
