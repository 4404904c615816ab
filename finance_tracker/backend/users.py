# backend/users.py
"""
Credential store: user rows, password hashing and uniqueness.

Passwords go through werkzeug's salted KDF before they touch the database;
the plaintext is never stored or logged.
"""
import logging
import re
import sqlite3
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from . import db
from .errors import Conflict, ValidationError

logger = logging.getLogger("finance-backend")

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6
INVALID_CREDENTIALS = "Invalid credentials"


@dataclass(frozen=True)
class User:
    id: int
    username: str
    email: str
    password_hash: str
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row["id"],
            username=row["username"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=row["created_at"],
        )

    def public(self):
        return {"id": self.id, "username": self.username, "email": self.email}


def normalize_email(email):
    return str(email or "").strip().lower()


def register(username, email, password) -> User:
    username = str(username or "").strip()
    email = normalize_email(email)
    password = password if isinstance(password, str) else ""

    if not username or not email or not password:
        raise ValidationError("Username, email and password are required")
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email address")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    try:
        user_id, _ = db.execute_db(
            "INSERT INTO users (username, email, password_hash) VALUES (?, ?, ?)",
            (username, email, generate_password_hash(password)),
        )
    except sqlite3.IntegrityError as e:
        # UNIQUE constraint failed: users.email
        field = "email" if "users.email" in str(e) else "username"
        logger.warning(f"Registration rejected, duplicate {field}")
        raise Conflict(f"A user with that {field} already exists")

    logger.info(f"👤 Registered user {user_id}")
    return get_user(user_id)


def get_user(user_id) -> Optional[User]:
    if not db.is_row_id(user_id):
        return None
    row = db.query_db("SELECT * FROM users WHERE id=?", (user_id,), one=True)
    return User.from_row(row) if row else None


def find_by_email(email) -> Optional[User]:
    row = db.query_db("SELECT * FROM users WHERE email=?", (normalize_email(email),), one=True)
    return User.from_row(row) if row else None


def authenticate(email, password) -> User:
    """Unknown email and wrong password fail the same way."""
    if not email or not isinstance(password, str) or not password:
        raise ValidationError("Email and password are required")

    user = find_by_email(email)
    if user is None or not check_password_hash(user.password_hash, password):
        logger.warning("Login failed")
        raise ValidationError(INVALID_CREDENTIALS)
    return user
