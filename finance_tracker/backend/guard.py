# backend/guard.py
import logging
from functools import wraps

from flask import request

from . import tokens, users
from .errors import InvalidToken, Unauthenticated

logger = logging.getLogger("finance-backend")


def bearer_token(header):
    """Token from an `Authorization: Bearer <token>` header, or None."""
    if not header:
        return None
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def auth_required(view_func):
    """
    Reject the request with 401 unless it carries a valid bearer token for
    an existing user. The verified id reaches the view as `owner_id`.
    """
    @wraps(view_func)
    def wrapped(*args, **kwargs):
        token = bearer_token(request.headers.get("Authorization"))
        if token is None:
            logger.warning(f"Unauthenticated request to {request.path}")
            raise Unauthenticated()
        try:
            owner_id = tokens.verify(token)
        except InvalidToken as e:
            logger.warning(f"Rejected token on {request.path}: {e}")
            raise Unauthenticated()
        if users.get_user(owner_id) is None:
            logger.warning(f"Token for unknown user {owner_id} on {request.path}")
            raise Unauthenticated()
        kwargs["owner_id"] = owner_id
        return view_func(*args, **kwargs)
    return wrapped
