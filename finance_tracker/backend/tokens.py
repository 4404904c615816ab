# backend/tokens.py
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from .errors import InvalidToken


def issue(user_id):
    """Signed access token whose subject is the user id."""
    return create_access_token(identity=str(user_id))


def verify(token):
    """Return the user id carried by `token` or raise InvalidToken."""
    if not token:
        raise InvalidToken("missing token")
    try:
        claims = decode_token(token)
    except (PyJWTError, JWTExtendedException) as e:
        raise InvalidToken(str(e))

    try:
        return int(claims.get("sub"))
    except (TypeError, ValueError):
        raise InvalidToken("subject is not a user id")
