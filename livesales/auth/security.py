from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Any, Dict

import jwt
from quart import current_app, g, request
from werkzeug.security import check_password_hash, generate_password_hash

from ..common.errors import Unauthorized

JWT_ALGO = "HS256"


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return check_password_hash(hashed, password)


def create_token(merchant_id: int, email: str, secret: str, expires_seconds: int) -> str:
    exp = datetime.now(timezone.utc) + timedelta(seconds=expires_seconds)
    return jwt.encode({"id": merchant_id, "email": email, "exp": exp}, secret, algorithm=JWT_ALGO)


def decode_token(token: str, secret: str) -> Dict[str, Any]:
    try:
        payload = jwt.decode(token, secret, algorithms=[JWT_ALGO])
    except jwt.InvalidTokenError:
        # ExpiredSignatureError is a subclass
        raise Unauthorized("Invalid token")
    if "id" not in payload:
        raise Unauthorized("Invalid token")
    return payload


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthorized("Access denied")
    return token.strip()


def require_auth(func):
    """Reject the request with 401 unless it carries a valid bearer token.

    On success the caller's id and email are stored on ``g.merchant_id``
    and ``g.merchant_email``.
    """

    @wraps(func)
    async def wrapper(*args, **kwargs):
        settings = current_app.extensions["settings"]
        payload = decode_token(bearer_token(), settings.JWT_SECRET)
        g.merchant_id = int(payload["id"])
        g.merchant_email = payload.get("email")
        return await func(*args, **kwargs)

    return wrapper
