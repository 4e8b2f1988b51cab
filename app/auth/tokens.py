"""
Bearer token issuing and verification.

Tokens are HS256 JWTs signed with ``JWT_SECRET_KEY`` that carry the user
id as their only identity claim and expire after ``JWT_EXPIRES_DAYS``.
Any decode problem (missing, malformed, expired, bad signature) is
reported the same way so callers cannot tell them apart.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from flask import current_app
from jose import JWTError, jwt

from app.errors import AuthenticationError

logger = logging.getLogger(__name__)


def issue_token(user_id: int) -> str:
    """Sign a bearer token for *user_id*."""
    cfg = current_app.config
    expire = datetime.now(timezone.utc) + timedelta(days=cfg['JWT_EXPIRES_DAYS'])
    claims = {'userId': user_id, 'exp': expire}
    return jwt.encode(claims, cfg['JWT_SECRET_KEY'], algorithm=cfg['JWT_ALGORITHM'])


def decode_token(token: str) -> int:
    """Return the user id carried by *token*.

    Raises:
        AuthenticationError: For any invalid, expired or forged token.
    """
    if not token:
        raise AuthenticationError()
    cfg = current_app.config
    try:
        payload = jwt.decode(
            token, cfg['JWT_SECRET_KEY'], algorithms=[cfg['JWT_ALGORITHM']]
        )
    except JWTError as e:
        logger.info(f'Rejected bearer token: {type(e).__name__}')
        raise AuthenticationError()

    user_id = payload.get('userId')
    if not isinstance(user_id, int):
        raise AuthenticationError()
    return user_id


def bearer_token_from_header(header: str | None) -> str | None:
    """Extract the token part of an ``Authorization: Bearer <token>`` header."""
    if not header:
        return None
    parts = header.split(None, 1)
    if len(parts) != 2 or parts[0].lower() != 'bearer':
        return None
    return parts[1].strip() or None


def load_user_from_request(request):
    """Flask-Login request loader: resolve the bearer token to a User."""
    from app.extensions import db
    from app.models import User

    token = bearer_token_from_header(request.headers.get('Authorization'))
    if not token:
        return None
    try:
        user_id = decode_token(token)
    except AuthenticationError:
        return None
    return db.session.get(User, user_id)
