"""
Google OAuth sign-in.

The provider supplies a stable external id and an email.  Lookup order is
external id, then (optionally) email, then a new account.  Attaching an
OAuth identity to an existing password account by email only happens when
``OAUTH_LINK_BY_EMAIL`` is enabled and the provider vouches for the email.
"""
from __future__ import annotations

import logging
import re

from flask import current_app

from app.extensions import db, oauth
from app.models import User

logger = logging.getLogger(__name__)


class OAuthLinkRequired(Exception):
    """An account with this email exists and automatic linking is not allowed."""


def init_oauth(app):
    """Register the Google client when credentials are configured."""
    oauth.init_app(app)
    if not app.config.get('GOOGLE_CLIENT_ID'):
        logger.info('GOOGLE_CLIENT_ID not set, Google sign-in disabled')
        return
    oauth.register(
        name='google',
        client_id=app.config['GOOGLE_CLIENT_ID'],
        client_secret=app.config['GOOGLE_CLIENT_SECRET'],
        server_metadata_url=app.config['GOOGLE_DISCOVERY_URL'],
        client_kwargs={'scope': 'openid email profile'},
    )


def google_enabled() -> bool:
    return bool(current_app.config.get('GOOGLE_CLIENT_ID'))


def _unique_username(display_name: str, email: str) -> str:
    base = re.sub(r'[^A-Za-z0-9_.-]+', '', (display_name or '').replace(' ', '_'))
    if not base:
        base = email.split('@', 1)[0]
    base = base[:70]
    candidate = base
    suffix = 1
    while User.query.filter_by(username=candidate).first():
        suffix += 1
        candidate = f'{base}{suffix}'
    return candidate


def resolve_oauth_user(
    google_id: str,
    email: str,
    display_name: str = '',
    avatar: str | None = None,
    email_verified: bool = False,
) -> User:
    """Find, link or create the account for a Google identity.

    Raises:
        OAuthLinkRequired: The email belongs to an existing account and
            linking by email is disabled or the email is unverified.
    """
    user = User.query.filter_by(google_id=google_id).first()
    if user:
        return user

    email = (email or '').strip().lower()
    user = User.query.filter_by(email=email).first()
    if user:
        if not (current_app.config.get('OAUTH_LINK_BY_EMAIL') and email_verified):
            logger.warning(f'OAuth sign-in for existing account {user.id} refused: linking not permitted')
            raise OAuthLinkRequired(email)
        user.google_id = google_id
        user.is_google_auth = True
        if avatar:
            user.avatar = avatar
        db.session.commit()
        logger.info(f'Linked Google identity to existing account {user.id}')
        return user

    user = User(
        username=_unique_username(display_name, email),
        email=email,
        google_id=google_id,
        avatar=avatar,
        is_google_auth=True,
    )
    db.session.add(user)
    db.session.commit()
    logger.info(f'Created account {user.id} from Google sign-in')
    return user
