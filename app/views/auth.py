import logging
from urllib.parse import urlencode

from authlib.integrations.base_client.errors import OAuthError
from flask import Blueprint, current_app, jsonify, redirect, request, url_for
from flask_login import current_user, login_required
from sqlalchemy.exc import IntegrityError

from app.auth.oauth import OAuthLinkRequired, google_enabled, resolve_oauth_user
from app.auth.tokens import issue_token
from app.errors import AuthenticationError, NotFoundError, ValidationError
from app.extensions import db, oauth
from app.models import CONTEST_LEVELS, User

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


def _token_response(user, status=200):
    return jsonify({
        'success': True,
        'token': issue_token(user.id),
        'user': user.to_dict(),
    }), status


@auth_bp.route('/signup', methods=['POST'])
def signup():
    data = request.get_json(silent=True) or {}
    username = (data.get('username') or '').strip()
    email = (data.get('email') or '').strip().lower()
    password = data.get('password') or ''

    if not username or not email or not password:
        raise ValidationError('All fields are required')

    existing = User.query.filter(
        (User.email == email) | (User.username == username)
    ).first()
    if existing:
        if existing.email == email:
            raise ValidationError('Email already registered', field='email')
        raise ValidationError('Username already taken', field='username')

    user = User(username=username, email=email)
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ValidationError('A user with this email or username already exists')

    logger.info(f'Registered user {user.id}')
    return _token_response(user, 201)


@auth_bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get('email') or '').strip().lower()
    password = data.get('password') or ''

    if not email or not password:
        raise ValidationError('Email and password are required')

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        raise AuthenticationError('Invalid email or password')
    return _token_response(user)


@auth_bp.route('/me')
@login_required
def me():
    return jsonify({'success': True, 'user': current_user.to_dict()})


@auth_bp.route('/contest-level', methods=['PUT'])
@login_required
def update_contest_level():
    data = request.get_json(silent=True) or {}
    level = data.get('level')
    if level not in CONTEST_LEVELS:
        raise ValidationError(
            f"Level must be one of {', '.join(CONTEST_LEVELS)}", field='level',
        )
    current_user.contest_level = level
    db.session.commit()
    return jsonify({'success': True, 'user': current_user.to_dict()})


@auth_bp.route('/google')
def google_login():
    if not google_enabled():
        raise NotFoundError('Google sign-in is not configured')
    redirect_uri = url_for('auth.google_callback', _external=True)
    return oauth.google.authorize_redirect(redirect_uri)


def _client_redirect(**params):
    base = current_app.config['CLIENT_URL'].rstrip('/')
    return redirect(f'{base}/auth/callback?{urlencode(params)}')


@auth_bp.route('/google/callback')
def google_callback():
    if not google_enabled():
        raise NotFoundError('Google sign-in is not configured')
    try:
        token = oauth.google.authorize_access_token()
        info = token.get('userinfo') or oauth.google.userinfo()
    except OAuthError as e:
        logger.warning(f'Google OAuth callback failed: {e}')
        return _client_redirect(error='oauth_failed')

    if not info.get('sub') or not info.get('email'):
        return _client_redirect(error='oauth_failed')

    try:
        user = resolve_oauth_user(
            google_id=info['sub'],
            email=info['email'],
            display_name=info.get('name', ''),
            avatar=info.get('picture'),
            email_verified=bool(info.get('email_verified')),
        )
    except OAuthLinkRequired:
        return _client_redirect(error='account_exists')

    return _client_redirect(token=issue_token(user.id))
