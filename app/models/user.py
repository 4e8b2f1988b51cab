from __future__ import annotations

from datetime import datetime

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from app.extensions import db

CONTEST_LEVELS = ('Beginner', 'Intermediate', 'Expert')


class User(UserMixin, db.Model):
    """An account holding chats and contest submissions.

    Password-only, OAuth-only and linked accounts all live here; an
    OAuth-only account has no ``password_hash``.
    """

    __tablename__ = 'user'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=True)
    google_id = db.Column(db.String(100), unique=True, nullable=True, index=True)
    avatar = db.Column(db.String(500), nullable=True)
    is_google_auth = db.Column(db.Boolean, nullable=False, default=False)
    contest_level = db.Column(db.String(20), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    chats = db.relationship(
        'Chat', back_populates='user', cascade='all, delete-orphan', lazy='dynamic'
    )
    contest_submissions = db.relationship(
        'ContestSubmission', back_populates='user',
        cascade='all, delete-orphan', lazy='dynamic',
    )

    def set_password(self, password: str) -> None:
        """Hash and store the user's password."""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Verify a plaintext password against the stored hash."""
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'avatar': self.avatar,
            'contestLevel': self.contest_level,
        }

    def __repr__(self) -> str:
        return f'<User {self.username!r}>'
