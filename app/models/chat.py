from datetime import datetime

from app.extensions import db

DEFAULT_CHAT_TITLE = 'New Chat'
MESSAGE_ROLES = ('user', 'assistant')


class Chat(db.Model):
    """A persisted conversation owned by one user."""

    __tablename__ = 'chat'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey('user.id'), nullable=False, index=True
    )
    title = db.Column(db.String(200), nullable=False, default=DEFAULT_CHAT_TITLE)
    last_updated = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    user = db.relationship('User', back_populates='chats')
    messages = db.relationship(
        'ChatMessage',
        back_populates='chat',
        cascade='all, delete-orphan',
        order_by='ChatMessage.id',
    )

    @property
    def has_placeholder_title(self) -> bool:
        return self.title == DEFAULT_CHAT_TITLE

    def to_dict(self, include_messages: bool = True) -> dict:
        data = {
            'id': self.id,
            'title': self.title,
            'lastUpdated': self.last_updated.isoformat(),
            'createdAt': self.created_at.isoformat(),
        }
        if include_messages:
            data['messages'] = [m.to_dict() for m in self.messages]
        return data

    def __repr__(self) -> str:
        return f'<Chat {self.id} user={self.user_id} {self.title!r}>'


class ChatMessage(db.Model):
    """One message of a chat transcript; transcript order is insertion order."""

    __tablename__ = 'chat_message'

    id = db.Column(db.Integer, primary_key=True)
    chat_id = db.Column(
        db.Integer, db.ForeignKey('chat.id'), nullable=False, index=True
    )
    role = db.Column(db.String(20), nullable=False)  # user | assistant
    content = db.Column(db.Text, nullable=False)
    timestamp = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    chat = db.relationship('Chat', back_populates='messages')

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'role': self.role,
            'content': self.content,
            'timestamp': self.timestamp.isoformat(),
        }

    def __repr__(self) -> str:
        return f'<ChatMessage {self.id} chat={self.chat_id} role={self.role!r}>'
