from .user import User, CONTEST_LEVELS
from .chat import Chat, ChatMessage, DEFAULT_CHAT_TITLE, MESSAGE_ROLES
from .contest_submission import ContestSubmission

__all__ = [
    'User',
    'CONTEST_LEVELS',
    'Chat',
    'ChatMessage',
    'DEFAULT_CHAT_TITLE',
    'MESSAGE_ROLES',
    'ContestSubmission',
]
