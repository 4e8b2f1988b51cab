import logging
import threading
from datetime import datetime

from flask import current_app

from app.errors import NotFoundError, ValidationError
from app.extensions import db
from app.models import Chat, ChatMessage, DEFAULT_CHAT_TITLE, MESSAGE_ROLES
from app.prompts.chat_title import build_chat_title_prompt
from app.services.ai_service import AIService

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 80


class ChatService:
    """Ownership-scoped operations on chat transcripts."""

    @staticmethod
    def list_chats(user_id: int) -> list:
        return (
            Chat.query.filter_by(user_id=user_id)
            .order_by(Chat.last_updated.desc(), Chat.id.desc())
            .all()
        )

    @staticmethod
    def create_chat(user_id: int, title: str = None) -> Chat:
        chat = Chat(user_id=user_id, title=(title or '').strip() or DEFAULT_CHAT_TITLE)
        db.session.add(chat)
        db.session.commit()
        return chat

    @staticmethod
    def get_chat(user_id: int, chat_id: int) -> Chat:
        """Return the chat, or raise NotFoundError if missing or not owned."""
        chat = Chat.query.filter_by(id=chat_id, user_id=user_id).first()
        if chat is None:
            raise NotFoundError('Chat not found')
        return chat

    @staticmethod
    def append_message(user_id: int, chat_id: int, role: str, content: str) -> Chat:
        if not role or not content:
            raise ValidationError('Role and content are required')
        if role not in MESSAGE_ROLES:
            raise ValidationError(f"Role must be one of {', '.join(MESSAGE_ROLES)}", field='role')

        chat = ChatService.get_chat(user_id, chat_id)
        now = datetime.utcnow()
        chat.messages.append(ChatMessage(role=role, content=content, timestamp=now))
        chat.last_updated = now
        db.session.commit()
        return chat

    @staticmethod
    def rename_chat(user_id: int, chat_id: int, title: str) -> Chat:
        title = (title or '').strip()
        if not title:
            raise ValidationError('Title is required', field='title')
        chat = ChatService.get_chat(user_id, chat_id)
        chat.title = title[:200]
        db.session.commit()
        return chat

    @staticmethod
    def delete_chat(user_id: int, chat_id: int) -> None:
        chat = ChatService.get_chat(user_id, chat_id)
        db.session.delete(chat)
        db.session.commit()

    @staticmethod
    def reply(user_id: int, content: str, chat_id: int = None):
        """Append a user message, ask the LLM, append its answer.

        Creates the chat when *chat_id* is None.  The user message stays
        persisted even if the LLM call fails.

        Returns:
            Tuple of (chat, reply_text).
        """
        content = (content or '').strip()
        if not content:
            raise ValidationError('Content is required', field='content')

        if chat_id is None:
            chat = ChatService.create_chat(user_id)
            chat_id = chat.id

        chat = ChatService.append_message(user_id, chat_id, 'user', content)
        history = [{'role': m.role, 'content': m.content} for m in chat.messages]

        reply_text = AIService().complete(history)
        chat = ChatService.append_message(user_id, chat_id, 'assistant', reply_text)

        assistant_count = sum(1 for m in chat.messages if m.role == 'assistant')
        if assistant_count == 1 and chat.has_placeholder_title:
            ChatService.schedule_title(chat.id)
        return chat, reply_text

    @staticmethod
    def schedule_title(chat_id: int) -> None:
        """Derive a title for the chat, on a background thread when configured."""
        app = current_app._get_current_object()

        def _run():
            with app.app_context():
                ChatService.generate_title(chat_id)

        if app.config.get('CHAT_TITLE_ASYNC'):
            threading.Thread(target=_run, daemon=True).start()
        else:
            ChatService.generate_title(chat_id)

    @staticmethod
    def generate_title(chat_id: int) -> bool:
        """Replace the placeholder title with an LLM summary.

        Best effort: any failure is logged and leaves the placeholder.
        Returns True if the title was changed.
        """
        try:
            chat = db.session.get(Chat, chat_id)
            if chat is None or not chat.has_placeholder_title:
                return False
            messages = [{'role': m.role, 'content': m.content} for m in chat.messages]
            title = AIService().complete(
                build_chat_title_prompt(messages), max_tokens=30, temperature=0.3,
            )
            title = title.strip().strip('"\'').strip()
            if not title:
                return False
            chat.title = title[:MAX_TITLE_LENGTH]
            db.session.commit()
            logger.info(f'Titled chat {chat_id}: {chat.title!r}')
            return True
        except Exception as e:
            db.session.rollback()
            logger.warning(f'Chat title generation failed for {chat_id}: {e}')
            return False
