from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from app.services.chat_service import ChatService

chat_bp = Blueprint('chat', __name__, url_prefix='/api/chats')


@chat_bp.route('', methods=['GET'])
@login_required
def list_chats():
    chats = ChatService.list_chats(current_user.id)
    return jsonify([c.to_dict() for c in chats])


@chat_bp.route('', methods=['POST'])
@login_required
def create_chat():
    data = request.get_json(silent=True) or {}
    chat = ChatService.create_chat(current_user.id, data.get('title'))
    return jsonify(chat.to_dict()), 201


@chat_bp.route('/<int:chat_id>', methods=['GET'])
@login_required
def get_chat(chat_id):
    return jsonify(ChatService.get_chat(current_user.id, chat_id).to_dict())


@chat_bp.route('/<int:chat_id>', methods=['PUT'])
@login_required
def append_message(chat_id):
    data = request.get_json(silent=True) or {}
    chat = ChatService.append_message(
        current_user.id, chat_id, data.get('role'), data.get('content'),
    )
    return jsonify(chat.to_dict())


@chat_bp.route('/<int:chat_id>/title', methods=['PUT'])
@login_required
def rename_chat(chat_id):
    data = request.get_json(silent=True) or {}
    chat = ChatService.rename_chat(current_user.id, chat_id, data.get('title'))
    return jsonify(chat.to_dict())


@chat_bp.route('/<int:chat_id>', methods=['DELETE'])
@login_required
def delete_chat(chat_id):
    ChatService.delete_chat(current_user.id, chat_id)
    return jsonify({'message': 'Chat deleted successfully'})


@chat_bp.route('/reply', methods=['POST'])
@chat_bp.route('/<int:chat_id>/reply', methods=['POST'])
@login_required
def reply(chat_id=None):
    """Send a user message and store the assistant's answer."""
    data = request.get_json(silent=True) or {}
    chat, reply_text = ChatService.reply(current_user.id, data.get('content'), chat_id)
    return jsonify({'chat': chat.to_dict(), 'reply': reply_text})
