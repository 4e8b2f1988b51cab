from flask import Blueprint, jsonify, request
from flask_login import login_required

from app.errors import ValidationError
from app.services.assistant_service import AssistantService
from app.services.execution_service import Judge0Client

execute_bp = Blueprint('execute', __name__)


@execute_bp.route('/execute', methods=['POST'])
def execute():
    """Relay code to Judge0 and return its final record verbatim."""
    data = request.get_json(silent=True) or {}
    language, code = data.get('language'), data.get('code')
    if not language or not code:
        raise ValidationError('Language and code are required.')
    with Judge0Client.from_config() as judge0:
        result = judge0.execute(language, code, data.get('stdin') or '')
    return jsonify(result)


@execute_bp.route('/api/assistant/explain-error', methods=['POST'])
@login_required
def explain_error():
    data = request.get_json(silent=True) or {}
    answer = AssistantService().explain_error(
        data.get('language'), data.get('code'), data.get('error'),
    )
    return jsonify({'success': True, 'answer': answer})


@execute_bp.route('/api/assistant/ask', methods=['POST'])
@login_required
def ask():
    data = request.get_json(silent=True) or {}
    answer = AssistantService().ask_about_selection(
        data.get('language'), data.get('code'), data.get('selection'), data.get('question'),
    )
    return jsonify({'success': True, 'answer': answer})
