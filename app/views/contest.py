from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from app.errors import UpstreamError, ValidationError
from app.models import CONTEST_LEVELS
from app.services.contest_service import ContestService
from app.services.execution_service import Judge0Client, failure_message, is_accepted
from app.services.problem_generator import ProblemGenerator

contest_bp = Blueprint('contest', __name__, url_prefix='/api/contest')


@contest_bp.route('/generate', methods=['POST'])
@login_required
def generate_problem():
    data = request.get_json(silent=True) or {}
    difficulty = data.get('difficulty') or current_user.contest_level
    problem = ProblemGenerator().generate(current_user.id, difficulty, data.get('topic'))

    previous = ContestService.get_submission(current_user.id, problem['title'])
    return jsonify({
        'success': True,
        'problem': problem,
        'previousAttempt': previous.to_dict() if previous else None,
    })


@contest_bp.route('/run', methods=['POST'])
@login_required
def run_code():
    """Run code once against custom input, outside of any submission."""
    data = request.get_json(silent=True) or {}
    language, code = data.get('language'), data.get('code')
    if not language or not code:
        raise ValidationError('Language and code are required.')

    try:
        with Judge0Client.from_config() as judge0:
            result = judge0.execute(language, code, data.get('stdin') or '')
    except UpstreamError as e:
        return jsonify({'success': False, 'error': f'Execution failed: {e.message}'})

    if is_accepted(result):
        return jsonify({'success': True, 'output': (result.get('stdout') or '').strip()})
    return jsonify({'success': False, 'error': failure_message(result)})


@contest_bp.route('/submit', methods=['POST'])
@login_required
def submit():
    data = request.get_json(silent=True) or {}
    language = data.get('language')
    if not language:
        raise ValidationError('Language is required', field='language')
    outcome = ContestService.submit(
        current_user.id, data.get('problem'), language, data.get('code'),
    )
    return jsonify({'success': True, **outcome})


@contest_bp.route('/submissions')
@login_required
def submissions():
    items = ContestService.list_submissions(current_user.id)
    return jsonify({'success': True, 'submissions': [s.to_dict() for s in items]})


@contest_bp.route('/submission/<path:problem_title>')
@login_required
def submission(problem_title):
    sub = ContestService.get_submission(current_user.id, problem_title)
    return jsonify({'success': True, 'submission': sub.to_dict() if sub else None})


@contest_bp.route('/leaderboard')
def leaderboard():
    difficulty = request.args.get('difficulty')
    rows = ContestService.get_leaderboard(difficulty)
    return jsonify({
        'success': True,
        'leaderboard': rows,
        'difficulty': difficulty if difficulty in CONTEST_LEVELS else 'All',
    })


@contest_bp.route('/stats')
@login_required
def stats():
    return jsonify({'success': True, 'stats': ContestService.get_user_stats(current_user.id)})
