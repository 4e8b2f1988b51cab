"""
LLM-backed contest problem generation.

The model is asked for one strict-JSON problem object.  The reply is
unwrapped from any code fence, parsed once (no repair or retry), checked
for the fields the evaluator needs and lightly cleaned up.
"""
from __future__ import annotations

import json
import logging
import re

from app.errors import UpstreamError, ValidationError
from app.models import CONTEST_LEVELS, ContestSubmission
from app.prompts.problem_generation import build_problem_generation_prompt
from app.services.ai_service import AIService
from app.services.contest_service import normalize_test_cases

logger = logging.getLogger(__name__)

GENERATION_FAILED = 'Failed to generate problem. Please try again.'

_FENCED_JSON_RE = re.compile(r'```json\s*([\s\S]*?)```')
_FENCED_RE = re.compile(r'```\s*([\s\S]*?)```')

# Markdown artifacts stripped from descriptions, applied in order
_MARKDOWN_RULES = [
    (re.compile(r'\*\*(.+?)\*\*'), r'\1'),   # bold
    (re.compile(r'\*(.+?)\*'), r'\1'),       # italic
    (re.compile(r'`(.+?)`'), r'\1'),         # inline code
    (re.compile(r'#{1,6}\s*'), ''),          # headers
]


def extract_json_text(text: str) -> str:
    """Return the body of the first ```json (or bare ```) fence, else *text*."""
    match = _FENCED_JSON_RE.search(text) or _FENCED_RE.search(text)
    return match.group(1) if match else text


def strip_markdown(text: str) -> str:
    for pattern, repl in _MARKDOWN_RULES:
        text = pattern.sub(repl, text)
    return text.strip()


def _checked_test_cases(raw) -> list[dict]:
    if not isinstance(raw, list) or not raw:
        raise UpstreamError(GENERATION_FAILED, details='problem has no test cases')
    try:
        return normalize_test_cases(raw)
    except ValueError as e:
        raise UpstreamError(GENERATION_FAILED, details=str(e))


def parse_problem(text: str, difficulty: str, topic: str) -> dict:
    """Turn the raw LLM reply into a problem dict.

    Raises:
        UpstreamError: The reply is not a usable problem object.
    """
    try:
        data = json.loads(extract_json_text(text))
    except (json.JSONDecodeError, TypeError) as e:
        raise UpstreamError(GENERATION_FAILED, details=f'invalid JSON: {e}')

    if not isinstance(data, dict) or not str(data.get('title') or '').strip():
        raise UpstreamError(GENERATION_FAILED, details='problem has no title')

    starter = data.get('starterCode')
    return {
        'title': str(data['title']).strip(),
        'description': strip_markdown(str(data.get('description') or '')),
        'difficulty': data.get('difficulty') or difficulty,
        'topic': data.get('topic') or topic,
        'testCases': _checked_test_cases(data.get('testCases')),
        'starterCode': starter if isinstance(starter, dict) else {},
    }


class ProblemGenerator:
    """Generates problems a user has not attempted yet.

    Args:
        ai: AIService to use. Defaults to one bound to current_app.
    """

    def __init__(self, ai: AIService = None):
        self.ai = ai or AIService()

    @staticmethod
    def attempted_titles(user_id: int, difficulty: str, topic: str) -> list[str]:
        rows = (
            ContestSubmission.query
            .filter_by(user_id=user_id, difficulty=difficulty, topic=topic)
            .order_by(ContestSubmission.created_at)
            .all()
        )
        return [r.problem_title for r in rows]

    def generate(self, user_id: int, difficulty: str, topic: str) -> dict:
        """Generate a problem for *user_id* at *difficulty* on *topic*."""
        topic = (topic or '').strip()
        if difficulty not in CONTEST_LEVELS:
            raise ValidationError(
                f"Difficulty must be one of {', '.join(CONTEST_LEVELS)}", field='difficulty',
            )
        if not topic:
            raise ValidationError('Please select or enter a topic', field='topic')

        excluded = self.attempted_titles(user_id, difficulty, topic)
        messages = build_problem_generation_prompt(difficulty, topic, excluded)
        text = self.ai.complete(messages, max_tokens=3000, temperature=0.7)
        problem = parse_problem(text, difficulty, topic)
        logger.info(
            f'Generated {difficulty}/{topic} problem {problem["title"]!r} '
            f'with {len(problem["testCases"])} test cases for user {user_id}'
        )
        return problem
