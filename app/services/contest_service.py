"""
Contest submission evaluation, persistence, leaderboard and stats.

A submission is run against every test case of the generated problem, in
the order the generator produced them.  Outputs are compared as exact
strings after trimming surrounding whitespace.  The per-user, per-problem
row is upserted atomically so concurrent submits cannot lose attempts.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass
from datetime import datetime

from sqlalchemy import case, func, update
from sqlalchemy.exc import IntegrityError

from app.errors import ExecutionCancelledError, UpstreamError, ValidationError
from app.extensions import db
from app.models import CONTEST_LEVELS, ContestSubmission, User
from app.services.execution_service import (
    LANGUAGE_IDS,
    Judge0Client,
    failure_message,
    is_accepted,
)

logger = logging.getLogger(__name__)

LEADERBOARD_LIMIT = 100
REDACTED = '[hidden]'


@dataclass
class CaseResult:
    """Outcome of one test case. Hidden cases never carry expected/actual text."""

    index: int
    passed: bool
    hidden: bool
    message: str
    input: str | None = None
    expected: str | None = None
    actual: str | None = None

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


def _text(value) -> str:
    return '' if value is None else str(value)


def _flag(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes')
    return bool(value)


def normalize_test_cases(raw) -> list[dict]:
    """Coerce test cases to string input/output and a boolean hidden flag.

    Raises:
        ValueError: *raw* is not a list of dicts that carry ``expectedOutput``.
    """
    if not isinstance(raw, list):
        raise ValueError('test cases must be a list')
    cases = []
    for i, tc in enumerate(raw, 1):
        if not isinstance(tc, dict) or 'expectedOutput' not in tc:
            raise ValueError(f'test case {i} is malformed')
        cases.append({
            'input': _text(tc.get('input')),
            'expectedOutput': _text(tc['expectedOutput']),
            'isHidden': _flag(tc.get('isHidden')),
        })
    return cases


def _label(index: int, hidden: bool) -> str:
    return f'Hidden Test Case {index}' if hidden else f'Test Case {index}'


def judge_case(index: int, test_case: dict, result: dict) -> CaseResult:
    """Compare one Judge0 result against the test case's expected output."""
    hidden = _flag(test_case.get('isHidden'))
    expected = _text(test_case.get('expectedOutput')).strip()

    if not is_accepted(result):
        error = failure_message(result)
        if hidden and expected:
            error = error.replace(expected, REDACTED)
        return CaseResult(index, False, hidden, f'{_label(index, hidden)}: Error\n{error}')

    actual = (result.get('stdout') or '').strip()
    passed = actual == expected
    verdict = 'Passed ✓' if passed else 'Failed ✗'
    if hidden:
        return CaseResult(index, passed, True, f'{_label(index, True)}: {verdict}')

    case_input = _text(test_case.get('input'))
    message = (
        f'{_label(index, False)}: {verdict}\n'
        f'Input: {case_input}\nExpected: {expected}\nGot: {actual}'
    )
    return CaseResult(index, passed, False, message, case_input, expected, actual)


def evaluate(
    language: str,
    code: str,
    test_cases: list,
    executor: Judge0Client = None,
    cancel_event: threading.Event | None = None,
):
    """Run *code* against every test case.

    Collaborator failures mark the case failed and evaluation continues;
    only cancellation stops early.  An empty case list is vacuously solved.

    Returns:
        Tuple of (list[CaseResult], solved).
    """
    if language not in LANGUAGE_IDS:
        raise ValidationError(f"Language '{language}' is not supported.", field='language')
    if executor is None:
        with Judge0Client.from_config() as judge0:
            return evaluate(language, code, test_cases, judge0, cancel_event)

    results = []
    for index, test_case in enumerate(test_cases, 1):
        hidden = _flag(test_case.get('isHidden'))
        try:
            result = executor.execute(
                language, code, _text(test_case.get('input')), cancel_event=cancel_event,
            )
        except ExecutionCancelledError:
            raise
        except UpstreamError as e:
            message = f'{_label(index, hidden)}: Error\nExecution failed: {e.message}'
            results.append(CaseResult(index, False, hidden, message))
            continue
        results.append(judge_case(index, test_case, result))

    solved = all(r.passed for r in results)
    return results, solved


class ContestService:
    """Persistence and aggregation for contest submissions."""

    @staticmethod
    def _apply_resubmission(user_id, title, language, code, solved, now) -> int:
        values = {
            'code': code,
            'language': language,
            'attempts': ContestSubmission.attempts + 1,
            'last_attempted_at': now,
        }
        if solved:
            # solved_at is stamped on the first solve only
            values['solved'] = True
            values['solved_at'] = func.coalesce(ContestSubmission.solved_at, now)
        stmt = (
            update(ContestSubmission)
            .where(
                ContestSubmission.user_id == user_id,
                ContestSubmission.problem_title == title,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return db.session.execute(stmt).rowcount

    @staticmethod
    def record_submission(
        user_id: int, problem: dict, language: str, code: str, solved: bool,
    ) -> ContestSubmission:
        """Upsert the (user, problem title) row for a new attempt."""
        title = problem['title']
        now = datetime.utcnow()

        if ContestService._apply_resubmission(user_id, title, language, code, solved, now):
            db.session.commit()
        else:
            submission = ContestSubmission(
                user_id=user_id,
                problem_title=title,
                problem_description=problem.get('description'),
                difficulty=problem.get('difficulty'),
                topic=problem.get('topic'),
                language=language,
                code=code,
                solved=solved,
                attempts=1,
                last_attempted_at=now,
                solved_at=now if solved else None,
            )
            submission.test_cases = problem.get('testCases') or []
            db.session.add(submission)
            try:
                db.session.commit()
            except IntegrityError:
                # A concurrent first submit won the insert
                db.session.rollback()
                ContestService._apply_resubmission(user_id, title, language, code, solved, now)
                db.session.commit()

        return ContestService.get_submission(user_id, title)

    @staticmethod
    def submit(
        user_id: int, problem: dict, language: str, code: str,
        executor: Judge0Client = None,
    ) -> dict:
        """Evaluate a submission and persist the outcome."""
        if not isinstance(problem, dict) or not str(problem.get('title') or '').strip():
            raise ValidationError('Problem title is required', field='problem.title')
        if not code:
            raise ValidationError('Code is required', field='code')
        try:
            test_cases = normalize_test_cases(problem.get('testCases') or [])
        except ValueError as e:
            raise ValidationError(f'Invalid testCases: {e}', field='problem.testCases')

        results, solved = evaluate(language, code, test_cases, executor=executor)
        submission = ContestService.record_submission(
            user_id, {**problem, 'testCases': test_cases}, language, code, solved,
        )
        logger.info(
            f'User {user_id} submitted {problem["title"]!r}: '
            f'{sum(r.passed for r in results)}/{len(results)} passed, '
            f'attempt {submission.attempts}'
        )
        return {
            'solved': solved,
            'results': [r.to_dict() for r in results],
            'submission': submission.to_dict(),
        }

    @staticmethod
    def get_submission(user_id: int, problem_title: str) -> ContestSubmission | None:
        return ContestSubmission.query.filter_by(
            user_id=user_id, problem_title=problem_title,
        ).first()

    @staticmethod
    def list_submissions(user_id: int) -> list:
        return (
            ContestSubmission.query.filter_by(user_id=user_id)
            .order_by(ContestSubmission.last_attempted_at.desc())
            .all()
        )

    @staticmethod
    def get_leaderboard(difficulty: str = None) -> list:
        """Top users by solved count, then success rate, then latest solve.

        Users without a solved problem are left out.  *difficulty* is
        ignored unless it is a known contest level.
        """
        total_solved = func.sum(case((ContestSubmission.solved.is_(True), 1), else_=0))
        grouped = db.session.query(
            ContestSubmission.user_id.label('user_id'),
            func.count(ContestSubmission.id).label('total_attempted'),
            total_solved.label('total_solved'),
            func.max(ContestSubmission.solved_at).label('last_solved'),
        )
        if difficulty in CONTEST_LEVELS:
            grouped = grouped.filter(ContestSubmission.difficulty == difficulty)
        grouped = (
            grouped.group_by(ContestSubmission.user_id)
            .having(total_solved > 0)
            .subquery()
        )

        success_rate = grouped.c.total_solved * 100.0 / grouped.c.total_attempted
        rows = (
            db.session.query(
                User.id, User.username, User.email,
                grouped.c.total_attempted, grouped.c.total_solved,
                success_rate.label('success_rate'), grouped.c.last_solved,
            )
            .join(grouped, grouped.c.user_id == User.id)
            .order_by(
                grouped.c.total_solved.desc(),
                success_rate.desc(),
                grouped.c.last_solved.desc(),
            )
            .limit(LEADERBOARD_LIMIT)
            .all()
        )
        return [
            {
                'userId': r.id,
                'username': r.username,
                'email': r.email,
                'totalAttempted': r.total_attempted,
                'totalSolved': int(r.total_solved),
                'successRate': round(float(r.success_rate), 2),
                'lastSolved': r.last_solved.isoformat() if r.last_solved else None,
            }
            for r in rows
        ]

    @staticmethod
    def get_user_stats(user_id: int) -> dict:
        by_difficulty = {level: {'attempted': 0, 'solved': 0} for level in CONTEST_LEVELS}
        total_attempted = 0
        total_solved = 0
        for difficulty, solved in (
            db.session.query(ContestSubmission.difficulty, ContestSubmission.solved)
            .filter(ContestSubmission.user_id == user_id)
        ):
            total_attempted += 1
            total_solved += 1 if solved else 0
            bucket = by_difficulty.get(difficulty)
            if bucket is not None:
                bucket['attempted'] += 1
                if solved:
                    bucket['solved'] += 1
        return {
            'totalAttempted': total_attempted,
            'totalSolved': total_solved,
            'byDifficulty': by_difficulty,
        }
