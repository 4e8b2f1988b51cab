import json
import logging
from datetime import datetime

from app.extensions import db

logger = logging.getLogger(__name__)


class ContestSubmission(db.Model):
    """Best-known state of one user's work on one generated problem.

    There is at most one row per (user, problem title); resubmitting
    updates the row instead of adding another.
    """

    __tablename__ = 'contest_submission'
    __table_args__ = (
        db.UniqueConstraint(
            'user_id', 'problem_title',
            name='uq_contest_submission_user_title',
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey('user.id'), nullable=False, index=True
    )
    problem_title = db.Column(db.String(300), nullable=False)
    problem_description = db.Column(db.Text, nullable=True)
    difficulty = db.Column(db.String(20), nullable=True, index=True)
    topic = db.Column(db.String(100), nullable=True)
    language = db.Column(db.String(20), nullable=True)
    code = db.Column(db.Text, nullable=True)
    solved = db.Column(db.Boolean, nullable=False, default=False)
    attempts = db.Column(db.Integer, nullable=False, default=1)
    last_attempted_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow
    )
    solved_at = db.Column(db.DateTime, nullable=True)
    test_cases_json = db.Column(db.Text, nullable=True)  # JSON: [{input, expectedOutput, isHidden}]
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    user = db.relationship('User', back_populates='contest_submissions')

    @property
    def test_cases(self) -> list:
        """Parse test_cases_json into a list of dicts."""
        if self.test_cases_json:
            try:
                return json.loads(self.test_cases_json)
            except (json.JSONDecodeError, TypeError):
                logger.warning(f'Bad test_cases_json on submission {self.id}')
        return []

    @test_cases.setter
    def test_cases(self, value):
        self.test_cases_json = json.dumps(value or [], ensure_ascii=False)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'problemTitle': self.problem_title,
            'problemDescription': self.problem_description,
            'difficulty': self.difficulty,
            'topic': self.topic,
            'language': self.language,
            'code': self.code,
            'solved': self.solved,
            'attempts': self.attempts,
            'lastAttemptedAt': self.last_attempted_at.isoformat(),
            'solvedAt': self.solved_at.isoformat() if self.solved_at else None,
            'testCases': self.test_cases,
        }

    def __repr__(self) -> str:
        return (
            f'<ContestSubmission user={self.user_id} '
            f'{self.problem_title!r} solved={self.solved} attempts={self.attempts}>'
        )
