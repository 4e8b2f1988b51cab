"""Tests for contest problem generation and reply parsing."""

import json
from unittest.mock import MagicMock, patch

import pytest

from app.errors import UpstreamError, ValidationError
from app.extensions import db as _db
from app.models import ContestSubmission
from app.services.ai_service import AIService
from app.services.problem_generator import (
    GENERATION_FAILED,
    ProblemGenerator,
    extract_json_text,
    parse_problem,
    strip_markdown,
)

PROBLEM = {
    'title': 'Reverse Words',
    'description': '**Reverse** the *order* of words in `s`.\n## Input\nOne line.',
    'testCases': [
        {'input': 'a b', 'expectedOutput': 'b a', 'isHidden': False},
        {'input': 'x y z', 'expectedOutput': 'z y x', 'isHidden': True},
    ],
    'starterCode': {'python': '# Read input\n'},
}


class TestExtractJson:
    def test_json_fence(self):
        text = 'Here you go:\n```json\n{"a": 1}\n```\nEnjoy'
        assert json.loads(extract_json_text(text)) == {'a': 1}

    def test_bare_fence(self):
        assert json.loads(extract_json_text('```\n{"a": 2}\n```')) == {'a': 2}

    def test_no_fence(self):
        assert extract_json_text('{"a": 3}') == '{"a": 3}'


class TestStripMarkdown:
    def test_removes_common_markup(self):
        assert strip_markdown('**bold** and *it* and `code`') == 'bold and it and code'

    def test_removes_headers(self):
        assert strip_markdown('### Input\nnumbers') == 'Input\nnumbers'


class TestParseProblem:
    def test_parses_and_cleans(self):
        problem = parse_problem(f'```json\n{json.dumps(PROBLEM)}\n```', 'Beginner', 'Strings')
        assert problem['title'] == 'Reverse Words'
        assert problem['description'] == 'Reverse the order of words in s.\nInput\nOne line.'
        assert problem['difficulty'] == 'Beginner'
        assert problem['topic'] == 'Strings'
        assert problem['testCases'][1] == {'input': 'x y z', 'expectedOutput': 'z y x', 'isHidden': True}
        assert problem['starterCode'] == {'python': '# Read input\n'}

    def test_keeps_model_difficulty_and_topic(self):
        data = dict(PROBLEM, difficulty='Expert', topic='Arrays')
        problem = parse_problem(json.dumps(data), 'Beginner', 'Strings')
        assert problem['difficulty'] == 'Expert'
        assert problem['topic'] == 'Arrays'

    def test_non_string_outputs_become_strings(self):
        data = dict(PROBLEM, testCases=[{'input': 4, 'expectedOutput': 16}])
        case = parse_problem(json.dumps(data), 'Beginner', 'Math')['testCases'][0]
        assert case == {'input': '4', 'expectedOutput': '16', 'isHidden': False}

    def test_string_hidden_flags(self):
        data = dict(PROBLEM, testCases=[
            {'input': '1', 'expectedOutput': '1', 'isHidden': 'false'},
            {'input': '2', 'expectedOutput': '2', 'isHidden': 'true'},
        ])
        cases = parse_problem(json.dumps(data), 'Beginner', 'Math')['testCases']
        assert [c['isHidden'] for c in cases] == [False, True]

    def test_invalid_json(self):
        with pytest.raises(UpstreamError) as exc:
            parse_problem('Sorry, I cannot help with that.', 'Beginner', 'Strings')
        assert exc.value.message == GENERATION_FAILED

    def test_missing_title(self):
        data = dict(PROBLEM, title='')
        with pytest.raises(UpstreamError):
            parse_problem(json.dumps(data), 'Beginner', 'Strings')

    def test_empty_test_cases_rejected(self):
        data = dict(PROBLEM, testCases=[])
        with pytest.raises(UpstreamError):
            parse_problem(json.dumps(data), 'Beginner', 'Strings')

    def test_malformed_test_case_rejected(self):
        data = dict(PROBLEM, testCases=[{'input': '1'}])
        with pytest.raises(UpstreamError):
            parse_problem(json.dumps(data), 'Beginner', 'Strings')


class TestProblemGenerator:
    def test_generate_excludes_attempted_titles(self, db, user_id):
        for title, topic in (('Old One', 'Strings'), ('Old Two', 'Strings'), ('Graph Walk', 'Graphs')):
            _db.session.add(ContestSubmission(user_id=user_id, problem_title=title,
                                              difficulty='Beginner', topic=topic))
        _db.session.commit()

        ai = MagicMock()
        ai.complete.return_value = json.dumps(PROBLEM)
        problem = ProblemGenerator(ai=ai).generate(user_id, 'Beginner', 'Strings')

        assert problem['title'] == 'Reverse Words'
        prompt = ai.complete.call_args.args[0][0]['content']
        assert 'Old One' in prompt and 'Old Two' in prompt
        assert 'Graph Walk' not in prompt
        assert 'Beginner level DSA problem on the topic: Strings' in prompt

    def test_generate_without_history_has_no_exclusion(self, db, user_id):
        ai = MagicMock()
        ai.complete.return_value = json.dumps(PROBLEM)
        ProblemGenerator(ai=ai).generate(user_id, 'Expert', 'Trees')
        prompt = ai.complete.call_args.args[0][0]['content']
        assert 'already attempted' not in prompt

    def test_rejects_unknown_difficulty(self, db, user_id):
        ai = MagicMock()
        with pytest.raises(ValidationError):
            ProblemGenerator(ai=ai).generate(user_id, 'Legendary', 'Trees')
        ai.complete.assert_not_called()

    def test_rejects_empty_topic(self, db, user_id):
        with pytest.raises(ValidationError) as exc:
            ProblemGenerator(ai=MagicMock()).generate(user_id, 'Beginner', '  ')
        assert exc.value.message == 'Please select or enter a topic'


class TestGenerateEndpoint:
    def test_generate_uses_profile_level(self, client, db, make_user):
        from tests.conftest import headers_for

        uid = make_user(username='lvl', contest_level='Intermediate')
        with patch.object(AIService, 'complete', return_value=json.dumps(PROBLEM)) as mock:
            resp = client.post('/api/contest/generate', json={'topic': 'Strings'},
                               headers=headers_for(uid))
        assert resp.status_code == 200
        body = resp.get_json()
        assert body['problem']['difficulty'] == 'Intermediate'
        assert body['previousAttempt'] is None
        assert 'Intermediate level' in mock.call_args.args[0][0]['content']

    def test_generate_reports_previous_attempt(self, client, db, user_id, auth_headers):
        _db.session.add(ContestSubmission(user_id=user_id, problem_title='Reverse Words',
                                          difficulty='Beginner', topic='Strings', attempts=2))
        _db.session.commit()
        with patch.object(AIService, 'complete', return_value=json.dumps(PROBLEM)):
            resp = client.post('/api/contest/generate',
                               json={'difficulty': 'Beginner', 'topic': 'Strings'},
                               headers=auth_headers)
        assert resp.get_json()['previousAttempt']['attempts'] == 2

    def test_generate_llm_failure(self, client, auth_headers):
        with patch.object(AIService, 'complete', return_value='not json'):
            resp = client.post('/api/contest/generate',
                               json={'difficulty': 'Beginner', 'topic': 'Strings'},
                               headers=auth_headers)
        assert resp.status_code == 500
        assert resp.get_json()['error'] == GENERATION_FAILED
