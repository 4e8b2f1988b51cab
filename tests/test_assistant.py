"""Tests for the coding-assistant endpoints and app-level wiring."""

from unittest.mock import patch

from app import create_app
from app.config import TestingConfig
from app.services.ai_service import AIService


class TestAssistantEndpoints:
    def test_explain_error(self, client, auth_headers):
        with patch.object(AIService, 'complete', return_value='You forgot a colon.') as mock:
            resp = client.post('/api/assistant/explain-error', json={
                'language': 'python', 'code': 'if x\n  pass', 'error': 'SyntaxError',
            }, headers=auth_headers)
        assert resp.get_json() == {'success': True, 'answer': 'You forgot a colon.'}
        prompt = mock.call_args.args[0][-1]['content']
        assert 'SyntaxError' in prompt and 'if x' in prompt

    def test_explain_error_validation(self, client, auth_headers):
        resp = client.post('/api/assistant/explain-error', json={'language': 'python'},
                           headers=auth_headers)
        assert resp.status_code == 400

    def test_ask_about_selection(self, client, auth_headers):
        with patch.object(AIService, 'complete', return_value='It swaps them.') as mock:
            resp = client.post('/api/assistant/ask', json={
                'language': 'python', 'code': 'a, b = b, a', 'selection': 'a, b = b, a',
                'question': 'What does this do?',
            }, headers=auth_headers)
        assert resp.get_json()['answer'] == 'It swaps them.'
        assert 'What does this do?' in mock.call_args.args[0][-1]['content']

    def test_ask_requires_question(self, client, auth_headers):
        resp = client.post('/api/assistant/ask', json={'language': 'python', 'code': 'x'},
                           headers=auth_headers)
        assert resp.status_code == 400
        assert resp.get_json()['field'] == 'question'

    def test_requires_login(self, client):
        resp = client.post('/api/assistant/ask', json={})
        assert resp.status_code == 401


class TestAppWiring:
    def test_health(self, client):
        body = client.get('/api/health').get_json()
        assert body['status'] == 'ok'

    def test_cors_simple_request(self, client):
        resp = client.get('/api/health', headers={'Origin': 'http://localhost:5173'})
        assert resp.headers['Access-Control-Allow-Origin'] in ('*', 'http://localhost:5173')

    def test_cors_preflight_allows_requested_headers(self, client):
        resp = client.options('/api/chats', headers={
            'Origin': 'http://localhost:5173',
            'Access-Control-Request-Method': 'POST',
            'Access-Control-Request-Headers': 'authorization, content-type, x-requested-with',
        })
        assert resp.status_code == 200
        allowed = resp.headers['Access-Control-Allow-Headers'].lower()
        for header in ('authorization', 'content-type', 'x-requested-with'):
            assert header in allowed
        assert 'POST' in resp.headers['Access-Control-Allow-Methods']

    def test_cors_restricted_origin(self, monkeypatch):
        monkeypatch.setattr(TestingConfig, 'CORS_ORIGIN', 'https://codementor.example')
        client = create_app('testing').test_client()

        allowed = client.get('/api/health', headers={'Origin': 'https://codementor.example'})
        assert allowed.headers['Access-Control-Allow-Origin'] == 'https://codementor.example'

        other = client.get('/api/health', headers={'Origin': 'https://evil.example'})
        assert 'Access-Control-Allow-Origin' not in other.headers

    def test_unknown_route_is_json(self, client):
        resp = client.get('/api/nope')
        assert resp.status_code == 404
        assert 'error' in resp.get_json()
