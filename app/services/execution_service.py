"""
Judge0 code-execution proxy.

Submits (language, source, stdin) to Judge0 and polls the submission at a
fixed interval until it leaves the queued/processing states.  Polling is
bounded by ``JUDGE0_MAX_POLLS`` and can be aborted through a
``threading.Event``.
"""
from __future__ import annotations

import logging
import threading
import time

import requests
from flask import current_app

from app.errors import (
    ExecutionCancelledError,
    ExecutionTimeoutError,
    UpstreamError,
    ValidationError,
)

logger = logging.getLogger(__name__)

LANGUAGE_IDS = {
    'javascript': 93,  # Node.js
    'python': 92,      # Python 3
    'java': 91,        # Java
    'cpp': 54,         # C++ (GCC 9.2.0)
}

STATUS_IN_QUEUE = 1
STATUS_PROCESSING = 2
STATUS_ACCEPTED = 3
PENDING_STATUSES = (STATUS_IN_QUEUE, STATUS_PROCESSING)


def status_id(result: dict) -> int | None:
    return (result.get('status') or {}).get('id')


def is_accepted(result: dict) -> bool:
    """True when Judge0 reports the run finished normally."""
    return status_id(result) == STATUS_ACCEPTED


def failure_message(result: dict) -> str:
    """Best available description of a failed run."""
    return (
        result.get('stderr')
        or result.get('compile_output')
        or (result.get('status') or {}).get('description')
        or 'Execution error'
    )


class Judge0Client:
    """Client for the Judge0 CE submissions API.

    Use it as a context manager so the HTTP session is closed afterwards.

    Args:
        base_url: Judge0 API root.
        api_key: RapidAPI key.
        host: RapidAPI host header value.
        poll_interval: Seconds between status polls.
        max_polls: Status polls allowed before giving up.
        http_timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = '',
        host: str = '',
        poll_interval: float = 1.0,
        max_polls: int = 30,
        http_timeout: float = 15,
    ):
        self.base_url = base_url.rstrip('/')
        self.poll_interval = poll_interval
        self.max_polls = max(1, max_polls)
        self.http_timeout = http_timeout
        self.session = requests.Session()
        self.session.headers.update({'content-type': 'application/json'})
        if api_key:
            self.session.headers['X-RapidAPI-Key'] = api_key
        if host:
            self.session.headers['X-RapidAPI-Host'] = host

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    @classmethod
    def from_config(cls, app=None):
        cfg = (app or current_app).config
        return cls(
            base_url=cfg['JUDGE0_URL'],
            api_key=cfg.get('RAPIDAPI_KEY', ''),
            host=cfg.get('JUDGE0_HOST', ''),
            poll_interval=cfg.get('JUDGE0_POLL_INTERVAL', 1.0),
            max_polls=cfg.get('JUDGE0_MAX_POLLS', 30),
            http_timeout=cfg.get('JUDGE0_HTTP_TIMEOUT', 15),
        )

    def _request(self, method: str, path: str, **kwargs) -> dict:
        try:
            resp = self.session.request(
                method,
                f'{self.base_url}{path}',
                params={'base64_encoded': 'false', 'fields': '*'},
                timeout=self.http_timeout,
                **kwargs,
            )
            resp.raise_for_status()
            return resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f'Judge0 {method} {path} failed: {e}')
            raise UpstreamError(
                'An error occurred while executing the code.', details=str(e),
            )

    def submit(self, language: str, code: str, stdin: str = '') -> str:
        """Create a submission and return its token."""
        language_id = LANGUAGE_IDS.get(language)
        if language_id is None:
            raise ValidationError(
                f"Language '{language}' is not supported.", field='language',
            )
        data = self._request('POST', '/submissions', json={
            'language_id': language_id,
            'source_code': code,
            'stdin': stdin or '',
        })
        token = data.get('token')
        if not token:
            raise UpstreamError('Failed to get submission token.')
        return token

    def wait_for_result(self, token: str, cancel_event: threading.Event | None = None) -> dict:
        """Poll until the submission leaves the pending states.

        Raises:
            ExecutionTimeoutError: Still pending after ``max_polls`` polls.
            ExecutionCancelledError: *cancel_event* was set while waiting.
        """
        for poll in range(1, self.max_polls + 1):
            if cancel_event is not None and cancel_event.is_set():
                raise ExecutionCancelledError()
            result = self._request('GET', f'/submissions/{token}')
            if status_id(result) not in PENDING_STATUSES:
                return result
            if poll == self.max_polls:
                break
            if cancel_event is not None:
                if cancel_event.wait(self.poll_interval):
                    raise ExecutionCancelledError()
            else:
                time.sleep(self.poll_interval)

        logger.warning(f'Judge0 submission {token} still pending after {self.max_polls} polls')
        raise ExecutionTimeoutError()

    def execute(
        self,
        language: str,
        code: str,
        stdin: str = '',
        cancel_event: threading.Event | None = None,
    ) -> dict:
        """Run *code* and return the final Judge0 submission record."""
        token = self.submit(language, code, stdin)
        return self.wait_for_result(token, cancel_event=cancel_event)
