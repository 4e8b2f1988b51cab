"""
API error types and their JSON error handlers.

Every failure surfaced to a client falls into one of four buckets:
validation (400), authentication (401), not-found/ownership (404) and
upstream collaborator failure (5xx).  Authentication and not-found
errors intentionally carry the same message regardless of the cause.
"""
from __future__ import annotations

import logging

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base class for errors rendered as ``{"error": message}``."""

    status_code = 500
    default_message = 'Server error'

    def __init__(self, message: str = None, details: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.details = details

    def to_dict(self, include_details: bool = False) -> dict:
        body = {'error': self.message}
        if include_details and self.details:
            body['details'] = self.details
        return body


class ValidationError(APIError):
    status_code = 400
    default_message = 'Invalid request'

    def __init__(self, message: str = None, field: str = None):
        super().__init__(message)
        self.field = field

    def to_dict(self, include_details: bool = False) -> dict:
        body = super().to_dict(include_details)
        if self.field:
            body['field'] = self.field
        return body


class AuthenticationError(APIError):
    status_code = 401
    default_message = 'Invalid token'


class NotFoundError(APIError):
    status_code = 404
    default_message = 'Not found'


class UpstreamError(APIError):
    """An external collaborator (LLM or execution service) failed."""

    status_code = 500
    default_message = 'Upstream service error'


class ExecutionTimeoutError(UpstreamError):
    status_code = 504
    default_message = 'Code execution timed out'


class ExecutionCancelledError(UpstreamError):
    status_code = 499
    default_message = 'Code execution was cancelled'


def register_error_handlers(app):
    """Render APIError and stray HTTP errors as JSON."""

    @app.errorhandler(APIError)
    def handle_api_error(err):
        if err.status_code >= 500:
            logger.error(f'{request.method} {request.path} failed: {err.message} ({err.details})')
        return jsonify(err.to_dict(include_details=app.debug)), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        return jsonify({'error': err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        logger.exception(f'Unhandled error on {request.method} {request.path}')
        body = {'error': 'Server error'}
        if app.debug:
            body['details'] = str(err)
        return jsonify(body), 500
