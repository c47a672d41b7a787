from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException


class CMSError(Exception):
    """Base class for errors surfaced to API callers as `{"error": message}`."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class Unauthenticated(CMSError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(CMSError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(CMSError):
    status_code = 404
    default_message = "Not found"


class Conflict(CMSError):
    status_code = 409
    default_message = "Conflict"


class ValidationError(CMSError):
    status_code = 400
    default_message = "Invalid request"


class ExternalDependencyError(CMSError):
    status_code = 502
    default_message = "External service unavailable"


def _error_response(message, status_code):
    response = jsonify({"error": message})
    response.status_code = status_code
    return response


def register_error_handlers(app):
    @app.errorhandler(CMSError)
    def handle_cms_error(error):
        if error.status_code >= 500:
            current_app.logger.error("%s: %s", type(error).__name__, error.message)
        return _error_response(error.message, error.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return _error_response(error.description or error.name, error.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        current_app.logger.exception("Unhandled error: %s", error)
        return _error_response("Internal server error", 500)
