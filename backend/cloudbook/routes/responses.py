# Overview: JSON envelope helpers shared by every blueprint.

"""
Every endpoint answers with the same envelope:

    {"success": true, "data": ...}            reads
    {"success": true, "message": "..."}       writes
    {"success": false, "message": "...", "error": "..."}   failures

error_response maps the service exceptions to status codes and passes
werkzeug HTTP errors through with their own code. Anything
outside the taxonomy is logged with its traceback, the session is rolled
back and the exception text is returned with a 500.
"""

from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

from ..extensions import db
from ..validation import ConflictError, NotFoundError, UnauthorizedError, ValidationError

STATUS_BY_ERROR = (
    (ValidationError, 400),
    (UnauthorizedError, 401),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def ok(data=None, *, message: str | None = None, status: int = 200, **extra):
    body = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return jsonify(body), status


def fail(message: str, status: int, **extra):
    body = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def error_response(e: Exception, context: str):
    """Convert an exception raised inside a route into a JSON response."""
    for error_type, status in STATUS_BY_ERROR:
        if isinstance(e, error_type):
            db.session.rollback()
            return fail(str(e), status)

    # werkzeug aborts raised while reading the request (e.g. 413 from
    # MAX_CONTENT_LENGTH) keep their own status.
    if isinstance(e, HTTPException) and e.code is not None:
        db.session.rollback()
        return fail(e.description or e.name, e.code)

    db.session.rollback()
    current_app.logger.exception(context)
    return fail("Internal server error", 500, error=str(e))
