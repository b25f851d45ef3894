from __future__ import annotations

import logging

from flask import jsonify, request

from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    ConsistencyError,
    DomainError,
    TransportError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (ConflictError, 409),
    (ConsistencyError, 409),
    (TransportError, 503),
)


def json_body() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("request body must be a JSON object")
    return payload


def ok(**payload):
    return jsonify({"success": True, **payload}), 200


def error_response(e: DomainError):
    """Map a domain error to a JSON failure with the matching HTTP status."""
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(e, error_type):
            break
    else:
        status = 500

    if isinstance(e, TransportError):
        logger.error("store failure: %s", e)

    body = {"success": False, "message": str(e)}
    if isinstance(e, ConsistencyError):
        body["entry_ids"] = list(e.entry_ids)
    return jsonify(body), status
