from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    IngestionFailure,
    MissingColumnsError,
    NotFoundError,
    QuotaExceeded,
    StoreUnavailable,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (QuotaExceeded, 429),
    (StoreUnavailable, 503),
)


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS:
        if isinstance(error, cls):
            return status
    return 500


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = status_for(e)
        if isinstance(e, MissingColumnsError):
            return jsonify({"error": str(e), "required": e.required, "found": e.found}), status
        if status >= 500 or isinstance(e, IngestionFailure):
            logger.error("Request failed: %s", e)
            return jsonify({"error": "internal error"}), 500
        if status in (429, 503):
            logger.warning("Store temporarily unavailable: %s", e)
            return jsonify({"error": "service temporarily unavailable, please retry"}), status
        return jsonify({"error": str(e)}), status

    @app.errorhandler(413)
    def handle_too_large(_e):
        return jsonify({"error": "file too large"}), 413
