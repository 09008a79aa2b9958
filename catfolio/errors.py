from __future__ import annotations

import logging

from flask import Flask, jsonify
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class CatfolioError(Exception):
    code = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"error": {"code": self.code, "message": self.message}}


class NotFound(CatfolioError):
    code = "not_found"
    status_code = 404

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity.capitalize()} with id {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id

    def to_response(self) -> dict:
        body = super().to_response()
        body["error"].update(entity=self.entity, id=self.entity_id)
        return body


class ConstraintViolation(CatfolioError):
    code = "constraint_violation"
    status_code = 409

    def __init__(self, field: str, value):
        super().__init__(f"{field} {value!r} is already taken")
        self.field = field
        self.value = value

    def to_response(self) -> dict:
        body = super().to_response()
        body["error"]["field"] = self.field
        return body


class ValidationError(CatfolioError):
    code = "validation_error"
    status_code = 400

    def __init__(self, errors: dict[str, list[str]]):
        super().__init__("Invalid input")
        self.errors = errors

    def to_response(self) -> dict:
        body = super().to_response()
        body["error"]["fields"] = self.errors
        return body


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(CatfolioError)
    def _catfolio_error(exc: CatfolioError):
        logger.warning("%s: %s", type(exc).__name__, exc.message)
        return jsonify(exc.to_response()), exc.status_code

    @app.errorhandler(IntegrityError)
    def _integrity_error(exc: IntegrityError):
        logger.warning("Integrity error: %s", exc.orig)
        body = {"error": {"code": "constraint_violation", "message": "Conflicting data"}}
        return jsonify(body), 409

    @app.errorhandler(404)
    def _not_found(_exc):
        return jsonify({"error": {"code": "not_found", "message": "Resource not found"}}), 404

    @app.errorhandler(405)
    def _method_not_allowed(_exc):
        body = {"error": {"code": "method_not_allowed", "message": "Method not allowed"}}
        return jsonify(body), 405
