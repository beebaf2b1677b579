from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from flask import g, jsonify


@dataclass
class ApiError(Exception):
    """Raised by handlers; rendered as {"error": {...}} by the app factory."""

    status_code: int
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "request_id": g.get("request_id"),
            }
        }

    def response(self):
        return jsonify(self.to_dict()), self.status_code


def abort_json(status_code: int, code: str, message: str, details: Dict[str, Any] | None = None) -> None:
    raise ApiError(status_code, code, message, details or {})


def validation_error(message: str, **details: Any) -> None:
    raise ApiError(400, "validation_error", message, details)


def upstream_error(service: str, reason: Exception) -> None:
    raise ApiError(502, "upstream_error", f"{service} unavailable", {"reason": str(reason)})
