from __future__ import annotations

import math
from typing import Any, Dict, Iterable
from flask import request

from zyvero.app.common.errors import abort_json, validation_error


def get_json(required: bool = True) -> Dict[str, Any]:
    if not request.data and not required:
        return {}
    if not request.is_json:
        abort_json(400, "invalid_json", "Request must be application/json")
    data = request.get_json(silent=True)
    if data is None or not isinstance(data, dict):
        abort_json(400, "invalid_json", "Malformed JSON body")
    return data


def require_fields(data: Dict[str, Any], fields: Iterable[str]) -> None:
    missing = [f for f in fields if f not in data]
    if missing:
        validation_error("Missing required fields", missing=missing)


def is_price(value: Any) -> bool:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def is_quantity(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def parse_item_id(raw: str) -> int | str:
    """Path segments made only of digits address integer product ids."""
    return int(raw) if raw.isdigit() else raw
