from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import jsonify

from ..core.exceptions import NotFoundError, ValidationError
from .serialization import to_jsonable

logger = logging.getLogger(__name__)


def ok(data, status: int = 200):
    return jsonify({"success": True, "data": to_jsonable(data)}), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_view(view):
    """Translate domain exceptions raised by a view into JSON error responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except NotFoundError as e:
            return fail(str(e), 404)
        except ValidationError as e:
            return fail(str(e), 400)
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return fail("Internal server error", 500)

    return wrapper


def int_arg(value: Optional[str], field_name: str, default: Optional[int] = None) -> Optional[int]:
    """Parse an optional integer query argument."""
    if value is None or not str(value).strip():
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be an integer")
