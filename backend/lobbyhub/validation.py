import math
import re
from numbers import Number

from flask import current_app, request

from lobbyhub.errors import ValidationError

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def is_valid_email(email) -> bool:
    return isinstance(email, str) and bool(EMAIL_RE.match(email))


def is_valid_password(password) -> bool:
    min_length = int(current_app.config.get('MIN_PASSWORD_LENGTH', 8))
    return isinstance(password, str) and len(password) >= min_length


def is_number(value) -> bool:
    # bool is a Number subclass; the JSON parser also admits NaN and Infinity
    if not isinstance(value, Number) or isinstance(value, bool):
        return False
    return math.isfinite(value)


def is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def as_text(value, field):
    """Returns value as a string, or None when absent.

    Numeric ids are accepted and converted; objects, lists and booleans are not.
    """
    if value is None or isinstance(value, str):
        return value
    if is_number(value):
        return str(value)
    raise ValidationError(f'{field} must be a string')


def json_body() -> dict:
    """The request's JSON object, or an empty dict when there is no body."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def sanitize(data: dict, allowed_fields) -> dict:
    """Keeps only the allow-listed keys that are present in data."""
    return {k: data[k] for k in allowed_fields if k in data and data[k] is not None}
