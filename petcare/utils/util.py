# petcare/utils/util.py
import math
from datetime import datetime
from dateutil.parser import isoparse

# Largest value an INTEGER primary key column can hold
MAX_ID = 2 ** 31 - 1


def parse_id(value):
    """Return the integer identity for ``value`` or None when it is malformed."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        parsed = value
    else:
        text = str(value).strip()
        if not text.isdigit():
            return None
        parsed = int(text)
    return parsed if 0 < parsed <= MAX_ID else None


def parse_int(value, default=None):
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def parse_float(value, default=None):
    if value is None or isinstance(value, bool) or value == '':
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def parse_bool(value):
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() == 'true'


def coerce_datetime(value):
    """Parse an ISO string (or pass a datetime through) into a naive local datetime."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = isoparse(str(value).strip())
        except (ValueError, TypeError, OverflowError):
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def isoformat(value):
    return value.isoformat() if value is not None else None


def str_id(value):
    return str(value) if value is not None else None
