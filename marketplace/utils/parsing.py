import math

from marketplace.errors import ValidationFailure


def parse_int(v, default=None, minv=None, maxv=None):
    if v is None or v == "":
        return default
    try:
        n = int(v)
    except (TypeError, ValueError):
        return default
    if minv is not None and n < minv:
        return default
    if maxv is not None and n > maxv:
        return default
    return n


def parse_float(v, default=None, minv=None, maxv=None):
    if v is None or v == "":
        return default
    try:
        n = float(v)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(n):
        return default
    if minv is not None and n < minv:
        return default
    if maxv is not None and n > maxv:
        return default
    return n


def clean_str(v):
    """Strip strings; blank becomes None."""
    if v is None:
        return None
    v = str(v).strip()
    return v or None


def require_fields(data: dict, *fields):
    miss = [k for k in fields if clean_str(data.get(k)) is None]
    if miss:
        raise ValidationFailure("missing fields: " + ", ".join(miss))
