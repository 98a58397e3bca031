"""Shareable input state carried in a URL query string.

Keys are ``a``, ``n`` and ``m``.  Reading falls back to defaults for
missing or blank keys; writing omits blank values and values equal to
the defaults so shared links stay short.  Neither direction validates
the numbers themselves -- that is the validator's job.
"""
from __future__ import annotations

from typing import Mapping
from urllib.parse import parse_qs, urlencode

from log import get_logger
from models import InputState

logger = get_logger(__name__)

DEFAULTS = InputState(a="3", n="100", m="23")

KEYS = ("a", "n", "m")


def _first_values(query: str | Mapping[str, str]) -> dict[str, str]:
    if isinstance(query, str):
        parsed = parse_qs(query.lstrip("?"), keep_blank_values=True, strict_parsing=False)
        return {k: v[0] for k, v in parsed.items() if v}
    # Multi-dicts (e.g. Starlette QueryParams) index to the last value.
    if hasattr(query, "getlist"):
        return {k: query.getlist(k)[0] for k in KEYS if query.getlist(k)}
    return {k: query[k] for k in KEYS if k in query}


def read_query(
    query: str | Mapping[str, str],
    defaults: InputState = DEFAULTS,
) -> InputState:
    """Build an InputState from a query string or mapping.

    Best effort: a query that cannot be decoded yields the defaults.
    """
    try:
        values = _first_values(query)
    except (TypeError, ValueError, UnicodeError) as e:
        logger.warning("query_unreadable", error=str(e))
        return defaults

    fields: dict[str, str] = {}
    for key in KEYS:
        raw = values.get(key)
        value = raw.strip() if isinstance(raw, str) else ""
        fields[key] = value if value else getattr(defaults, key)
    return InputState(**fields)


def write_query(state: InputState, defaults: InputState = DEFAULTS) -> str:
    """Encode ``state`` as a query string (no leading ``?``)."""
    pairs = []
    for key in KEYS:
        value = getattr(state, key).strip()
        if value and value != getattr(defaults, key):
            pairs.append((key, value))
    return urlencode(pairs)
