"""
Attribute coercion for KMLKit entities.

Converts raw attribute strings into typed values.

RULES:
    - Absence of a key is normal and yields the declared default.
    - A value that cannot be parsed yields the declared default.
    - Nothing in this module raises on bad input. Malformed documents
      must still load.

Every coercion also accepts a value that already has the target type,
so setters can be driven either by a parser (raw strings) or by code
(typed values).
"""
from __future__ import annotations

import logging
import math
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

Coercion = Callable[[Any, Any], Any]

_TRUE_TOKENS = {"1", "true"}
_FALSE_TOKENS = {"0", "false"}


def to_float(raw: Any, default: float = 0.0) -> float:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return default
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        try:
            value = float(str(raw).strip())
        except ValueError:
            logger.debug("Unparsable float %r, using default %r", raw, default)
            return default
    if math.isnan(value):
        logger.debug("NaN is not a usable value, using default %r", default)
        return default
    return value


def to_bool(raw: Any, default: bool = False) -> bool:
    """KML booleans are written as 1/0, but true/false is accepted too."""
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    token = str(raw).strip().lower()
    if token in _TRUE_TOKENS:
        return True
    if token in _FALSE_TOKENS:
        return False
    logger.debug("Unparsable boolean %r, using default %r", raw, default)
    return default


def to_url(raw: Any, default: Optional[str] = None) -> Optional[str]:
    """
    Parse a resource reference.

    References are kept as strings. An empty string, or one containing
    whitespace, is not a usable reference and yields the default.
    """
    if raw is None:
        return default
    text = str(raw).strip()
    if not text or any(ch.isspace() for ch in text):
        if text:
            logger.debug("Invalid reference %r, using default %r", raw, default)
        return default
    return text


def to_text(raw: Any, default: Optional[str] = None) -> Optional[str]:
    """Free text is kept verbatim. An empty string is a real value."""
    if raw is None:
        return default
    return str(raw)


__all__ = [
    "Coercion",
    "to_float",
    "to_bool",
    "to_url",
    "to_text",
]
