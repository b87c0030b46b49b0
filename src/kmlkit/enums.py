"""
Enumerated value codecs for KML.

Each KML enumeration is a closed set of tokens. Parsing is lenient:
an unknown token maps to a designated default instead of failing.

NOTE:
    The parse-failure default is configured per codec. It is independent
    of the value a field starts out with.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Generic, Iterable, List, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")


class RefreshMode(Enum):
    """Time-based refresh policy of a Link."""

    ON_CHANGE = "onChange"      # refresh when loaded and when the Link changes
    ON_INTERVAL = "onInterval"  # refresh every refreshInterval seconds
    ON_EXPIRE = "onExpire"      # refresh when the fetched file expires


class ViewRefreshMode(Enum):
    """Camera-based refresh policy of a Link."""

    NEVER = "never"
    ON_REQUEST = "onRequest"
    ON_STOP = "onStop"
    ON_REGION = "onRegion"


class SimpleFieldType(Enum):
    """Value type of a schema SimpleField."""

    STRING = "string"
    INT = "int"
    UINT = "uint"
    SHORT = "short"
    USHORT = "ushort"
    FLOAT = "float"
    DOUBLE = "double"
    BOOL = "bool"


class EnumCodec(Generic[V]):
    """
    Bidirectional token <-> value mapping with a lenient default.

    Properties:
        pairs:
            Ordered (token, value) pairs. Every value has exactly one
            canonical token.
        default:
            Value returned by from_token() for unrecognized input.
            Must be one of the declared values.

    Law:
        from_token(to_token(v)) == v for every declared v
    """

    def __init__(self, pairs: Iterable[Tuple[str, V]], default: V):
        self._pairs: List[Tuple[str, V]] = list(pairs)
        self._by_token = {}
        self._by_value = {}
        for token, value in self._pairs:
            if token in self._by_token:
                raise ValueError(f"Duplicate token: {token!r}")
            if value in self._by_value:
                raise ValueError(f"Duplicate value: {value!r}")
            self._by_token[token] = value
            self._by_value[value] = token
        if default not in self._by_value:
            raise ValueError(f"Default {default!r} is not a declared value")
        self.default = default

    @classmethod
    def for_enum(cls, enum_cls: Type[Enum], default: Enum) -> "EnumCodec":
        """Build a codec from an Enum whose values are the tokens."""
        return cls(((member.value, member) for member in enum_cls), default)

    @property
    def tokens(self) -> List[str]:
        return [token for token, _ in self._pairs]

    @property
    def values(self) -> List[V]:
        return [value for _, value in self._pairs]

    def from_token(self, token: str) -> V:
        value = self._by_token.get(token.strip() if isinstance(token, str) else token)
        if value is None:
            logger.debug("Unknown token %r, using default %r", token, self.default)
            return self.default
        return value

    def to_token(self, value: V) -> str:
        try:
            return self._by_value[value]
        except KeyError:
            raise ValueError(f"{value!r} is not a declared value") from None

    def coerce(self, raw: Any, default: Any = None) -> V:
        """
        Field coercion hook.

        Absent input yields the field default. Unknown tokens always
        resolve to the codec default.
        """
        if raw is None:
            return default if default is not None else self.default
        if raw in self._by_value:
            return raw
        return self.from_token(str(raw))


REFRESH_MODE = EnumCodec.for_enum(RefreshMode, default=RefreshMode.ON_CHANGE)
VIEW_REFRESH_MODE = EnumCodec.for_enum(ViewRefreshMode, default=ViewRefreshMode.NEVER)
SIMPLE_FIELD_TYPE = EnumCodec.for_enum(SimpleFieldType, default=SimpleFieldType.STRING)


__all__ = [
    "RefreshMode",
    "ViewRefreshMode",
    "SimpleFieldType",
    "EnumCodec",
    "REFRESH_MODE",
    "VIEW_REFRESH_MODE",
    "SIMPLE_FIELD_TYPE",
]
