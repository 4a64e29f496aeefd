from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass
from typing import Any, Iterable

from .values import TaggedValue, TypeClass

log = logging.getLogger(__name__)

PRIMARY_ENCODING = "utf-8"
DEFAULT_LEGACY_ENCODING = "shift_jis"
NULL_TEXT = "null"
ERROR_MARKER = "[decode error]"

_ALLOWED_CONTROL_CHARS = frozenset("\r\n")


@dataclass(frozen=True)
class DecodeResult:
    text: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def decode_value(value: TaggedValue, *, legacy_encoding: str = DEFAULT_LEGACY_ENCODING) -> DecodeResult:
    """Decode one tagged value into display text.

    Failures never propagate: they come back as a result whose text carries
    ``ERROR_MARKER`` so a single bad field cannot abort the surrounding scan.
    """
    try:
        return DecodeResult(_decode_unsafe(value, legacy_encoding))
    except Exception as exc:
        log.debug("failed to decode tagged value %r", value, exc_info=True)
        return _error_result(exc)


def decode(value: TaggedValue, *, legacy_encoding: str = DEFAULT_LEGACY_ENCODING) -> str:
    return decode_value(value, legacy_encoding=legacy_encoding).text


def render_plain(obj: Any, *, legacy_encoding: str = DEFAULT_LEGACY_ENCODING) -> DecodeResult:
    """Render a value that carries no type code, e.g. a property-set value."""
    try:
        if isinstance(obj, TaggedValue):
            return decode_value(obj, legacy_encoding=legacy_encoding)
        if obj is None:
            return DecodeResult(NULL_TEXT)
        if isinstance(obj, (bytes, bytearray, str)):
            return DecodeResult(_decode_text(obj, legacy_encoding))
        if isinstance(obj, bool):
            return DecodeResult(str(obj))
        if isinstance(obj, float):
            return DecodeResult(_decode_real(obj))
        if isinstance(obj, int):
            return DecodeResult(_decode_integer(obj))
        return DecodeResult(str(obj))
    except Exception as exc:
        log.debug("failed to render property value %r", obj, exc_info=True)
        return _error_result(exc)


def hex_dump(raw: bytes) -> str:
    return " ".join(f"{b:02X}" for b in raw)


def is_plausible_text(text: str) -> bool:
    if not text.strip():
        return False
    return not any(
        unicodedata.category(ch) == "Cc" and ch not in _ALLOWED_CONTROL_CHARS for ch in text
    )


def _error_result(exc: Exception) -> DecodeResult:
    message = f"{type(exc).__name__}: {exc}"
    return DecodeResult(text=f"{ERROR_MARKER} {message}", error=message)


def _decode_unsafe(value: TaggedValue, legacy_encoding: str) -> str:
    type_class = value.type_class
    payload = value.payload
    if type_class is TypeClass.TEXT:
        return _decode_text(payload, legacy_encoding)
    if type_class is TypeClass.REAL:
        return _decode_real(payload)
    if type_class is TypeClass.INTEGER:
        return _decode_integer(payload)
    if type_class is TypeClass.NESTED:
        return _decode_nested(payload, legacy_encoding)
    if type_class is TypeClass.BINARY:
        return _decode_binary(payload, legacy_encoding)
    if payload is None:
        return NULL_TEXT
    return str(payload)


def _decode_text(payload: Any, legacy_encoding: str) -> str:
    if payload is None:
        return NULL_TEXT
    if isinstance(payload, (bytes, bytearray)):
        return _decode_text_bytes(bytes(payload), legacy_encoding)
    if isinstance(payload, str):
        if _has_surrogate_escapes(payload):
            # Bytes the host could not decode; recover them and retry.
            return _decode_text_bytes(payload.encode(PRIMARY_ENCODING, "surrogateescape"), legacy_encoding)
        return payload
    return str(payload)


def _decode_text_bytes(raw: bytes, legacy_encoding: str) -> str:
    for encoding in (PRIMARY_ENCODING, legacy_encoding):
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError:
            continue
    return str(raw)


def _has_surrogate_escapes(text: str) -> bool:
    return any("\udc80" <= ch <= "\udcff" for ch in text)


def _decode_real(payload: Any) -> str:
    if payload is None:
        return "0.000000"
    if isinstance(payload, Iterable) and not isinstance(payload, (str, bytes, bytearray)):
        return "(" + ", ".join(f"{float(part):.6f}" for part in payload) + ")"
    return f"{float(payload):.6f}"


def _decode_integer(payload: Any) -> str:
    if payload is None:
        return "0"
    if isinstance(payload, float) and not payload.is_integer():
        raise ValueError(f"non-integral value for integer field: {payload!r}")
    return str(int(payload))


def _decode_nested(payload: Any, legacy_encoding: str) -> str:
    if payload is None:
        return NULL_TEXT
    if isinstance(payload, (str, bytes, bytearray)):
        return _decode_text(payload, legacy_encoding)
    if isinstance(payload, TaggedValue):
        payload = (payload,)
    parts: list[str] = []
    for item in payload:
        if isinstance(item, TaggedValue):
            parts.append(decode_value(item, legacy_encoding=legacy_encoding).text)
        else:
            parts.append(NULL_TEXT if item is None else str(item))
    return ", ".join(parts)


def _decode_binary(payload: Any, legacy_encoding: str) -> str:
    if payload is None:
        return NULL_TEXT
    if isinstance(payload, str):
        return payload
    if not isinstance(payload, (bytes, bytearray, memoryview)):
        raise TypeError(f"binary chunk payload must be bytes, not {type(payload).__name__}")
    raw = bytes(payload)
    for encoding in (PRIMARY_ENCODING, legacy_encoding):
        try:
            text = raw.decode(encoding)
        except UnicodeDecodeError:
            continue
        if is_plausible_text(text):
            return text
    return hex_dump(raw)
