from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Optional

import ezdxf

from .errors import ScopeClosedError
from .values import TaggedValue, TypeClass, nested, type_class_for

log = logging.getLogger(__name__)

SELECT_PROMPT = "Select an entity handle to inspect (empty to cancel): "

_CONTROL_STRING_CODE = 1002


def read(path: str) -> "Drawing":
    return Drawing(path=path, doc=ezdxf.readfile(path))


def tags_to_values(tags: Iterable[Any]) -> list[TaggedValue]:
    """Convert ezdxf tags into tagged values.

    ``1002 "{"`` ... ``1002 "}"`` groups become nested buffers. An unbalanced
    closing brace is kept as a plain control-string value.
    """
    stack: list[list[TaggedValue]] = [[]]
    for tag in tags:
        code = int(tag.code)
        value = tag.value
        if code == _CONTROL_STRING_CODE and value == "{":
            stack.append([])
            continue
        if code == _CONTROL_STRING_CODE and value == "}" and len(stack) > 1:
            group = stack.pop()
            stack[-1].append(nested(*group))
            continue
        stack[-1].append(TaggedValue(code, _tag_payload(code, value)))
    while len(stack) > 1:
        group = stack.pop()
        stack[-1].append(nested(*group))
    return stack[0]


def _tag_payload(code: int, value: Any) -> Any:
    if type_class_for(code) is TypeClass.BINARY and isinstance(value, str):
        try:
            return bytes.fromhex(value)
        except ValueError:
            return value
    if isinstance(value, (bytes, bytearray, str, int, float)) or value is None:
        return value
    # DXFVertex values and Vec3 points
    return tuple(float(part) for part in value)


class DxfObject:
    def __init__(self, obj: Any) -> None:
        self._obj = obj

    def as_value_record(self) -> Optional[list[TaggedValue]]:
        if self._obj is None or self._obj.dxftype() != "XRECORD":
            return None
        return tags_to_values(self._obj.tags)


class DxfDictionary:
    def __init__(self, dictionary: Any, resolve: Callable[[str], Any]) -> None:
        self._dictionary = dictionary
        self._resolve = resolve

    def entries(self) -> list[tuple[str, DxfObject]]:
        out: list[tuple[str, DxfObject]] = []
        for key, value in self._dictionary.items():
            if isinstance(value, str):
                value = self._resolve(value)
            out.append((str(key), DxfObject(value)))
        return out


class DxfEntity:
    def __init__(self, entity: Any, resolve: Callable[[str], Any]) -> None:
        self._entity = entity
        self._resolve = resolve

    @property
    def handle(self) -> str:
        return str(self._entity.dxf.handle)

    @property
    def type_name(self) -> str:
        return self._entity.dxftype()

    def extension_dictionary(self) -> Optional[DxfDictionary]:
        if not self._entity.has_extension_dict:
            return None
        xdict = self._entity.get_extension_dict()
        return DxfDictionary(xdict.dictionary, self._resolve)

    def xdata_for(self, application_name: str) -> Optional[list[TaggedValue]]:
        if not self._entity.has_xdata(application_name):
            return None
        return tags_to_values(self._entity.get_xdata(application_name))


class HandleSelector:
    def __init__(self, handle: str | None = None, prompt: Callable[[str], str] | None = None) -> None:
        self._handle = handle
        self._prompt = prompt

    def prompt_for_entity(self) -> Optional[str]:
        handle = self._handle
        if handle is None:
            try:
                prompt = self._prompt if self._prompt is not None else input
                handle = prompt(SELECT_PROMPT)
            except (EOFError, KeyboardInterrupt):
                return None
        handle = handle.strip().upper()
        if not handle:
            return None
        return handle


class _ScopeToken:
    def __init__(self, drawing: "Drawing") -> None:
        self._drawing: Drawing | None = drawing
        self.committed = False

    def get_entity(self, entity_id: str) -> Optional[DxfEntity]:
        if self._drawing is None:
            raise ScopeClosedError("read scope is already closed")
        return self._drawing.entity(entity_id)

    def commit(self) -> None:
        if self._drawing is None:
            raise ScopeClosedError("read scope is already closed")
        self.committed = True

    def close(self) -> None:
        self._drawing = None


class DxfTransaction:
    def __init__(self, drawing: "Drawing") -> None:
        self._drawing = drawing

    @contextmanager
    def open(self) -> Iterator[_ScopeToken]:
        token = _ScopeToken(self._drawing)
        log.debug("opened read scope on %s", self._drawing.path)
        try:
            yield token
        finally:
            token.close()
            log.debug("released read scope on %s (committed=%s)", self._drawing.path, token.committed)


@dataclass(frozen=True)
class Drawing:
    path: str
    doc: Any

    def modelspace_entities(self) -> list[DxfEntity]:
        return [DxfEntity(entity, self._lookup) for entity in self.doc.modelspace()]

    def entity_ids(self) -> list[str]:
        return [entity.handle for entity in self.modelspace_entities()]

    def entity(self, entity_id: str) -> Optional[DxfEntity]:
        obj = self._lookup(entity_id)
        if obj is None or not hasattr(obj, "has_xdata"):
            return None
        return DxfEntity(obj, self._lookup)

    def selector(self, handle: str | None = None, prompt: Callable[[str], str] | None = None) -> HandleSelector:
        return HandleSelector(handle, prompt)

    def transaction(self) -> DxfTransaction:
        return DxfTransaction(self)

    def _lookup(self, handle: str) -> Any:
        return self.doc.entitydb.get(handle.strip().upper())

