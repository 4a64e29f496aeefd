"""Capabilities the scan consumes from, and produces to, the host application.

The engine only ever talks to these protocols, so any drawing database that can
answer these read-only queries can be inspected. ``psetview.dxf`` implements
them on top of ezdxf.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, Optional, Protocol, Sequence

from .values import TaggedValue


class ObjectHandle(Protocol):
    def as_value_record(self) -> Optional[Sequence[TaggedValue]]: ...


class DictionaryHandle(Protocol):
    def entries(self) -> Sequence[tuple[str, ObjectHandle]]: ...


class EntityHandle(Protocol):
    @property
    def type_name(self) -> str: ...

    def extension_dictionary(self) -> Optional[DictionaryHandle]: ...

    def xdata_for(self, application_name: str) -> Optional[Sequence[TaggedValue]]: ...


class PropertySet(Protocol):
    name: str
    definitions: Sequence[str]
    values: Sequence[Any]


class PropertySetSource(Protocol):
    def has_property_sets(self, entity: EntityHandle) -> bool: ...

    def list_property_sets(self, entity: EntityHandle) -> Sequence[PropertySet]: ...


class EntitySelector(Protocol):
    def prompt_for_entity(self) -> Optional[str]:
        """Return the selected entity id, or None when the user cancelled."""
        ...


class ScopeToken(Protocol):
    def get_entity(self, entity_id: str) -> Optional[EntityHandle]: ...

    def commit(self) -> None: ...


class TransactionScope(Protocol):
    def open(self) -> AbstractContextManager[ScopeToken]: ...


class ReportPresenter(Protocol):
    def show(self, lines: Sequence[str]) -> None: ...

    def close(self) -> None: ...


class StatusChannel(Protocol):
    def write_message(self, text: str) -> None: ...
