from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import zip_longest
from typing import Callable, Iterable, Iterator, Sequence

from .config import DEFAULT_CONFIG, ScanConfig
from .decode import decode_value, render_plain
from .host import EntityHandle, PropertySetSource
from .registry import label_for
from .report import (
    FIELD,
    HEADER,
    DecodedField,
    PassResult,
    ReportBuilder,
    ReportLine,
    ScanResult,
    section,
)
from .values import TaggedValue

log = logging.getLogger(__name__)

PROPERTY_SET_PASS = "property sets"
DICTIONARY_PASS = "extension dictionary"
XDATA_PASS = "xdata"

NOT_FOUND_MESSAGE = (
    "No construction data (property sets, extension dictionary, XData) was found on this entity."
)
NONE_MARKER = "none"


class ExtendedDataCollector:
    """Walks the three attachment points of one entity into an ordered report."""

    def __init__(
        self,
        config: ScanConfig = DEFAULT_CONFIG,
        property_sets: PropertySetSource | None = None,
    ) -> None:
        self.config = config
        self.property_sets = property_sets

    def collect(self, entity: EntityHandle) -> ScanResult:
        passes = (
            _run_pass(PROPERTY_SET_PASS, lambda: self._property_set_lines(entity)),
            _run_pass(DICTIONARY_PASS, lambda: self._dictionary_lines(entity)),
            _run_pass(XDATA_PASS, lambda: self._xdata_lines(entity)),
        )
        builder = ReportBuilder()
        for result in passes:
            builder.extend(result.lines)
        found = any(result.found for result in passes)
        if not found:
            builder.extend(self._not_found_lines(entity))
        return ScanResult(found=found, document=builder.build())

    def decode_fields(self, values: Iterable[TaggedValue]) -> Iterator[DecodedField]:
        encoding = self.config.legacy_encoding
        for value in values:
            yield DecodedField(label_for(value.code), decode_value(value, legacy_encoding=encoding).text)

    def _property_set_lines(self, entity: EntityHandle) -> Iterator[ReportLine]:
        source = self.property_sets
        if source is None or not source.has_property_sets(entity):
            return
        encoding = self.config.legacy_encoding
        for property_set in source.list_property_sets(entity):
            if not self.config.is_allowed_name(property_set.name):
                continue
            fields = (
                DecodedField(str(definition), render_plain(value, legacy_encoding=encoding).text)
                for definition, value in zip_longest(property_set.definitions, property_set.values, fillvalue=None)
            )
            yield from section(f"Property set: {property_set.name}", fields)

    def _dictionary_lines(self, entity: EntityHandle) -> Iterator[ReportLine]:
        dictionary = entity.extension_dictionary()
        if dictionary is None:
            return
        for key, obj in dictionary.entries():
            if not self.config.is_allowed_name(key):
                continue
            record = obj.as_value_record()
            yield from section(f"Extension dictionary entry: {key}", self.decode_fields(record or ()))

    def _xdata_lines(self, entity: EntityHandle) -> Iterator[ReportLine]:
        for application in self.config.xdata_applications:
            values = entity.xdata_for(application)
            if not values:
                continue
            yield from section(f"XData ({application}):", self.decode_fields(values))

    def _not_found_lines(self, entity: EntityHandle) -> list[ReportLine]:
        lines = [ReportLine.diagnostic(NOT_FOUND_MESSAGE)]
        lines.append(ReportLine.diagnostic(f"  Entity type: {_probe(lambda: entity.type_name)}"))
        has_dictionary = _probe(lambda: "present" if entity.extension_dictionary() is not None else "absent")
        lines.append(ReportLine.diagnostic(f"  Extension dictionary: {has_dictionary}"))
        applications = _probe(lambda: ", ".join(applications_with_data(entity, self.config)) or NONE_MARKER)
        lines.append(ReportLine.diagnostic(f"  XData applications with data: {applications}"))
        return lines


def collect(
    entity: EntityHandle,
    *,
    property_sets: PropertySetSource | None = None,
    config: ScanConfig = DEFAULT_CONFIG,
) -> ScanResult:
    return ExtendedDataCollector(config, property_sets).collect(entity)


def _run_pass(name: str, produce: Callable[[], Iterable[ReportLine]]) -> PassResult:
    lines: list[ReportLine] = []
    try:
        for line in produce():
            lines.append(line)
    except Exception as exc:
        log.warning("%s pass failed: %s", name, exc)
        log.debug("%s pass traceback", name, exc_info=True)
        lines.append(ReportLine.diagnostic(f"[{name} failed] {type(exc).__name__}: {exc}"))
    result = PassResult(name=name, lines=tuple(lines), found=any(line.kind == FIELD for line in lines))
    log.debug("%s pass produced %d fields", name, result.field_count)
    return result


def _probe(read: Callable[[], str]) -> str:
    try:
        return read()
    except Exception as exc:
        log.debug("diagnostic probe failed", exc_info=True)
        return f"unavailable ({type(exc).__name__}: {exc})"


def section_names(result: ScanResult) -> Sequence[str]:
    return [line.text for line in result.document if line.kind == HEADER]


@dataclass(frozen=True)
class AttachmentSummary:
    handle: str
    type_name: str
    dictionary_keys: tuple[str, ...]
    applications: tuple[str, ...]

    @property
    def has_data(self) -> bool:
        return bool(self.dictionary_keys or self.applications)


def applications_with_data(entity: EntityHandle, config: ScanConfig = DEFAULT_CONFIG) -> list[str]:
    return [name for name in config.xdata_applications if entity.xdata_for(name)]


def summarize_attachments(
    entity: EntityHandle,
    handle: str,
    config: ScanConfig = DEFAULT_CONFIG,
) -> AttachmentSummary:
    dictionary = entity.extension_dictionary()
    keys: list[str] = []
    if dictionary is not None:
        keys = [key for key, _ in dictionary.entries() if config.is_allowed_name(key)]
    return AttachmentSummary(
        handle=handle,
        type_name=entity.type_name,
        dictionary_keys=tuple(keys),
        applications=tuple(applications_with_data(entity, config)),
    )
