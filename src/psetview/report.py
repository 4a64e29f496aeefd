from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

HEADER = "header"
FIELD = "field"
BLANK = "blank"
DIAGNOSTIC = "diagnostic"

FIELD_INDENT = "  "


@dataclass(frozen=True)
class DecodedField:
    label: str
    text: str

    def render(self) -> str:
        return f"{FIELD_INDENT}{self.label}: {self.text}"


@dataclass(frozen=True)
class ReportLine:
    kind: str
    text: str = ""

    @classmethod
    def header(cls, text: str) -> "ReportLine":
        return cls(HEADER, text)

    @classmethod
    def field(cls, decoded: DecodedField) -> "ReportLine":
        return cls(FIELD, decoded.render())

    @classmethod
    def blank(cls) -> "ReportLine":
        return cls(BLANK, "")

    @classmethod
    def diagnostic(cls, text: str) -> "ReportLine":
        return cls(DIAGNOSTIC, text)


ReportDocument = tuple[ReportLine, ...]


@dataclass(frozen=True)
class PassResult:
    name: str
    lines: ReportDocument
    found: bool

    @property
    def field_count(self) -> int:
        return sum(1 for line in self.lines if line.kind == FIELD)


@dataclass(frozen=True)
class ScanResult:
    found: bool
    document: ReportDocument

    def lines(self) -> list[str]:
        return document_lines(self.document)


class ReportBuilder:
    def __init__(self) -> None:
        self._lines: list[ReportLine] = []

    def extend(self, lines: Iterable[ReportLine]) -> None:
        self._lines.extend(lines)

    def build(self) -> ReportDocument:
        return tuple(self._lines)


def section(header: str, fields: Iterable[DecodedField]) -> Iterable[ReportLine]:
    yield ReportLine.header(header)
    for decoded in fields:
        yield ReportLine.field(decoded)
    yield ReportLine.blank()


def document_lines(document: Iterable[ReportLine]) -> list[str]:
    return [line.text for line in document]
