from __future__ import annotations

import codecs
from dataclasses import dataclass, field, replace
from typing import Iterable

from .decode import DEFAULT_LEGACY_ENCODING

PROPERTY_SET_NAMES: tuple[str, ...] = ("施工情報(一覧表)", "施工情報(個別)")
LEGACY_XDATA_APPLICATIONS: tuple[str, ...] = ("CIVIL", "AECC", "AEC", "ACAD")
XDATA_APPLICATIONS: tuple[str, ...] = LEGACY_XDATA_APPLICATIONS + ("C3D", "CONSTRUCTION")


@dataclass(frozen=True)
class ScanConfig:
    property_set_names: tuple[str, ...] = PROPERTY_SET_NAMES
    xdata_applications: tuple[str, ...] = XDATA_APPLICATIONS
    legacy_encoding: str = DEFAULT_LEGACY_ENCODING
    _name_lookup: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "property_set_names", tuple(self.property_set_names))
        object.__setattr__(self, "xdata_applications", tuple(self.xdata_applications))
        object.__setattr__(self, "_name_lookup", frozenset(self.property_set_names))

    def is_allowed_name(self, name: str) -> bool:
        return name in self._name_lookup

    def with_applications(self, names: Iterable[str]) -> "ScanConfig":
        merged = list(self.xdata_applications)
        for name in names:
            name = name.strip()
            if name and name not in merged:
                merged.append(name)
        return replace(self, xdata_applications=tuple(merged))


DEFAULT_CONFIG = ScanConfig()


def build_config(
    *,
    extra_applications: Iterable[str] = (),
    legacy_apps_only: bool = False,
    legacy_encoding: str | None = None,
) -> ScanConfig:
    config = DEFAULT_CONFIG
    if legacy_apps_only:
        config = replace(config, xdata_applications=LEGACY_XDATA_APPLICATIONS)
    if legacy_encoding is not None:
        try:
            codecs.lookup(legacy_encoding)
        except LookupError as exc:
            raise ValueError(f"unknown encoding: {legacy_encoding}") from exc
        config = replace(config, legacy_encoding=legacy_encoding)
    return config.with_applications(extra_applications)
