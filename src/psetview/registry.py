from __future__ import annotations

from types import MappingProxyType

# Canonical type code -> label table. Codes 4-11 follow DXF group-code
# semantics; the earlier per-project labels for that range are not supported.
TYPE_CODE_LABELS = MappingProxyType(
    {
        -3: "XDataStart",
        0: "Start",
        1: "Text",
        2: "Name",
        3: "Text2",
        4: "Text3",
        5: "Handle",
        6: "LinetypeName",
        7: "TextStyleName",
        8: "LayerName",
        9: "VariableName",
        10: "XCoordinate",
        11: "XCoordinate1",
        20: "YCoordinate",
        30: "ZCoordinate",
        38: "Elevation",
        39: "Thickness",
        40: "Real",
        62: "Color",
        70: "Int16",
        90: "Int32",
        100: "Subclass",
        102: "ControlString",
        160: "Int64",
        280: "Int8",
        290: "Bool",
        300: "XTextString",
        310: "BinaryChunk",
        330: "SoftPointerId",
        340: "HardPointerId",
        999: "Comment",
        1000: "ExtendedDataAsciiString",
        1001: "ExtendedDataRegAppName",
        1002: "ExtendedDataControlString",
        1003: "ExtendedDataLayerName",
        1004: "ExtendedDataBinaryChunk",
        1005: "ExtendedDataHandle",
        1010: "ExtendedDataXCoordinate",
        1011: "ExtendedDataWorldXCoordinate",
        1012: "ExtendedDataWorldXDisp",
        1013: "ExtendedDataWorldXDir",
        1040: "ExtendedDataReal",
        1041: "ExtendedDataDist",
        1042: "ExtendedDataScale",
        1070: "ExtendedDataInteger16",
        1071: "ExtendedDataInteger32",
    }
)


def fallback_label(code: int) -> str:
    return f"Property{code}"


def label_for(code: int) -> str:
    label = TYPE_CODE_LABELS.get(code)
    if label is None:
        return fallback_label(code)
    return label
