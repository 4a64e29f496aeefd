from typing import Sequence

from .collector import ExtendedDataCollector, collect
from .command import ScanOutcome, ScanState, run_scan
from .config import DEFAULT_CONFIG, ScanConfig
from .decode import DecodeResult, decode, decode_value
from .registry import label_for
from .report import ScanResult
from .values import TaggedValue, TypeClass

__all__ = [
    "collect",
    "ExtendedDataCollector",
    "run_scan",
    "ScanOutcome",
    "ScanState",
    "ScanConfig",
    "DEFAULT_CONFIG",
    "decode",
    "decode_value",
    "DecodeResult",
    "label_for",
    "ScanResult",
    "TaggedValue",
    "TypeClass",
]


def main(argv: Sequence[str] | None = None) -> int:
    from psetview.cli import main as cli_main

    return cli_main(argv)
