from __future__ import annotations

import sys
from typing import Sequence, TextIO


class ConsolePresenter:
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self.closed = False

    def show(self, lines: Sequence[str]) -> None:
        for line in lines:
            print(line, file=self._stream)

    def close(self) -> None:
        self._stream.flush()
        self.closed = True


class StderrStatus:
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def write_message(self, text: str) -> None:
        print(text, file=self._stream if self._stream is not None else sys.stderr)
