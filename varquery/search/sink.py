"""
Output Sink

Append-only UTF-8 text destination for rendered search results.
"""

import io
import os
from typing import Any, Union


class OutputSink:
    """
    Wraps a file descriptor, a text stream, or a byte stream.

    Every write goes straight to the target; nothing is buffered here, so
    lines written before a failure stay written.
    """

    def __init__(self, target: Any, encoding: str = "utf-8"):
        self.target = target
        self.encoding = encoding
        self.written = 0

        if isinstance(target, bool) or not (isinstance(target, int) or hasattr(target, "write")):
            raise TypeError(
                f"Output sink must be a file descriptor or a writable stream, got {type(target).__name__}"
            )

    def write(self, text: str) -> None:
        if not text:
            return

        if isinstance(self.target, int):
            data = text.encode(self.encoding)
            while data:
                count = os.write(self.target, data)
                data = data[count:]
        elif isinstance(self.target, io.TextIOBase) or hasattr(self.target, "encoding"):
            self.target.write(text)
        else:
            self.target.write(text.encode(self.encoding))

        self.written += len(text)

    def flush(self) -> None:
        if hasattr(self.target, "flush"):
            self.target.flush()


SinkTarget = Union[OutputSink, int, Any]


def as_sink(target: SinkTarget) -> OutputSink:
    """Return target unchanged if it is already an OutputSink."""
    if isinstance(target, OutputSink):
        return target
    return OutputSink(target)
