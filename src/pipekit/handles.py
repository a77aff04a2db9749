"""Line-oriented sources and sinks over text handles.

Lines are read without their trailing newline and written with one
added. ``write_lines`` and ``stdout_ln`` treat a closed reader (EPIPE) as
a request to stop; every other write failure propagates.
"""

from __future__ import annotations

import errno
import logging
import sys
from typing import Any, TextIO

from pipekit.kernel.shapes import Sink, Source, await_, yield_
from pipekit.kernel.step import Done, Effect, lift
from pipekit.prelude.consumers import consume_with

logger = logging.getLogger(__name__)


def from_handle(handle: TextIO) -> Source[str, None]:
    """Emit the lines of ``handle`` until end of input."""

    def on_line(line: str) -> Source[str, None]:
        if line == "":
            return Done(None)
        if line.endswith("\n"):
            line = line[:-1]
        return yield_(line).then(lambda _: from_handle(handle))

    return lift(handle.readline).then(on_line)


def stdin_ln() -> Source[str, None]:
    """Emit the lines of standard input until end of input."""
    return Effect(lambda: from_handle(sys.stdin))


def _write_line(handle: TextIO, line: Any) -> bool:
    try:
        handle.write(f"{line}\n")
        handle.flush()
    except OSError as exc:
        if exc.errno != errno.EPIPE:
            raise
        logger.debug("reader of %r went away; stopping output", handle)
        return False
    return True


def write_lines(handle: TextIO) -> Sink[Any, None]:
    """Write every value as a line; finish quietly if the reader goes away."""

    def on_written(written: bool) -> Sink[Any, None]:
        return write_lines(handle) if written else Done(None)

    return await_().then(lambda line: lift(lambda: _write_line(handle, line))).then(on_written)


def stdout_ln() -> Sink[Any, None]:
    """Write every value as a line to standard output, stopping on a broken pipe."""
    return Effect(lambda: write_lines(sys.stdout))


def to_handle(handle: TextIO) -> Sink[Any, Any]:
    """Write every value as a line, with no broken-pipe handling. Never finishes."""
    return consume_with(lambda line: handle.write(f"{line}\n"))


def stdout_ln_raw() -> Sink[Any, Any]:
    """Write every value as a line to standard output, with no broken-pipe handling."""
    return Effect(lambda: to_handle(sys.stdout))
