from __future__ import annotations

from pathlib import Path
from typing import TextIO

from ethlogfilter.core.errors import OutputFileWriteError


def write_output_file(path: str | Path, document: str) -> None:
    """Write `document` to `path` with ordinary user-writable permissions."""
    try:
        Path(path).write_bytes(document.encode("utf-8"))
    except OSError as e:
        raise OutputFileWriteError(str(path), str(e)) from e


def emit(payload: str, *, out: TextIO, output_file: str = "") -> OutputFileWriteError | None:
    """Write the JSON document plus newline to `out`, mirrored to `output_file`.

    The mirror gets byte-identical content. A mirror write failure is returned
    rather than raised: stdout already holds the result.
    """
    document = payload + "\n"
    out.write(document)
    out.flush()
    if not output_file:
        return None
    try:
        write_output_file(output_file, document)
    except OutputFileWriteError as e:
        return e
    return None
