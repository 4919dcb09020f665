from __future__ import annotations

"""Output sinks.

Every sink receives records in canonical syllable order and writes them
immediately. Write failures (OSError) propagate to the caller; outputs are
regenerated wholesale, so nothing is retried.

Files written into the output directory:
- out.hex                 every syllable
- out-complete-only.hex   complete syllables only
- out.zip                 one entry, out.hex, holding the complete-only (or full) stream
- selection.json          [ini, mid, fin] variants per syllable
"""

import io
import json
import zipfile
from contextlib import ExitStack
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Protocol, TextIO

from combinator.domain.enums import ZipSource
from combinator.domain.records import SyllableRecord


ALL_HEX_FILENAME: Final[str] = "out.hex"
COMPLETE_HEX_FILENAME: Final[str] = "out-complete-only.hex"
ZIP_FILENAME: Final[str] = "out.zip"
ZIP_ENTRY_NAME: Final[str] = "out.hex"
MANIFEST_FILENAME: Final[str] = "selection.json"


class RecordSink(Protocol):
    def write(self, record: SyllableRecord) -> None: ...


class HexSink:
    """Writes "XXXX:<64 hex digits>" lines."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def write(self, record: SyllableRecord) -> None:
        self._stream.write(record.hex_line())
        self._stream.write("\n")


class ManifestSink:
    """Streams one compact JSON array of per-syllable variant triples."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._count = 0

    def write(self, record: SyllableRecord) -> None:
        self._stream.write("," if self._count else "[")
        self._stream.write(json.dumps(record.variants, separators=(",", ":")))
        self._count += 1

    def close(self) -> None:
        self._stream.write("]" if self._count else "[]")


@dataclass
class OutputSinks:
    """The sink sets the emitter routes to."""

    all: list[RecordSink] = field(default_factory=list)
    complete: list[RecordSink] = field(default_factory=list)


def open_output_sinks(out_dir: Path, stack: ExitStack, zip_source: ZipSource = ZipSource.COMPLETE) -> OutputSinks:
    """Create the output directory and open every file sink on `stack`.

    Closing the stack normally terminates the manifest, finishes the zip and
    closes all files. Closing it on an exception closes the files and then
    deletes every output, so a failed run leaves nothing that looks complete.
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    outputs = [out_dir / name for name in (ALL_HEX_FILENAME, COMPLETE_HEX_FILENAME, ZIP_FILENAME, MANIFEST_FILENAME)]

    def _discard_on_error(exc_type, exc, tb) -> bool:
        if exc_type is not None:
            for path in outputs:
                path.unlink(missing_ok=True)
        return False

    # Registered first so it runs after every file is closed.
    stack.push(_discard_on_error)

    def _text(path: Path) -> TextIO:
        return stack.enter_context(path.open("w", encoding="ascii", newline="\n"))

    sinks = OutputSinks()
    sinks.all.append(HexSink(_text(out_dir / ALL_HEX_FILENAME)))
    sinks.complete.append(HexSink(_text(out_dir / COMPLETE_HEX_FILENAME)))

    archive = stack.enter_context(zipfile.ZipFile(out_dir / ZIP_FILENAME, "w", compression=zipfile.ZIP_DEFLATED))
    entry = stack.enter_context(
        io.TextIOWrapper(archive.open(ZIP_ENTRY_NAME, "w"), encoding="ascii", newline="\n")
    )
    zip_sink = HexSink(entry)
    if zip_source is ZipSource.ALL:
        sinks.all.append(zip_sink)
    else:
        sinks.complete.append(zip_sink)

    manifest = ManifestSink(_text(out_dir / MANIFEST_FILENAME))

    def _finish_manifest(exc_type, exc, tb) -> bool:
        if exc_type is None:
            manifest.close()
        return False

    stack.push(_finish_manifest)
    sinks.all.append(manifest)

    return sinks
