import io
import json
import zipfile
from contextlib import ExitStack
from pathlib import Path

import pytest

from combinator.domain.enums import ZipSource
from combinator.domain.hangul import SyllableIndex
from combinator.domain.records import SyllableRecord
from combinator.services.sinks import HexSink, ManifestSink, open_output_sinks


def _record(fin: int, fin_variant, fill: int = 0) -> SyllableRecord:
    return SyllableRecord(
        syllable=SyllableIndex(0, 0, fin),
        bitmap=bytes([fill] * 32),
        ini_variant=0,
        mid_variant=0,
        fin_variant=fin_variant,
    )


def _write_all(out_dir: Path, records, zip_source=ZipSource.COMPLETE) -> None:
    with ExitStack() as stack:
        sinks = open_output_sinks(out_dir, stack, zip_source)
        for r in records:
            for s in sinks.all:
                s.write(r)
            if r.complete:
                for s in sinks.complete:
                    s.write(r)


def test_hex_line_format():
    out = io.StringIO()
    HexSink(out).write(_record(0, None, fill=0xAB))
    assert out.getvalue() == "AC00:" + "AB" * 32 + "\n"


def test_empty_manifest_is_an_empty_array():
    out = io.StringIO()
    ManifestSink(out).close()
    assert json.loads(out.getvalue()) == []


def test_files_are_written_consistently(tmp_path: Path):
    records = [_record(0, None, 0x01), _record(1, None, 0x02), _record(2, 5, 0x03)]
    out_dir = tmp_path / "dist"
    _write_all(out_dir, records)

    all_lines = (out_dir / "out.hex").read_text(encoding="ascii").splitlines()
    complete_lines = (out_dir / "out-complete-only.hex").read_text(encoding="ascii").splitlines()
    assert [line[:4] for line in all_lines] == ["AC00", "AC01", "AC02"]
    assert complete_lines == [all_lines[0], all_lines[2]]

    with zipfile.ZipFile(out_dir / "out.zip") as zf:
        assert zf.namelist() == ["out.hex"]
        assert zf.getinfo("out.hex").compress_type == zipfile.ZIP_DEFLATED
        assert zf.read("out.hex").decode("ascii").splitlines() == complete_lines

    manifest = json.loads((out_dir / "selection.json").read_text(encoding="utf-8"))
    assert manifest == [[0, 0, None], [0, 0, None], [0, 0, 5]]


def test_zip_can_carry_the_full_stream(tmp_path: Path):
    records = [_record(0, None), _record(1, None)]
    _write_all(tmp_path, records, zip_source=ZipSource.ALL)
    with zipfile.ZipFile(tmp_path / "out.zip") as zf:
        assert zf.read("out.hex").decode("ascii") == (tmp_path / "out.hex").read_text(encoding="ascii")


def test_failed_run_leaves_no_outputs(tmp_path: Path):
    out_dir = tmp_path / "dist"
    with pytest.raises(RuntimeError):
        with ExitStack() as stack:
            sinks = open_output_sinks(out_dir, stack)
            for s in sinks.all:
                s.write(_record(0, None))
            raise RuntimeError("disk full")
    assert out_dir.is_dir()
    assert list(out_dir.iterdir()) == []
