"""Pytest fixtures: reference directories, read files and stand-in external programs."""

import os
import stat

import pytest

FAKE_MINIMAP2 = """#!/bin/sh
echo "minimap2 $*" >> "$IRLONG_FAKE_CALLS"
if [ "$1" = "--version" ]; then
    echo "2.26-r1175"
    exit 0
fi
echo "[M::main] Version: 2.26-r1175" >&2
if [ "$IRLONG_FAKE_FAIL" = "minimap2" ]; then
    echo "[ERROR] failed to open file" >&2
    exit 1
fi
printf '@HD\\tVN:1.6\\tSO:unsorted\\n@SQ\\tSN:chr1\\tLN:1000\\n'
if [ "$IRLONG_FAKE_FAIL" = "view" ]; then
    exec yes "read1\t0\tchr1\t100\t60\t10M\t*\t0\t0\tACGTACGTAC\t*"
fi
printf 'read1\\t0\\tchr1\\t100\\t60\\t10M\\t*\\t0\\t0\\tACGTACGTAC\\t*\\n'
"""

FAKE_SAMTOOLS = """#!/bin/sh
echo "samtools $*" >> "$IRLONG_FAKE_CALLS"
cmd="$1"
shift
case "$cmd" in
    --version)
        echo "samtools 1.17"
        exit 0
        ;;
    view)
        if [ "$IRLONG_FAKE_FAIL" = "view" ]; then
            echo "[main_samview] fail to read the header" >&2
            exit 1
        fi
        out=""
        while [ $# -gt 0 ]; do
            case "$1" in
                -o) out="$2"; shift 2 ;;
                *) shift ;;
            esac
        done
        cat > "$out"
        ;;
    sort)
        if [ "$IRLONG_FAKE_FAIL" = "sort" ]; then
            echo "[bam_sort_core] truncated file" >&2
            exit 1
        fi
        out=""
        in=""
        while [ $# -gt 0 ]; do
            case "$1" in
                -o) out="$2"; shift 2 ;;
                -@|-m) shift 2 ;;
                *) in="$1"; shift ;;
            esac
        done
        cp "$in" "$out"
        ;;
    index)
        if [ "$IRLONG_FAKE_FAIL" = "index" ]; then
            exit 1
        fi
        in=""
        while [ $# -gt 0 ]; do
            case "$1" in
                -@) shift 2 ;;
                *) in="$1"; shift ;;
            esac
        done
        echo "index" > "$in.bai"
        ;;
    *)
        exit 1
        ;;
esac
"""

FAKE_IRFINDER = """#!/bin/sh
echo "IRFinderBAM $*" >> "$IRLONG_FAKE_CALLS"
if [ "$1" = "--version" ]; then
    echo "IRFinder version: 2.0.1"
    exit 0
fi
echo "Quantifying intron retention"
if [ "$IRLONG_FAKE_FAIL" = "irfinder" ]; then
    echo "Could not read BAM file" >&2
    exit 2
fi
"""

def _write_exe(fname, content):
    with open(fname, "w") as out_handle:
        out_handle.write(content)
    os.chmod(fname, os.stat(fname).st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return fname


@pytest.fixture
def tool_dir(tmp_path, monkeypatch):
    """Directory of stand-in minimap2, samtools and IRFinderBAM placed first on the PATH"""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    _write_exe(str(bin_dir / "minimap2"), FAKE_MINIMAP2)
    _write_exe(str(bin_dir / "samtools"), FAKE_SAMTOOLS)
    _write_exe(str(bin_dir / "IRFinderBAM"), FAKE_IRFINDER)
    monkeypatch.setenv("PATH", os.pathsep.join([str(bin_dir), "/usr/bin", "/bin"]))
    monkeypatch.setenv("IRLONG_FAKE_CALLS", str(tmp_path / "calls.txt"))
    monkeypatch.delenv("IRLONG_FAKE_FAIL", raising=False)
    return str(bin_dir)


@pytest.fixture
def fake_calls(tmp_path):
    """Read back the external program calls made by the stand-in tools"""
    def read():
        calls_file = tmp_path / "calls.txt"
        if not calls_file.exists():
            return []
        return [l.rstrip("\n") for l in calls_file.read_text().splitlines() if l.strip()]
    return read


@pytest.fixture
def ref_dir(tmp_path):
    ref = tmp_path / "REF"
    ref.mkdir()
    (ref / "genome.fa").write_text(">chr1\n" + "ACGT" * 250 + "\n")
    return str(ref)


@pytest.fixture
def reads(tmp_path):
    fq = tmp_path / "reads.fastq"
    fq.write_text("@read1\nACGTACGTAC\n+\nIIIIIIIIII\n")
    return str(fq)


@pytest.fixture
def out_dir(tmp_path):
    return str(tmp_path / "out")
