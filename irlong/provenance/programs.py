"""Identify program versions used for analysis, reporting in a structured table.

Catalogs the external programs used in a run, enabling reproduction of
results and tracking of provenance in output files.
"""
import contextlib
import os
import subprocess

from irlong import utils
from irlong.log import logger

_cl_progs = [{"name": "minimap2", "args": "--version"},
             {"name": "samtools", "args": "--version", "stdout_flag": "samtools"},
             {"name": "irfinder", "args": "--version", "stdout_flag": "IRFinder version:"}]

def _parse_from_stdoutflag(stdout, x):
    for line in stdout:
        if line.find(x) >= 0:
            parts = [p for p in line[line.find(x) + len(x):].split() if p.strip()]
            return parts[0].strip() if parts else ""
    return ""

def _get_cl_version(p, program):
    """Retrieve version of a single commandline program, empty if unavailable.
    """
    try:
        subp = subprocess.Popen([program, p["args"]], stdout=subprocess.PIPE,
                                stderr=subprocess.STDOUT)
    except OSError:
        return ""
    with contextlib.closing(subp.stdout) as stdout:
        lines = [l.decode("utf-8", errors="replace").strip() for l in stdout]
    subp.wait()
    if subp.returncode != 0:
        return ""
    lines = [l for l in lines if l]
    if p.get("stdout_flag"):
        v = _parse_from_stdoutflag(lines, p["stdout_flag"])
    else:
        v = lines[-1] if lines else ""
    if v.endswith("."):
        v = v[:-1]
    return v

def get_versions(programs):
    """Retrieve versions for the resolved programs, as (name, version) pairs.
    """
    out = []
    for p in _cl_progs:
        if p["name"] in programs:
            out.append((p["name"], _get_cl_version(p, programs[p["name"]])))
    return out

def write_versions(log_dir, programs):
    """Write program versions to a CSV file in the log directory.
    """
    out_file = os.path.join(utils.safe_makedir(log_dir), "programs.txt")
    with open(out_file, "w") as out_handle:
        for name, version in get_versions(programs):
            out_handle.write("%s,%s\n" % (name, version))
            logger.debug("Using %s version %s" % (name, version or "unknown"))
    return out_file
