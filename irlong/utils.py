"""Helpful utilities for running long read alignment pipelines.
"""
import errno
import os
import shutil
import sys

def safe_makedir(dname):
    """Make a directory if it doesn't exist, tolerating one created concurrently.
    """
    if not dname:
        return dname
    try:
        os.makedirs(dname)
    except OSError as e:
        if e.errno != errno.EEXIST:
            raise
    return dname

def file_exists(fname):
    """Check if a file exists and is non-empty.
    """
    try:
        return bool(fname) and os.path.exists(fname) and os.path.getsize(fname) > 0
    except OSError:
        return False

def is_executable(fpath):
    return os.path.isfile(fpath) and os.access(fpath, os.X_OK)

def remove_safe(f):
    try:
        if os.path.isdir(f):
            shutil.rmtree(f)
        else:
            os.remove(f)
    except OSError:
        pass

def which(program):
    """ returns the path to an executable or None if it can't be found"""
    fpath, fname = os.path.split(program)
    if fpath:
        if is_executable(program):
            return program
    else:
        for path in os.environ.get("PATH", "").split(os.pathsep):
            exe_file = os.path.join(path, program)
            if is_executable(exe_file):
                return exe_file
        # support programs installed alongside the running python
        exe_file = os.path.join(os.path.dirname(sys.executable), program)
        if is_executable(exe_file):
            return exe_file
    return None
