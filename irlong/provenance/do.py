"""Centralize running of external commands, providing logging and tracking.
"""
import collections
import contextlib
import os
import signal
import subprocess

from irlong import utils
from irlong.log import logger, logger_cl
from irlong.pipeline.errors import SubprocessError, cmd_str

def run(cmd, descr=None, checks=None, log_file=None):
    """Run the provided command, logging details and checking for errors.
    """
    if descr:
        logger.debug(descr)
    logger_cl.debug(cmd_str(cmd))
    _do_run(cmd, descr, checks, log_file)

def run_pipe(cmds, descr=None, log_files=None, checks=None):
    """Run commands connected by unix pipes, checking the exit status of every side.

    Each command's standard output feeds the next command's standard input.
    Standard error of each command, and standard output of the final one, go
    to the matching entry in `log_files`. All processes are waited on before
    any failure is reported. The first command in pipeline order that failed on
    its own is raised; upstream commands killed by SIGPIPE after a downstream
    reader exited are only reported when nothing else failed.
    """
    if log_files is None:
        log_files = [None] * len(cmds)
    assert len(log_files) == len(cmds), (cmds, log_files)
    cmds = [[str(x) for x in cmd] for cmd in cmds]
    if descr:
        logger.debug(descr)
    logger_cl.debug(" | ".join(cmd_str(cmd) for cmd in cmds))
    procs = []
    with contextlib.ExitStack() as stack:
        handles = [stack.enter_context(_log_handle(f)) for f in log_files]
        stdin = None
        try:
            for i, (cmd, handle) in enumerate(zip(cmds, handles)):
                is_last = i == len(cmds) - 1
                p = subprocess.Popen(cmd, stdin=stdin,
                                     stdout=handle if is_last else subprocess.PIPE,
                                     stderr=handle, close_fds=True)
                # only the child keeps the read end, so upstream sees SIGPIPE if a reader exits
                if stdin is not None:
                    stdin.close()
                stdin = p.stdout
                procs.append(p)
        except OSError as e:
            if stdin is not None:
                stdin.close()
            for p in procs:
                p.kill()
                p.wait()
            raise SubprocessError(cmds[len(procs)], 127, descr or str(e), log_files[len(procs)])
        exitcodes = [p.wait() for p in procs]
    failed = [(cmd, code, log_file) for cmd, code, log_file in zip(cmds, exitcodes, log_files)
              if code != 0]
    if failed:
        for cmd, code, _ in failed:
            logger.info("Exit status %s from: %s" % (code, cmd_str(cmd)))
        cmd, code, log_file = _first_real_failure(failed)
        raise SubprocessError(cmd, code, descr, log_file)
    _run_checks(cmds[-1], descr, checks)

def _first_real_failure(failed):
    for cmd, code, log_file in failed:
        if code != -signal.SIGPIPE:
            return cmd, code, log_file
    return failed[0]

@contextlib.contextmanager
def _log_handle(log_file):
    if log_file:
        utils.safe_makedir(os.path.dirname(log_file))
        with open(log_file, "wb") as handle:
            yield handle
    else:
        yield subprocess.DEVNULL

def _do_run(cmd, descr, checks, log_file=None):
    """Perform running and check results, raising errors for issues.
    """
    cmd = [str(x) for x in cmd]
    try:
        s = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT,
                             close_fds=True)
    except OSError as e:
        raise SubprocessError(cmd, 127, descr or str(e), log_file)
    debug_stdout = collections.deque(maxlen=100)
    with _log_handle(log_file) as log_handle:
        with contextlib.closing(s.stdout):
            for raw in s.stdout:
                if log_handle is not subprocess.DEVNULL:
                    log_handle.write(raw)
                    log_handle.flush()
                line = raw.decode("utf-8", errors="replace")
                if line.rstrip():
                    debug_stdout.append(line)
                    logger.debug(line.rstrip())
        exitcode = s.wait()
    if exitcode != 0:
        if debug_stdout:
            logger.info("Last output from %s:\n%s" % (cmd[0], "".join(debug_stdout).rstrip()))
        raise SubprocessError(cmd, exitcode, descr, log_file)
    _run_checks(cmd, descr, checks)

def _run_checks(cmd, descr, checks):
    # Check for problems not identified by shell return codes
    if checks:
        for check in checks:
            if not check():
                raise SubprocessError(cmd, 0, "%s output check" % (descr or "Command"))

# checks for validating run completed successfully

def file_nonempty(target_file):
    def check():
        ok = utils.file_exists(target_file)
        if not ok:
            logger.info("Did not find non-empty output file {0}".format(target_file))
        return ok
    return check

def file_exists(target_file):
    def check():
        ok = os.path.exists(target_file)
        if not ok:
            logger.info("Did not find output file {0}".format(target_file))
        return ok
    return check
