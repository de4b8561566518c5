"""Failures that stop a run, each mapping to a non-zero exit status.
"""

class PipelineError(Exception):
    exit_code = 1

class UsageError(PipelineError):
    """Bad or missing command line input, reported alongside the usage line.
    """
    def __init__(self, message, usage=None):
        self.usage = usage
        super(UsageError, self).__init__(message)

class ValidationError(PipelineError):
    """Bad option value, missing input file or unusable directory."""

class ReferenceDirError(ValidationError):
    pass

class OutputDirError(ValidationError):
    pass

class DependencyError(PipelineError):
    """Required external program is missing or can't be run."""

class SubprocessError(PipelineError):
    """External program ran and exited with a failure.
    """
    def __init__(self, cmd, returncode, descr=None, log_file=None):
        self.cmd = cmd
        self.returncode = returncode
        self.descr = descr
        self.log_file = log_file
        msg = "%s failed with exit status %s: %s" % (descr or "Command", returncode, cmd_str(cmd))
        if log_file:
            msg += "\nSee %s for details" % log_file
        super(SubprocessError, self).__init__(msg)

def cmd_str(cmd):
    return " ".join(str(x) for x in cmd) if isinstance(cmd, (list, tuple)) else str(cmd)
