"""Utility functionality for logging.
"""
import contextlib
import os
import sys

import logbook

from irlong import utils

LOG_NAME = "irlong"

logger = logbook.Logger(LOG_NAME)
logger_cl = logbook.Logger(LOG_NAME + "-commands")

def get_log_dir(out_dir):
    return os.path.join(out_dir, "logs")

def _is_cl(record, _):
    return record.channel == LOG_NAME + "-commands"

def _not_cl(record, handler):
    return not _is_cl(record, handler)

class CloseableNestedSetup(logbook.NestedSetup):
    def close(self):
        for obj in self.objects:
            if hasattr(obj, "close"):
                obj.close()

def _create_log_handler(log_dir, verbose=False, config=None):
    """Build file handlers in the log directory plus an optional console mirror.

    Log files are truncated at the start of each run.
    """
    if config is None: config = {}
    logbook.set_datetime_format("utc")
    format_str = "".join(["[{record.time:%Y-%m-%dT%H:%MZ}] " if config.get("include_time", True) else "",
                          "{record.message}"])
    utils.safe_makedir(log_dir)
    handlers = [logbook.NullHandler()]
    handlers.append(logbook.FileHandler(os.path.join(log_dir, "%s.log" % LOG_NAME), mode="w",
                                        format_string=format_str, level="INFO",
                                        filter=_not_cl))
    handlers.append(logbook.FileHandler(os.path.join(log_dir, "%s-debug.log" % LOG_NAME), mode="w",
                                        format_string=format_str, level="DEBUG", bubble=True,
                                        filter=_not_cl))
    handlers.append(logbook.FileHandler(os.path.join(log_dir, "%s-commands.log" % LOG_NAME), mode="w",
                                        format_string=format_str, level="DEBUG",
                                        filter=_is_cl))
    if verbose:
        handlers.append(logbook.StreamHandler(sys.stderr, format_string=format_str, level="INFO",
                                              bubble=True, filter=_not_cl))
    return CloseableNestedSetup(handlers)

@contextlib.contextmanager
def run_logging(out_dir, verbose=False, config=None):
    """Direct log records to the run log directory for the duration of a run.

    Handlers are bound to the whole application and closed on exit, so partial
    logs remain on disk when a run aborts.
    """
    handler = _create_log_handler(get_log_dir(out_dir), verbose, config)
    try:
        with handler.applicationbound():
            yield handler
    finally:
        handler.close()
