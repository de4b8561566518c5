"""Main entry point for a long read alignment and intron retention run.

Stages run strictly in order, each only after the previous one succeeds:

  parsed -> validated -> aligned -> analyzed [-> sorted -> indexed -> cleaned] -> done

Any failure moves the run to `failed` and stops it. Nothing is retried and
completed outputs are left on disk for inspection.
"""
import collections
import sys

from irlong import bam, log
from irlong.log import logger
from irlong.ngsalign import minimap2
from irlong.pipeline import clargs, run_info, validate
from irlong.pipeline.errors import PipelineError, UsageError
from irlong.pipeline.version import __version__
from irlong.provenance import programs, system
from irlong.rnaseq import irfinder

PARSED, VALIDATED, ALIGNED, ANALYZED, SORTED, INDEXED, CLEANED, DONE, FAILED = (
    "parsed", "validated", "aligned", "analyzed", "sorted", "indexed", "cleaned", "done", "failed")

_TRANSITIONS = {PARSED: (VALIDATED,),
                VALIDATED: (ALIGNED,),
                ALIGNED: (ANALYZED,),
                ANALYZED: (SORTED, DONE),
                SORTED: (INDEXED,),
                INDEXED: (CLEANED,),
                CLEANED: (DONE,)}

StageResult = collections.namedtuple("StageResult", ["name", "ok", "error", "output"])

class RunState(object):
    """Track progress of a run through its linear sequence of states.
    """
    def __init__(self):
        self.state = PARSED
        self.history = [PARSED]

    def advance(self, new_state):
        if new_state != FAILED and new_state not in _TRANSITIONS.get(self.state, ()):
            raise ValueError("Invalid run state transition: %s to %s" % (self.state, new_state))
        self.state = new_state
        self.history.append(new_state)
        return new_state

def run_stage(name, fn, *args):
    """Run a single stage, capturing pipeline failures in the result.
    """
    try:
        return StageResult(name, True, None, fn(*args))
    except PipelineError as e:
        return StageResult(name, False, e, None)

def _check_result(result, tracker, log_error=True):
    if not result.ok:
        tracker.advance(FAILED)
        if log_error:
            logger.error("%s stage failed: %s" % (result.name, result.error))
        raise result.error
    return result.output

def _stages(run):
    """Ordered (state, name, function) stages following validation.
    """
    dirs = run.dirs
    config = run.config
    samtools = run.programs["samtools"]
    unsorted = run_info.unsorted_bam(dirs)
    sorted_bam = run_info.sorted_bam(dirs)
    stages = [(ALIGNED, "alignment", lambda: minimap2.align(run)),
              (ANALYZED, "IRFinderBAM", lambda: irfinder.run_irfinder(run, unsorted))]
    if config.sort:
        stages += [(SORTED, "sort",
                    lambda: bam.sort(unsorted, sorted_bam, samtools, config.threads,
                                     config.sort_memory, dirs["logs"])),
                   (INDEXED, "index",
                    lambda: bam.index(sorted_bam, samtools, config.threads, dirs["logs"])),
                   (CLEANED, "cleanup", lambda: bam.remove(unsorted))]
    return stages

def run_pipeline(config, predicate=None, tracker=None):
    """Validate the environment then run every stage, returning the run state.
    """
    if tracker is None:
        tracker = RunState()
    run = _check_result(run_stage("validation", validate.validate_environment, config, predicate),
                        tracker, log_error=False)
    tracker.advance(VALIDATED)
    config = run.config
    with log.run_logging(run.dirs["out"], config.verbose, run.system_config.get("log")):
        logger.info("irlong %s: aligning %s to %s" % (__version__, ", ".join(config.input_files),
                                                      run.genome))
        logger.info("Output directory: %s; threads: %s" % (run.dirs["out"], config.threads))
        minfo = system.machine_info()
        logger.debug("Host resources: %s physical cores, %sGb memory" % (minfo["cores"], minfo["memory"]))
        programs.write_versions(run.dirs["logs"], run.programs)
        for state, name, fn in _stages(run):
            logger.info("Starting %s" % name)
            _check_result(run_stage(name, fn), tracker)
            tracker.advance(state)
            logger.info("Finished %s" % name)
        tracker.advance(DONE)
        final = run_info.sorted_bam(run.dirs) if config.sort else run_info.unsorted_bam(run.dirs)
        logger.info("Run complete, final alignments in %s" % final)
    return tracker

def main(in_args=None):
    """Run from the command line, returning the process exit status.
    """
    if in_args is None:
        in_args = sys.argv[1:]
    try:
        config = clargs.parse_cl_args(in_args)
        run_pipeline(config)
    except UsageError as e:
        if e.usage:
            sys.stderr.write(e.usage)
        sys.stderr.write("ERROR: %s\n" % e)
        return e.exit_code
    except PipelineError as e:
        sys.stderr.write("ERROR: %s\n" % e)
        return e.exit_code
    return 0
