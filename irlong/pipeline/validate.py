"""Check the run environment before launching any external program.
"""
import collections
import os

from irlong import utils
from irlong.pipeline import config_utils, reference, run_info
from irlong.pipeline.errors import OutputDirError
from irlong.provenance import system

ValidatedRun = collections.namedtuple("ValidatedRun", ["config", "dirs", "programs", "genome",
                                                       "system_config"])

def check_output_dir(out_dir):
    """Create the output and log directories, ensuring both are writable.
    """
    try:
        utils.safe_makedir(out_dir)
    except OSError as e:
        raise OutputDirError("Could not create output directory %s: %s" % (out_dir, e))
    if not os.path.isdir(out_dir):
        raise OutputDirError("Output path exists but is not a directory: %s" % out_dir)
    if not os.access(out_dir, os.W_OK | os.X_OK):
        raise OutputDirError("Output directory is not writable: %s" % out_dir)
    log_dir = os.path.join(out_dir, "logs")
    try:
        utils.safe_makedir(log_dir)
    except OSError as e:
        raise OutputDirError("Could not create log directory %s: %s" % (log_dir, e))
    if not os.path.isdir(log_dir) or not os.access(log_dir, os.W_OK | os.X_OK):
        raise OutputDirError("Log directory is not writable: %s" % log_dir)
    return log_dir

def find_programs(config, system_config):
    """Locate minimap2, samtools and IRFinderBAM, confirming the first two run.
    """
    programs = {}
    programs["minimap2"] = config_utils.get_program("minimap2", system_config, override=config.aligner)
    config_utils.check_program_runs("minimap2", programs["minimap2"])
    programs["samtools"] = config_utils.get_program("samtools", system_config)
    config_utils.check_program_runs("samtools", programs["samtools"])
    programs["irfinder"] = config_utils.get_program("irfinder", system_config)
    return programs

def validate_environment(config, predicate=None):
    """Confirm every precondition of a run, resolving the thread count.

    Checks, in order: the reference directory layout, the output directory,
    the aligner, samtools and IRFinderBAM. A thread count of 0 is replaced by
    the number of physical cores. Raises on the first failure.
    """
    system_config = config_utils.load_system_config(config.system_config)
    layout = reference.layout_from_config(system_config)
    genome = reference.check_reference(config.reference_dir, layout, predicate)
    config = config._replace(output_dir=os.path.abspath(config.output_dir))
    check_output_dir(config.output_dir)
    programs = find_programs(config, system_config)
    config = config._replace(threads=system.resolve_threads(config.threads))
    return ValidatedRun(config, run_info.get_dirs(config), programs, genome, system_config)
