"""Alignment with minimap2: https://github.com/lh3/minimap2
"""
import os
import shlex

from irlong.log import logger
from irlong.pipeline import run_info
from irlong.provenance import do

def align_cl(minimap2, genome, input_files, threads, preset, extra_args=""):
    """minimap2 command line producing SAM output on standard out.
    """
    return ([minimap2, "-a", "-t", str(threads), "-x", preset] + shlex.split(extra_args or "") +
            [genome] + list(input_files))

def tobam_cl(samtools, out_file):
    """samtools command line compressing SAM from standard in to a BAM file.
    """
    return [samtools, "view", "-b", "-o", out_file, "-"]

def align(run):
    """Perform piped alignment of read files, generating an unsorted BAM.

    minimap2 output streams straight into samtools without an intermediate
    SAM file. A failure on either side of the pipe aborts the run, leaving
    any partial BAM in place.
    """
    config, dirs = run.config, run.dirs
    out_file = run_info.unsorted_bam(dirs)
    cmds = [align_cl(run.programs["minimap2"], run.genome, config.input_files, config.threads,
                     config.preset, config.aligner_args),
            tobam_cl(run.programs["samtools"], out_file)]
    log_files = [os.path.join(dirs["logs"], "minimap2.log"),
                 os.path.join(dirs["logs"], "samtools-view.log")]
    logger.info("Aligning %s read file(s) with minimap2 preset %s using %s threads" %
                (len(config.input_files), config.preset, config.threads))
    do.run_pipe(cmds, "minimap2 alignment", log_files, checks=[do.file_nonempty(out_file)])
    logger.info("Alignment finished: %s" % out_file)
    return out_file
