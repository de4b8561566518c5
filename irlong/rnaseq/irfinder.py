"""Intron retention quantification with IRFinder on long read alignments.

https://github.com/RitchieLabIGH/IRFinder
"""
import os

from irlong.log import logger
from irlong.provenance import do

def irfinder_cl(irfinder, bam_file, ref_dir, out_dir, threads, jitter, verbose=False):
    cmd = [irfinder]
    if verbose:
        cmd.append("-v")
    cmd += ["-t", str(threads), "-j", str(jitter), "-r", ref_dir, "-d", out_dir, bam_file]
    return cmd

def run_irfinder(run, bam_file):
    """Quantify intron retention from the unsorted long read BAM file.
    """
    config, dirs = run.config, run.dirs
    cmd = irfinder_cl(run.programs["irfinder"], bam_file, config.reference_dir, dirs["out"],
                      config.threads, config.jitter, config.verbose)
    logger.info("Running IRFinderBAM on %s with jitter %s" % (os.path.basename(bam_file), config.jitter))
    do.run(cmd, "IRFinderBAM", log_file=os.path.join(dirs["logs"], "irfinder.log"))
    logger.info("IRFinderBAM finished")
    return dirs["out"]
