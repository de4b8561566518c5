"""Functionality to sort, index and clean up BAM files with samtools.
"""
import os

from irlong import utils
from irlong.log import logger
from irlong.provenance import do

def sort_cl(samtools, in_bam, out_file, threads, memory_mb):
    return [samtools, "sort", "-@", str(threads), "-m", "%sM" % memory_mb, "-o", out_file, in_bam]

def sort(in_bam, out_file, samtools, threads, memory_mb, log_dir):
    """Coordinate sort a BAM file, logging the exact command used.
    """
    cmd = sort_cl(samtools, in_bam, out_file, threads, memory_mb)
    logger.info("Sorting BAM file: %s" % " ".join(cmd))
    do.run(cmd, "Sort BAM file %s to %s" % (os.path.basename(in_bam), os.path.basename(out_file)),
           checks=[do.file_nonempty(out_file)],
           log_file=os.path.join(log_dir, "samtools-sort.log"))
    return out_file

def index(in_bam, samtools, threads, log_dir):
    """Index a sorted BAM file, returning the index file.
    """
    index_file = "%s.bai" % in_bam
    cmd = [samtools, "index", "-@", str(threads), in_bam]
    do.run(cmd, "Index BAM file: %s" % os.path.basename(in_bam),
           checks=[do.file_exists(index_file)],
           log_file=os.path.join(log_dir, "samtools-index.log"))
    return index_file

def remove(in_bam):
    """Remove a BAM file and its index, if present.
    """
    if os.path.exists(in_bam):
        utils.remove_safe(in_bam)
    if os.path.exists(in_bam + ".bai"):
        utils.remove_safe(in_bam + ".bai")
