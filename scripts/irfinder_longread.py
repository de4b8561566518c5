#!/usr/bin/env python
"""Align long RNA-seq reads with minimap2 and quantify intron retention with IRFinder.

Usage:
  irfinder_longread.py -r <reference dir> [options] <reads.fastq> [<reads.fastq> ...]
     -d output directory (default: current directory)
     -t threads, 0 uses every physical core (default: 0)
     -x minimap2 preset (default: splice)
     -E path to the minimap2 executable
     -u do not sort and index the final BAM
     -M sort memory per thread in MB (default: 768)
     -y extra arguments for minimap2, quoted as one string
     -v echo the run log to the console
     -j splice site jitter passed to IRFinderBAM (default: 3)
"""
import sys

from irlong.pipeline.main import main

if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
