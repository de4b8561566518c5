"""Parsing of command line arguments into a run configuration.
"""
import argparse
import os
import re
import sys

from irlong.pipeline import run_info
from irlong.pipeline.errors import UsageError, ValidationError
from irlong.pipeline.version import __version__

_UINT_RE = re.compile(r"^[0-9]+$")

DESCRIPTION = """Align long RNA-seq reads with minimap2 and quantify intron retention.

Reads are aligned against the genome of an IRFinder reference directory and
streamed into an unsorted BAM file (Unsorted.bam), which is passed to
IRFinderBAM. Unless -u is given, the BAM is then sorted (Sorted.bam) and
indexed, and Unsorted.bam is removed. Logs are written to <output dir>/logs.
"""

EPILOG = "minimap2 presets: %s" % ", ".join(run_info.PRESETS)

class CommandLineParser(argparse.ArgumentParser):
    """Argument parser reporting problems as UsageError instead of exiting.
    """
    def error(self, message):
        raise UsageError(message, self.format_usage())

def unsigned_int(val):
    if not _UINT_RE.match(val):
        raise argparse.ArgumentTypeError("expected an unsigned integer, got '%s'" % val)
    return int(val)

def preset(val):
    if val not in run_info.PRESETS:
        raise argparse.ArgumentTypeError("unknown preset '%s', choose from: %s" %
                                         (val, " ".join(run_info.PRESETS)))
    return val

def executable(val):
    if os.path.isdir(val):
        raise argparse.ArgumentTypeError("'%s' is a directory, not an executable" % val)
    if not (os.path.isfile(val) and os.access(val, os.X_OK)):
        raise argparse.ArgumentTypeError("'%s' is not an executable file" % val)
    return os.path.abspath(val)

def setup_parser():
    parser = CommandLineParser(prog="irfinder_longread.py", description=DESCRIPTION, epilog=EPILOG,
                               formatter_class=argparse.RawDescriptionHelpFormatter,
                               add_help=False, allow_abbrev=False)
    parser.add_argument("input_files", nargs="*", metavar="reads.fastq",
                        help="One or more long read files (FASTQ or FASTA, optionally gzipped)")
    parser.add_argument("-r", dest="reference_dir", required=True,
                        help="IRFinder reference directory (required)")
    parser.add_argument("-d", dest="output_dir",
                        help="Output directory. Defaults to the current directory")
    parser.add_argument("-t", dest="threads", type=unsigned_int,
                        help="Threads to use. 0 (default) uses every physical core")
    parser.add_argument("-x", dest="preset", type=preset,
                        help="minimap2 preset. Defaults to splice")
    parser.add_argument("-E", dest="aligner", type=executable,
                        help="Path to the minimap2 executable. Defaults to minimap2 on the PATH")
    parser.add_argument("-u", dest="sort", action="store_false", default=None,
                        help="Keep the unsorted BAM; do not sort and index it")
    parser.add_argument("-M", dest="sort_memory", type=unsigned_int,
                        help="Memory per sorting thread in MB. Defaults to 768")
    parser.add_argument("-y", dest="aligner_args",
                        help="Extra arguments passed to minimap2, quoted as one string")
    parser.add_argument("-v", dest="verbose", action="store_true", default=None,
                        help="Echo the run log to the console")
    parser.add_argument("-j", dest="jitter", type=unsigned_int,
                        help="Splice site tolerance in bases passed to IRFinderBAM. Defaults to 3")
    parser.add_argument("--config", dest="system_config",
                        help="YAML configuration with program paths and reference layout")
    parser.add_argument("--version", action="version", version="%(prog)s " + __version__)
    parser.add_argument("-h", "--help", action="store_true", help=argparse.SUPPRESS)
    return parser

def _join_option_values(in_args, opts=("-y",)):
    """Attach the value to options taking free-form text.

    Values such as `-y --secondary=no` would otherwise be read as options.
    """
    out = []
    args = iter(in_args)
    for arg in args:
        if arg in opts:
            val = next(args, None)
            out.append(arg if val is None else "%s=%s" % (arg, val))
        else:
            out.append(arg)
    return out

def print_help(parser=None, out_handle=None):
    (parser or setup_parser()).print_help(out_handle or sys.stderr)

def parse_cl_args(in_args):
    """Parse command line arguments into a RunConfiguration.

    With no arguments, or when help is requested, prints usage to stderr and
    exits with status 1. The first problem found raises a UsageError or
    ValidationError.
    """
    parser = setup_parser()
    in_args = _join_option_values(list(in_args))
    if not in_args or "-h" in in_args or "--help" in in_args:
        print_help(parser)
        sys.exit(1)
    args = parser.parse_intermixed_args(in_args)
    if not args.input_files:
        raise UsageError("at least one input read file is required", parser.format_usage())
    for f in args.input_files:
        if not os.path.isfile(f):
            raise ValidationError("Input file not found: %s" % f)
    kwargs = {k: getattr(args, k) for k in ["output_dir", "threads", "preset", "aligner",
                                            "aligner_args", "sort", "sort_memory", "verbose",
                                            "jitter", "system_config"]}
    return run_info.RunConfiguration.create(os.path.abspath(args.reference_dir),
                                            [os.path.abspath(f) for f in args.input_files],
                                            **kwargs)
