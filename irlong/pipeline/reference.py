"""Recognize the layout of a prepared intron retention reference directory.

A reference directory is produced by a separate reference builder. The set of
files checked here is a pluggable layout: by default only the genome sequence
is required, and the YAML system configuration can name the genome file and
the full manifest of required files, for example::

    reference:
      genome: genome.fa
      required: [genome.fa, transcripts.gtf, IRFinder/ref-cover.bed]
"""
import collections
import os

import toolz as tz

from irlong.pipeline.errors import ReferenceDirError

DEFAULT_GENOME = "genome.fa"

class ReferenceLayout(collections.namedtuple("ReferenceLayout", ["genome", "required"])):
    """Files expected in a reference directory, relative to its root.
    """
    def missing(self, ref_dir):
        return [f for f in self.required if not os.path.exists(os.path.join(ref_dir, f))]

    def __call__(self, ref_dir):
        return not self.missing(ref_dir)

def layout_from_config(config):
    genome = tz.get_in(["reference", "genome"], config, DEFAULT_GENOME)
    required = tz.get_in(["reference", "required"], config) or [genome]
    if genome not in required:
        required = [genome] + list(required)
    return ReferenceLayout(genome, tuple(required))

def check_reference(ref_dir, layout=None, predicate=None):
    """Ensure a reference directory exists and matches the expected layout.

    `predicate` is an optional extra callable taking the reference directory
    and returning False for unusable references. Returns the genome file.
    """
    if layout is None:
        layout = layout_from_config({})
    if not os.path.isdir(ref_dir):
        raise ReferenceDirError("Reference directory not found: %s" % ref_dir)
    if not os.access(ref_dir, os.R_OK | os.X_OK):
        raise ReferenceDirError("Reference directory is not readable: %s" % ref_dir)
    missing = layout.missing(ref_dir)
    if missing:
        raise ReferenceDirError("Reference directory %s is missing expected files: %s\n"
                                "Prepare it with the IRFinder reference builder first."
                                % (ref_dir, ", ".join(missing)))
    if predicate is not None and not predicate(ref_dir):
        raise ReferenceDirError("Reference directory %s failed layout check" % ref_dir)
    return os.path.join(ref_dir, layout.genome)
