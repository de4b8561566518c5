"""Run configuration shared by every stage of a long read run.
"""
import collections
import os

PRESETS = ("splice", "map-pb", "map-ont", "ava-pb", "ava-ont", "asm5", "asm10", "asm20", "sr")

DEFAULTS = {"output_dir": os.curdir,
            "threads": 0,
            "preset": "splice",
            "aligner": None,
            "aligner_args": "",
            "sort": True,
            "sort_memory": 768,
            "verbose": False,
            "jitter": 3,
            "system_config": None}

_FIELDS = ["reference_dir", "output_dir", "threads", "preset", "aligner", "aligner_args",
           "sort", "sort_memory", "verbose", "jitter", "input_files", "system_config"]

class RunConfiguration(collections.namedtuple("RunConfiguration", _FIELDS)):
    """Immutable options for a run; resolved values are set with `_replace`.
    """
    __slots__ = ()

    @classmethod
    def create(cls, reference_dir, input_files, **kwargs):
        vals = dict(DEFAULTS)
        vals.update((k, v) for k, v in kwargs.items() if v is not None)
        return cls(reference_dir=reference_dir, input_files=tuple(input_files), **vals)

def get_dirs(config):
    """Standard output locations for a run.
    """
    out_dir = config.output_dir
    return {"out": out_dir,
            "logs": os.path.join(out_dir, "logs"),
            "ref": config.reference_dir}

def unsorted_bam(dirs):
    return os.path.join(dirs["out"], "Unsorted.bam")

def sorted_bam(dirs):
    return os.path.join(dirs["out"], "Sorted.bam")
