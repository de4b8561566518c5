"""Loads configurations from .yaml files and locates external programs.
"""
import os
import subprocess

import toolz as tz
import yaml

from irlong import utils
from irlong.pipeline.errors import DependencyError, ValidationError

# Default executable names for each external program
PROGRAMS = {"minimap2": "minimap2",
            "samtools": "samtools",
            "irfinder": "IRFinderBAM"}

def load_system_config(config_file=None):
    """Load an optional YAML system configuration.

    Returns an empty configuration when no file is given.
    """
    if not config_file:
        return {}
    if not os.path.isfile(config_file):
        raise ValidationError("Configuration file not found: %s" % config_file)
    with open(config_file) as in_handle:
        try:
            config = yaml.safe_load(in_handle)
        except yaml.YAMLError as e:
            raise ValidationError("Could not parse configuration file %s:\n%s" % (config_file, e))
    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ValidationError("Configuration file %s should contain a YAML mapping" % config_file)
    _check_config_shape(config, config_file)
    return config

# Expected types of values in each configuration section
_SECTION_TYPES = {"resources": {"cmd": str},
                  "reference": {"genome": str, "required": list},
                  "log": {"include_time": bool}}

def _check_config_shape(config, config_file):
    """Ensure configuration sections hold the mappings, lists and values expected.
    """
    problems = []
    for section, val_types in _SECTION_TYPES.items():
        vals = config.get(section)
        if vals is None:
            continue
        if not isinstance(vals, dict):
            problems.append("`%s` should be a mapping, got: %s" % (section, vals))
            continue
        if section == "resources":
            for name, pconfig in vals.items():
                if pconfig is None:
                    continue
                if not isinstance(pconfig, dict):
                    problems.append("`resources: %s` should be a mapping like {cmd: /path/to/%s}, got: %s"
                                    % (name, name, pconfig))
                    continue
                for key, val_type in val_types.items():
                    if key in pconfig and not isinstance(pconfig[key], val_type):
                        problems.append("`resources: %s: %s` should be a %s, got: %s" %
                                        (name, key, val_type.__name__, pconfig[key]))
            continue
        for key, val_type in val_types.items():
            if key in vals and not isinstance(vals[key], val_type):
                problems.append("`%s: %s` should be a %s, got: %s" %
                                (section, key, val_type.__name__, vals[key]))
        if isinstance(vals.get("required"), list) and not all(isinstance(x, str) for x in vals["required"]):
            problems.append("`reference: required` should list file names, got: %s" % vals["required"])
    if problems:
        raise ValidationError("Problems in configuration file %s:\n%s" % (config_file, "\n".join(problems)))

def get_resources(name, config):
    """Retrieve resources for a program, pulling from the resources section.
    """
    return tz.get_in(["resources", name], config, {}) or {}

def get_program(name, config, override=None):
    """Retrieve the full path to an external program.

    An explicit `override` path wins over the configured `cmd` from the
    `resources` section, which wins over the default program name. Names
    without a directory component are searched on the PATH.
    """
    cmd = override or get_resources(name, config).get("cmd") or PROGRAMS.get(name, name)
    cmd = os.path.expandvars(os.path.expanduser(cmd))
    if os.path.isdir(cmd):
        raise DependencyError("%s should be an executable, got a directory: %s" % (name, cmd))
    program = utils.which(cmd)
    if not program:
        if os.path.dirname(cmd):
            raise DependencyError("%s is not an executable file: %s" % (name, cmd))
        raise DependencyError("%s not found on the PATH. Install it or configure "
                              "resources: {%s: {cmd: /path/to/%s}}" % (cmd, name, cmd))
    return os.path.abspath(program)

def check_program_runs(name, program, args=("--version",)):
    """Confirm an external program can be started and exits cleanly.

    Returns the captured output for callers interested in version details.
    """
    try:
        out = subprocess.run([program] + list(args), stdout=subprocess.PIPE,
                             stderr=subprocess.STDOUT, check=True)
    except OSError as e:
        raise DependencyError("Could not run %s (%s): %s" % (name, program, e))
    except subprocess.CalledProcessError as e:
        raise DependencyError("%s (%s) failed to run, exit status %s:\n%s" %
                              (name, program, e.returncode,
                               e.output.decode("utf-8", errors="replace").strip()))
    return out.stdout.decode("utf-8", errors="replace")
