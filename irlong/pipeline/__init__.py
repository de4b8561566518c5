"""High level code for driving a long read intron retention run.

This structures processing steps into the following modules:

  - clargs.py: Parse the command line into a run configuration.
  - validate.py: Check the reference, output directory and external tools.
  - main.py: Run the alignment and post-processing stages in order.
"""
