# -*- coding: utf-8 -*-

# This file is part of FragQuant.
#
# Licensed under MIT License.

""" FragQuant libtype

"""
import os
import sys
import logging as lg
from time import time

from fragquant import __version__
from . import SubcommandOptions, configure_logging
from .console import Stopwatch
from ..core.alignment import tally_library_formats
from ..core.errors import QuantificationError
from ..core.libformat import LibraryFormat
from ..core.reporter import write_format_counts
from ..utils.helpers import format_minutes as fmtmins
from ..utils.logmath import prob_to_log


class LibTypeOptions(SubcommandOptions):

    OPTS = """
    - Input Options:
        - samfiles:
            positional: True
            nargs: "+"
            help: Alignment files (SAM or BAM). All files must share the same
                  reference sequences.
        - libtype:
            default: IU
            help: Expected library type, e.g. IU, ISR, ISF, OU, MSF, U, SF, SR.
        - ncpu:
            default: 1
            type: int
            help: Number of decompression threads.
    - Reporting Options:
        - quiet:
            action: store_true
            help: Silence (most) output.
        - verbose:
            action: store_true
            help: Show detailed progress.
        - debug:
            action: store_true
            help: Print debug messages.
        - logfile:
            type: argparse.FileType('w')
            help: Log output to this file.
        - outdir:
            default: .
            help: Output directory.
        - exp_tag:
            default: fragquant
            help: Experiment tag
    - Model Parameters:
        - incompat_prior:
            type: float
            default: 1e-20
            help: Prior probability that an alignment disagreeing with the
                  expected library type is correct.
    """


def run(args):
    """Tally observed library formats and their compatibility."""
    opts = LibTypeOptions(args)
    console = configure_logging(opts)
    lg.info('\n{}\n'.format(opts))
    total_time = time()
    sw = Stopwatch()

    console.banner(__version__, 'libtype')
    try:
        expected = LibraryFormat.from_string(opts.libtype)
        incompat = prob_to_log(opts.incompat_prior)
    except ValueError as exc:
        lg.error(str(exc))
        sys.exit(1)

    console.section('Input')
    for f in opts.samfiles:
        console.item('Alignments', os.path.basename(f))
    console.item('Library type', str(expected))
    console.blank()

    try:
        sw.start('Tally')
        tally = tally_library_formats(opts.samfiles, expected, incompat, threads=opts.ncpu)
        sw.stop()
    except (QuantificationError, ValueError, OSError) as exc:
        lg.error(str(exc))
        sys.exit(1)

    console.status('{:,} fragments, {:,} compatible with {} ({:.2%})'.format(
        tally.num_fragments, tally.num_compatible, expected, tally.compatible_ratio))
    for fmt, n in tally.counts.most_common():
        console.verbose('{:<8}{:>12,}'.format(str(fmt), n))
    if tally.num_fragments and tally.compatible_ratio < 0.95:
        lg.warning(
            f'Only {tally.compatible_ratio:.2%} of fragments agree with library type {expected}')

    outfile = opts.outfile_path('lib_format_counts.tsv')
    write_format_counts(tally, outfile)

    console.blank()
    console.section('Output')
    console.item('Format counts', outfile)
    console.blank()
    console.timing_table(sw)
    lg.info("fragquant libtype complete (%s)" % fmtmins(time() - total_time))
