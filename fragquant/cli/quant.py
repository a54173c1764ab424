# -*- coding: utf-8 -*-

# This file is part of FragQuant.
#
# Licensed under MIT License.

""" FragQuant quant

"""
import os
import sys
import logging as lg
from collections import OrderedDict
from time import time

from fragquant import __version__
from . import SubcommandOptions, configure_logging
from .console import Stopwatch
from ..core.errors import QuantificationError
from ..core.model import load_clusters, load_transcripts
from ..core.normalize import compute_abundances
from ..core.projection import project_clusters
from ..core.reporter import header_comments, write_abundances
from ..utils.helpers import format_minutes as fmtmins


class QuantOptions(SubcommandOptions):

    OPTS = """
    - Input Options:
        - transcripts:
            positional: True
            help: Tab-separated transcript table with columns Name, Length,
                  UniqueCount, TotalCount, LogMass and optionally
                  LogEffectiveLength.
        - clusters:
            positional: True
            help: Tab-separated cluster table with columns Members
                  (comma-separated transcript names), NumHits and optionally
                  LogMass.
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
        - no_effective_length_correction:
            action: store_true
            help: Use reference lengths instead of effective lengths when
                  computing TPM and FPKM.
        - num_mapped_reads:
            type: int
            help: Number of mapped fragments used for normalization. Defaults
                  to the total number of hits over all clusters.
    """


def run(args):
    """Project cluster masses and write per-transcript abundances."""
    opts = QuantOptions(args)
    console = configure_logging(opts)
    lg.info('\n{}\n'.format(opts))
    total_time = time()
    sw = Stopwatch()

    console.banner(__version__, 'quant')
    console.section('Input')
    console.item('Transcripts', os.path.basename(opts.transcripts))
    console.item('Clusters', os.path.basename(opts.clusters))
    console.blank()

    try:
        sw.start('Load')
        transcripts = load_transcripts(opts.transcripts)
        clusters = load_clusters(opts.clusters, transcripts)
        lg.info(f'Loaded {len(transcripts)} transcripts in {len(clusters)} clusters')

        num_mapped = opts.num_mapped_reads
        if num_mapped is None:
            num_mapped = sum(c.num_hits for c in clusters)

        sw.start('Project')
        nproj = project_clusters(clusters, transcripts)
        console.status('Projected {:,} of {:,} clusters'.format(nproj, len(clusters)))

        sw.start('Normalize')
        abundances = compute_abundances(
            transcripts, num_mapped, opts.no_effective_length_correction)
        sw.stop()
    except (QuantificationError, ValueError, OSError) as exc:
        lg.error(str(exc))
        sys.exit(1)

    run_info = OrderedDict()
    run_info['version'] = __version__
    run_info['transcripts'] = len(transcripts)
    run_info['clusters'] = len(clusters)
    run_info['projected_clusters'] = nproj
    run_info['num_mapped_reads'] = num_mapped
    run_info['effective_length_correction'] = not opts.no_effective_length_correction

    outfile = opts.outfile_path('quant.sf')
    write_abundances(abundances, outfile, header_comments(run_info))

    console.blank()
    console.section('Output')
    console.item('Abundances', outfile)
    console.blank()
    console.timing_table(sw)
    lg.info("fragquant quant complete (%s)" % fmtmins(time() - total_time))
