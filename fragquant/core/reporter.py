# This file is part of FragQuant.
#
# Licensed under MIT License.

"""Report generation for FragQuant.

Functions take the computed tables rather than whole pipeline objects so
they can be called from any subcommand.
"""

from .normalize import QUANT_COLUMNS


def header_comments(run_info):
    """Render run information as ``# key: value`` comment lines."""
    return ''.join('# {}: {}\n'.format(*tup) for tup in run_info.items())


def write_abundances(abundances, filename, comments=''):
    """Write the quantification table.

    Args:
        abundances: DataFrame from :func:`compute_abundances`.
        filename: Output path.
        comments: Caller-supplied comment block, written verbatim before the
            column header.
    """
    with open(filename, 'w') as outh:
        if comments:
            outh.write(comments if comments.endswith('\n') else comments + '\n')
        abundances[QUANT_COLUMNS].to_csv(outh, sep='\t', index=False)


def write_format_counts(tally, filename):
    """Write observed library format counts and a summary comment block."""
    _comment = [
        'expected_format: {}'.format(tally.expected),
        'num_fragments: {}'.format(tally.num_fragments),
        'num_compatible: {}'.format(tally.num_compatible),
        'compatible_ratio: {:.6f}'.format(tally.compatible_ratio),
    ]
    _comment += ['{}: {}'.format(str(k).replace(' ', '_'), v) for k, v in sorted(tally.orphans.items(), key=str)]
    _comment += ['skipped_{}: {}'.format(k, v) for k, v in sorted(tally.skipped.items())]
    with open(filename, 'w') as outh:
        outh.write(''.join('# {}\n'.format(c) for c in _comment))
        tally.to_frame().to_csv(outh, sep='\t', index=False)
