#! /usr/bin/env python
# -*- coding: utf-8 -*-

# This file is part of FragQuant.
#
# Licensed under MIT License.

""" Main functionality of FragQuant

"""
import sys
import argparse

from fragquant import __version__
from .cli import quant as cli_quant
from .cli import libtype as cli_libtype


USAGE = ''' %(prog)s <command> [<args>]

The most commonly used commands are:
   quant     Project cluster masses and report TPM/FPKM per transcript
   libtype   Tally observed library formats against an expected library type

'''


def main():
    if len(sys.argv) == 1:
        empty_parser = argparse.ArgumentParser(
            description='Transcript abundance estimation from ambiguous alignments',
            usage=USAGE,
        )
        empty_parser.print_help(sys.stderr)
        sys.exit(1)

    parser = argparse.ArgumentParser(
        description='Transcript abundance estimation from ambiguous alignments',
    )
    parser.add_argument('--version',
        action='version',
        version=__version__,
        default=__version__,
    )

    subparser = parser.add_subparsers(help='Sub-command help', dest='subcommand')

    ''' Parser for quant '''
    quant_parser = subparser.add_parser('quant',
        description='''Project cluster masses onto feasible counts and report abundances''',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    cli_quant.QuantOptions.add_arguments(quant_parser)
    quant_parser.set_defaults(func=cli_quant.run)

    ''' Parser for libtype '''
    libtype_parser = subparser.add_parser('libtype',
        description='''Tally observed library formats in alignment files''',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    cli_libtype.LibTypeOptions.add_arguments(libtype_parser)
    libtype_parser.set_defaults(func=cli_libtype.run)

    args = parser.parse_args()
    args.func(args)


if __name__ == '__main__':
    main()
