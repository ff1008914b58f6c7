#!/usr/bin/env python3
"""
Extract code page fonts from a CPI file into a hex byte array
(c) 2019--2024 Rob Hagemans, licence: https://opensource.org/licenses/MIT
"""

import sys
import argparse

import cpihex
from cpihex.scripting import wrap_main
from cpihex.sink import DEFAULT_OUTFILE, remove_output


def _build_parser():
    parser = argparse.ArgumentParser(
        prog='cpi2hex',
        description='Extracts code page fonts from a CPI file into a hex byte array.',
    )
    parser.add_argument('infile', help='CPI file to read')
    parser.add_argument(
        '-i', '--info', action='store_true', default=False,
        help="list information only, don't output to file"
    )
    parser.add_argument(
        '-o', '--output', default=DEFAULT_OUTFILE, metavar='NAME',
        help=f'output file name ({DEFAULT_OUTFILE} by default)'
    )
    parser.add_argument(
        '-b', '--binary', action='store_true', default=False,
        help='output data as raw binary files (-o option will be ignored)'
    )
    parser.add_argument(
        '--directory', default='.',
        help='directory for raw binary files (current directory by default)'
    )
    parser.add_argument(
        '-c', '--codepage', default=0, type=int, metavar='NUMBER',
        help='code page to extract'
    )
    parser.add_argument(
        '-r', '--range', default=None, dest='ranges', metavar='RANGE',
        help=(
            'range of characters to extract; multiple ranges can be specified '
            'separated by commas, e.g. -r 32-167,57,2-4'
        )
    )
    parser.add_argument(
        '-d', '--debug', action='store_true', default=False,
        help='print debug information about file headers'
    )
    parser.add_argument(
        '-v', '--verbose', action='store_true', default=False,
        help='print information about output files'
    )
    return parser


def _report(codepage, outstream):
    """Print the codepage number and font sizes."""
    print(f'Code Page: {codepage.entry.codepage}', file=outstream)
    for fh in codepage.fonts:
        print(f'{fh.width}x{fh.height}\t{fh.num_chars} characters', file=outstream)
    print(file=outstream)


def main(argv=None, outstream=None):
    if argv is None:
        argv = sys.argv[1:]
    outstream = outstream or sys.stdout
    parser = _build_parser()
    if not argv:
        parser.print_help(outstream)
        return 0
    args = parser.parse_args(argv)
    with wrap_main(args.debug, args.verbose):
        ranges = cpihex.parse_ranges(args.ranges) if args.ranges else ()
        options = cpihex.Options(
            info=args.info, binary=args.binary,
            codepage=args.codepage, ranges=ranges,
        )
        if not options.info and not options.binary:
            remove_output(args.output)
        for codepage in cpihex.read_codepages(args.infile, options):
            _report(codepage, outstream)
            if options.info:
                continue
            if options.binary:
                cpihex.write_binaries(codepage.bitmaps, args.directory)
            else:
                cpihex.write_c_source(codepage.bitmaps, args.output)
    return 0


if __name__ == '__main__':
    sys.exit(main())
