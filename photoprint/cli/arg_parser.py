"""
Argument parsing for the CLI interface.

Provides functions to create and configure the argument parser for the
photoprint command-line interface.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from ..config import SUPPORTED_BIT_DEPTHS
from ..utils.validators import parse_size, parse_extensions


def _size_type(value: str) -> tuple[int, int]:
    try:
        return parse_size(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance

    Notes:
        - Mode flags are checked by the orchestrator so that a bad
          combination is reported as a configuration error
        - Options left unset fall back to the user configuration
    """
    parser = argparse.ArgumentParser(
        prog='photoprint',
        description='Fingerprint photos and find duplicates against stored fingerprints',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s -g -s ~/Pictures -d ~/fingerprints
      Generate a fingerprint for every photo under ~/Pictures

  %(prog)s -f -s ~/fingerprints -d /mnt/phone --low-threshold 10 --high-threshold 1000
      Report photos in /mnt/phone that match a stored fingerprint

  %(prog)s -f -s ~/fingerprints -d /mnt/phone --low-threshold 10 \\
        --high-threshold 1000 --pairs-output pairs.json
      Also write the [candidate, match] pairs for the review tool

  %(prog)s -m -s ~/Pictures
      Print the capture timestamp of every photo

Output:
  Find duplicates prints one JSON object per match on stdout.
  Metadata mode prints "path<TAB>YYYY-MM-DD HH:MM:SS" lines.
  Log messages go to stderr.
        """
    )

    # Modes
    modes = parser.add_argument_group('modes (choose exactly one)')
    modes.add_argument(
        '-g', '--generate',
        action='store_true',
        help='Generate fingerprints from SOURCE into DESTINATION'
    )
    modes.add_argument(
        '-f', '--find-duplicates',
        action='store_true',
        help='Search DESTINATION for images matching fingerprints stored in SOURCE'
    )
    modes.add_argument(
        '-m', '--metadata',
        action='store_true',
        help='Print capture timestamps of images in SOURCE'
    )

    # Directories
    parser.add_argument(
        '-s', '--source',
        type=Path,
        help='Source image directory, or fingerprint directory with --find-duplicates'
    )
    parser.add_argument(
        '-d', '--destination',
        type=Path,
        help='Fingerprint output directory, or directory to search with --find-duplicates'
    )

    # Performance options
    parser.add_argument(
        '-t', '--threads',
        type=int,
        default=None,
        help='Number of worker threads. Default: number of CPUs'
    )

    # Matching options
    parser.add_argument(
        '--fuzz',
        type=float,
        default=None,
        dest='fuzz_factor',
        help='Per-pixel tolerance (0-255) applied before scoring. Default: 0'
    )
    parser.add_argument(
        '--low-threshold',
        type=float,
        default=None,
        help='Distortion below which images are identical (required for -f)'
    )
    parser.add_argument(
        '--high-threshold',
        type=float,
        default=None,
        help='Distortion below which images are similar (required for -f)'
    )

    # Normalization options
    parser.add_argument(
        '--size',
        type=_size_type,
        default=None,
        metavar='WxH',
        help='Fingerprint dimensions. Default: 100x100'
    )
    parser.add_argument(
        '--depth',
        type=int,
        choices=SUPPORTED_BIT_DEPTHS,
        default=None,
        dest='bit_depth',
        help='Fingerprint bit depth. Default: 32'
    )
    parser.add_argument(
        '--extensions',
        type=parse_extensions,
        default=None,
        help='Comma separated list of recognized image suffixes'
    )

    # Export options
    parser.add_argument(
        '--pairs-output',
        type=Path,
        help='Write matches as a JSON array of [candidate, match] pairs'
    )

    # Output options
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )
    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bars (useful for piping output)'
    )

    return parser


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: List of argument strings (default: sys.argv)

    Returns:
        Parsed arguments as Namespace object

    Examples:
        >>> args = parse_arguments(['-m', '-s', '/photos'])
        >>> args.metadata
        True
    """
    parser = create_parser()
    return parser.parse_args(argv)


__all__ = [
    'create_parser',
    'parse_arguments',
]
