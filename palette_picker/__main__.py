"""palette-tool — Extract a dominant-colour palette from an image.

Usage: palette-tool <quantizer> <image> [options]
       palette-tool extract <image> [options]

Quantizers are auto-discovered from palette_picker/quantizers/.
Each quantizer module's docstring is its documentation.
Run `palette-tool help <quantizer>` for full module docs.

Environment variables / .env loading:
  OS environment variables are always used first.
  If a variable is not set, palette-tool looks for a .env file starting from
  the current directory and walking up, stopping at the nearest .git boundary.
  Use --env-file to override the .env location explicitly.
  Command-line flags override PALETTE_TOOL_* settings.
"""

import argparse
import asyncio
import importlib
import os
import sys

import pyperclip
from loguru import logger

from palette_picker import registry
from palette_picker.core import filters as palette_filters
from palette_picker.core.config import Settings, parse_size
from palette_picker.core.env import load_env
from palette_picker.core.report import format_json, format_text
from palette_picker.core.types import SourceImage
from palette_picker.session import PaletteSession
from palette_picker.state import AppState

EXTRACT = 'extract'


def _load_quantizer_module(name: str) -> object:
    """Load the raw module for a quantizer (for docstring access)."""
    return importlib.import_module(registry.module_name(name))


def _short_doc(name: str) -> str:
    doc = (_load_quantizer_module(name).__doc__ or '').strip()
    return doc.splitlines()[0] if doc else registry.get(name).help


def _size_arg(value: str) -> tuple[int, int]:
    try:
        return parse_size(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f'expected an integer, got {value!r}') from None
    if n < 1:
        raise argparse.ArgumentTypeError(f'must be >= 1, got {n}')
    return n


def _add_extract_args(p: argparse.ArgumentParser) -> None:
    p.add_argument('image', help='Path to an image (PNG, JPEG, GIF, BMP, WebP, ...)')
    p.add_argument('-j', '--json', action='store_true', help='Output JSON instead of text')
    p.add_argument('-m', '--max-colors', type=_positive_int, metavar='N', help='Maximum palette length')
    p.add_argument('-s', '--size', type=_size_arg, metavar='WxH', help='Analysis footprint (default 200x200)')
    p.add_argument(
        '-f',
        '--filter',
        action='append',
        choices=sorted(palette_filters.FILTERS),
        help='Drop colours rejected by this filter (repeatable)',
    )
    p.add_argument('-c', '--copy', type=int, metavar='INDEX', help='Copy swatch INDEX hex code to the clipboard')
    p.add_argument('--no-color', action='store_true', help='No colour blocks in text output')


def _build_parser() -> argparse.ArgumentParser:
    quantizers = registry.all_quantizers()

    epilog = (
        'Examples:\n'
        '  palette-tool median-cut photo.jpg\n'
        '  palette-tool extract photo.jpg            # algorithm from PALETTE_TOOL_QUANTIZER\n'
        '  palette-tool median-cut photo.jpg --json\n'
        '  palette-tool median-cut photo.jpg --max-colors 16 --size 100x100\n'
        '  palette-tool median-cut photo.jpg --filter avoid-red-black-white\n'
        '  palette-tool kmeans photo.jpg --max-colors 8 --copy 0\n'
        '  palette-tool help median-cut\n'
        '\n'
        'Settings (set in .env or environment):\n'
        '  PALETTE_TOOL_MAX_COLORS=200   PALETTE_TOOL_SIZE=200x200\n'
        '  PALETTE_TOOL_QUANTIZER=median-cut   PALETTE_TOOL_FILTERS=\n'
        '  PALETTE_TOOL_LOG_LEVEL=WARNING\n'
    )
    parser = argparse.ArgumentParser(
        prog='palette-tool',
        description='Extract a dominant-colour palette from an image.',
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        '--env-file',
        metavar='PATH',
        default=None,
        help='Path to .env file (default: walk up from cwd to .git boundary)',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging to stderr')
    sub = parser.add_subparsers(dest='quantizer', help='Quantization algorithm')

    # Auto-register each quantizer as a subcommand using module docstring
    for name in sorted(quantizers):
        _add_extract_args(sub.add_parser(name, help=_short_doc(name)))

    # `extract` uses PALETTE_TOOL_QUANTIZER (default median-cut)
    _add_extract_args(sub.add_parser(EXTRACT, help='Use the quantizer named by PALETTE_TOOL_QUANTIZER'))

    # `help` subcommand — prints full module docstring for a quantizer
    help_parser = sub.add_parser('help', help='Print full docs for a quantizer')
    help_parser.add_argument('command', nargs='?', help='Quantizer name')

    return parser


def _print_help(command: str | None) -> None:
    """Print full module docstring for a quantizer."""
    quantizers = registry.all_quantizers()

    if command is None:
        print('Available quantizers:\n')
        for name in sorted(quantizers):
            marker = '*' if name == registry.DEFAULT else ' '
            print(f' {marker}{name:<14} {_short_doc(name)}')
        print('\n* default. Run: palette-tool help <quantizer> for full docs.')
        return

    if command not in quantizers:
        print(f'Unknown quantizer: {command}', file=sys.stderr)
        print(f'Available: {", ".join(sorted(quantizers))}', file=sys.stderr)
        sys.exit(1)

    doc = (_load_quantizer_module(command).__doc__ or '').strip()
    if not doc:
        print(f'(No module docs for {command!r})')
        return
    print(doc)


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level, format='{time:HH:mm:ss} | {level: <7} | {message}')


def _settings_from_args(base: Settings, args: argparse.Namespace) -> Settings:
    return Settings(
        max_colors=args.max_colors or base.max_colors,
        size=args.size or base.size,
        quantizer=base.quantizer if args.quantizer == EXTRACT else args.quantizer,
        filters=tuple(args.filter) if args.filter else base.filters,
        log_level='DEBUG' if args.verbose else base.log_level,
    )


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Load .env before anything else — OS env vars always win
    env_path = load_env(env_file=getattr(args, 'env_file', None))

    if not args.quantizer:
        parser.print_help()
        sys.exit(1)

    if args.quantizer == 'help':
        _print_help(getattr(args, 'command', None))
        return

    try:
        settings = _settings_from_args(Settings.from_env(), args)
    except ValueError as e:
        print(f'Error: {e}', file=sys.stderr)
        sys.exit(1)

    _configure_logging(settings.log_level)
    if env_path:
        logger.debug('Loaded {}', env_path)

    if not os.path.isfile(args.image):
        print(f'Error: image not found: {args.image}', file=sys.stderr)
        sys.exit(1)

    with open(args.image, 'rb') as f:
        source = SourceImage(data=f.read(), name=args.image)

    session = PaletteSession(settings)
    ansi = not args.no_color and sys.stdout.isatty()

    # Presentation layer: render each settled state
    def render(state: AppState) -> None:
        if state.pending:
            return
        name = state.image.name if state.image else None
        if args.json:
            print(format_json(state.palette, image_name=name or args.image, error=state.error))
            if state.error:
                print(f'Error: {state.error}', file=sys.stderr)
        elif state.error:
            print(format_text(state.palette, error=state.error), file=sys.stderr)
        else:
            print(format_text(state.palette, image_name=name, ansi=ansi))

    session.store.subscribe(render)
    state = asyncio.run(session.select(source))

    if state.error:
        sys.exit(1)

    if args.copy is not None:
        try:
            notice = session.copy_swatch(args.copy)
        except IndexError as e:
            print(f'Error: {e}', file=sys.stderr)
            sys.exit(1)
        except pyperclip.PyperclipException as e:
            print(f'Error: clipboard unavailable: {e}', file=sys.stderr)
            sys.exit(1)
        print(notice, file=sys.stderr)


if __name__ == '__main__':
    main()
