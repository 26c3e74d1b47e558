"""Command-line entry point for frame-to-atlas workflows."""

import argparse
import sys
from pathlib import Path

from frames2spritesheet.core import AtlasSettings, RoundingPolicy
from frames2spritesheet.core.errors import ValidationError
from frames2spritesheet.main import configure_logging, run
from frames2spritesheet.utils import validators


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="frames2sprite",
        description="Crop numbered animation frames, pack them into an atlas and update frame records.",
    )
    parser.add_argument("directories", type=Path, nargs="+", help="Asset directories holding meta.json and 0.png..")
    parser.add_argument(
        "--search-dir",
        type=Path,
        action="append",
        dest="search_dirs",
        metavar="DIR",
        help="Directory to look for <name>.json in; repeat to search several in order",
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Root whose sub-directories are scanned when no --search-dir is given (default: parent of cwd)",
    )
    parser.add_argument(
        "--rounding",
        choices=[policy.value for policy in RoundingPolicy],
        default=RoundingPolicy.FLOOR.value,
        help="How scaled crop coordinates are turned into pixels (default: floor)",
    )
    parser.add_argument("--colors", type=int, default=256, help="Palette size of the indexed atlas (default: 256)")
    parser.add_argument(
        "--alpha-cutoff",
        type=int,
        default=127,
        help="Palette alpha above this becomes opaque, below it half transparent (default: 127)",
    )
    parser.add_argument("--indent", type=int, default=4, help="Indent used when rewriting frame records (default: 4)")
    parser.add_argument("--pause", action="store_true", help="Wait for Enter before exiting")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Read metadata and show plan without writing outputs",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> AtlasSettings:
    return AtlasSettings(
        search_dirs=args.search_dirs,
        workspace=args.workspace,
        rounding=validators.parse_rounding(args.rounding),
        palette_colors=args.colors,
        alpha_cutoff=args.alpha_cutoff,
        json_indent=args.indent,
        dry_run=args.dry_run,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        code = run(args.directories, settings_from_args(args))
    except ValidationError as exc:
        parser.error(str(exc))

    if args.pause:
        print("Done. Press Enter to close.")
        input()
    return code


if __name__ == "__main__":
    sys.exit(main())
