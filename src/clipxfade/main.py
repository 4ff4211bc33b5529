"""Subcommand dispatcher for clipxfade.

Usage:
    clipxfade transition -i a.mp4 -i b.mp4 -o joined.mp4
    clipxfade probe a.mp4 b.mp4
"""

import sys

from .common import CliParser


def main(args=None):
    parser = CliParser(
        prog="clipxfade",
        description="Join video clips with ffmpeg xfade transitions.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands. Each delegates to its own module's main().
    subparsers.add_parser("transition", help="Join clips with a transition at each junction")
    subparsers.add_parser("probe", help="Print clip durations via ffprobe")

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    parsed, remaining = parser.parse_known_args(args)

    if parsed.command is None:
        parser.print_help()
        sys.exit(1)

    if parsed.command == "transition":
        from .transition_cli import main as transition_main
        transition_main(remaining)
    elif parsed.command == "probe":
        from .probe_cli import main as probe_main
        probe_main(remaining)


if __name__ == "__main__":
    main()
