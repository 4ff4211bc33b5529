"""CLI for probing clip durations.

Usage:
    clipxfade probe a.mp4 b.mp4 clips/
"""

import sys

from .common import CliParser, positive_int
from .errors import ClipXfadeError
from .inventory import collect_clips
from .probe import probe_durations


def main(args=None):
    parser = CliParser(
        prog="clipxfade probe",
        description="Print the duration of each clip, as the transition compiler sees it.",
    )
    parser.add_argument(
        "inputs", nargs="+",
        help="Clip files or folders",
    )
    parser.add_argument(
        "-g", "--grep", default=None,
        help="Keep only inputs whose path contains this string",
    )
    parser.add_argument(
        "--workers", type=positive_int, default=None,
        help="Max concurrent ffprobe runs (default: one per clip)",
    )
    parsed = parser.parse_args(args)

    try:
        paths = collect_clips(parsed.inputs, grep=parsed.grep)
        durations = probe_durations(paths, workers=parsed.workers)
    except ClipXfadeError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(e.exit_code)

    for i, (path, seconds) in enumerate(zip(paths, durations)):
        print(f"  [{i}] {seconds:.3f}s  {path}")
    print(f"Total: {sum(durations):.3f}s in {len(paths)} clips")


if __name__ == "__main__":
    main()
