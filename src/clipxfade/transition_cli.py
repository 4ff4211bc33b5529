"""CLI for joining clips with xfade transitions.

Concat videos with a transition effect between each. The effect list is
cycled if it is shorter than the number of junctions.

Usage:
    clipxfade transition -i a.mp4 -i b.mp4 -i c.mp4 -o joined.mp4
    clipxfade transition -i clips/ --grep take --sort=--reverse \
        --effects fade,wipeleft,circleopen --duration 0.5
    clipxfade transition --config transition.yaml
    clipxfade transition -i clips/ --dry-run

Effects: https://trac.ffmpeg.org/wiki/Xfade
"""

import sys
from pathlib import Path

from .common import CliParser, positive_int
from .config import (
    DEFAULTS,
    VALID_LOGLEVELS,
    load_transition_config,
    parse_effects,
    parse_transition_duration,
)
from .errors import ArgumentError, ClipXfadeError, ConfigError, InsufficientInputs
from .execute import build_command, copy_clip, remove_partial_output, run_transcoder
from .graph import TransitionSpec, compile_transitions, make_clips
from .inventory import collect_clips
from .probe import get_duration


def _inputs_as_flags(args, value_options):
    """Rewrite bare input paths as "--input=PATH".

    Inputs given with and without -i then land in one list, in the order
    they were typed. Everything after "--" is an input.
    """
    rewritten = []
    it = iter(args)
    for arg in it:
        if arg == "--":
            for rest in it:
                rewritten.append(f"--input={rest}")
        elif arg.startswith("-") and arg != "-":
            rewritten.append(arg)
            if arg in value_options:
                value = next(it, None)
                if value is not None:
                    rewritten.append(value)
        else:
            rewritten.append(f"--input={arg}")
    return rewritten


def _parse_args(args=None):
    parser = CliParser(
        prog="clipxfade transition",
        description=(
            "Concat videos with an xfade transition between each. "
            "Inputs may also be given without -i."
        ),
        allow_abbrev=False,
    )
    parser.add_argument(
        "-i", "--input", action="append", default=[], dest="input",
        help="Input file or folder. Repeat for several inputs.",
    )
    parser.add_argument(
        "-o", "--output", default=None,
        help=f"Output file (default: {DEFAULTS['output']})",
    )
    parser.add_argument(
        "-g", "--grep", default=None,
        help="Keep only inputs whose path contains this string",
    )
    parser.add_argument(
        "-s", "--sort", default=None,
        help="Sort flags for input order, e.g. --sort=--reverse or --sort=--random-sort",
    )
    parser.add_argument(
        "-e", "--effects", default=None,
        help="CSV list of xfade effects, repeated if shorter than the clip list (default: fade)",
    )
    parser.add_argument(
        "-d", "--duration", default=None,
        help="Transition duration in seconds (default: 1)",
    )
    parser.add_argument(
        "-C", "--config", default=None,
        help="JSON or YAML config file with the same settings",
    )
    parser.add_argument(
        "-l", "--loglevel", default=None, choices=VALID_LOGLEVELS,
        help="ffmpeg loglevel (default: error)",
    )
    parser.add_argument(
        "--workers", type=positive_int, default=None,
        help="Max concurrent ffprobe runs (default: one per clip)",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Print the ffmpeg command instead of running it",
    )
    value_options = {
        option
        for action in parser._actions if action.nargs != 0
        for option in action.option_strings
    }
    if args is None:
        args = sys.argv[1:]
    return parser.parse_args(_inputs_as_flags(args, value_options))


def _settings(parsed) -> dict:
    """Merge defaults, config file and CLI flags (CLI wins)."""
    settings = dict(DEFAULTS)
    settings["input"] = []

    if parsed.config:
        settings.update(load_transition_config(parsed.config))

    if parsed.input:
        settings["input"] = parsed.input

    try:
        if parsed.effects is not None:
            settings["effects"] = parse_effects(parsed.effects)
        if parsed.duration is not None:
            settings["duration"] = parse_transition_duration(parsed.duration)
    except ConfigError as e:
        raise ArgumentError(str(e)) from None

    for key in ("output", "grep", "sort", "loglevel"):
        value = getattr(parsed, key)
        if value is not None:
            settings[key] = value
    return settings


def transition(
    inputs,
    output: str,
    effects=("fade",),
    duration: float = 1.0,
    grep: str | None = None,
    sort: str | None = None,
    loglevel: str = "error",
    workers: int | None = None,
    dry_run: bool = False,
    probe=get_duration,
) -> list[str] | None:
    """Resolve clips, compile the transition graph, run ffmpeg.

    A single resolved clip is copied straight to output; there is no
    junction to transition over.

    Returns:
        The ffmpeg argv that was run (or printed, with dry_run), or None
        when the single clip was copied.

    Raises:
        ArgumentError: Missing inputs or bad sort flags.
        InsufficientInputs: No clips resolved at all.
        CompilerValidationError / ProbeError: Compilation failed.
        ExecutionError: ffmpeg exited nonzero.
    """
    paths = collect_clips(inputs, grep=grep, sort_flags=sort)

    print("Processing Files:")
    for p in paths:
        print(f" - {p}")

    if not paths:
        raise InsufficientInputs("No input clips found.")

    if len(paths) == 1:
        print("Only one clip, copying it to the output.")
        if not dry_run:
            copy_clip(paths[0], output)
            print(f"Done: {output}")
        return None

    spec = TransitionSpec(duration=duration, effects=tuple(effects))

    print(f"Probing {len(paths) - 1} clips...")
    plan = compile_transitions(make_clips(paths), spec, probe=probe, workers=workers)

    for j in plan.junctions:
        print(f"  [{j.index}] {j.effect}  offset {j.offset:.3f}s")
        if j.offset < 0:
            print(
                f"  WARN   transition ({duration}s) is longer than clip "
                f"{j.index - 1}; offset is negative"
            )

    cmd = build_command(plan, output, loglevel=loglevel)

    if dry_run:
        print(" ".join(cmd))
        return cmd

    print(f"\nJoining {len(paths)} clips ({len(plan.junctions)} transitions)...")
    print(f"Writing to: {output}")
    Path(output).parent.mkdir(parents=True, exist_ok=True)
    try:
        run_transcoder(cmd)
    except KeyboardInterrupt:
        remove_partial_output(output)
        raise
    print(f"\nDone: {output}")
    return cmd


def main(args=None):
    parsed = _parse_args(args)

    try:
        settings = _settings(parsed)
        if not settings["input"]:
            raise ArgumentError("No input specified (use -i or --config).")
        transition(
            settings["input"],
            settings["output"],
            effects=settings["effects"],
            duration=settings["duration"],
            grep=settings["grep"],
            sort=settings["sort"],
            loglevel=settings["loglevel"],
            workers=parsed.workers,
            dry_run=parsed.dry_run,
            probe=get_duration,
        )
    except ClipXfadeError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(e.exit_code)


if __name__ == "__main__":
    main()
