"""Clip inventory -- turn input arguments into an ordered list of clip paths.

Inputs may be individual files or directories. A directory contributes
its .mp4 / .mov files in name order. The combined list can then be
filtered by a substring (grep) and re-ordered by sort flags modelled on
GNU sort: any flags sort by path, --reverse reverses, --random-sort
shuffles.
"""

import random
import shlex
from pathlib import Path

from .errors import ArgumentError


VIDEO_EXTENSIONS = {".mp4", ".mov"}

_REVERSE_FLAGS = {"-r", "--reverse"}
_RANDOM_FLAGS = {"-R", "--random-sort"}


def parse_sort_flags(text: str | None) -> dict | None:
    """Parse a sort flag string like "--reverse" or "-R".

    Returns None when no sorting was asked for, else
    {"reverse": bool, "random": bool}.

    Raises:
        ArgumentError: Unknown flag.
    """
    if not text or not text.strip():
        return None

    order = {"reverse": False, "random": False}
    for flag in shlex.split(text):
        if flag in _REVERSE_FLAGS:
            order["reverse"] = True
        elif flag in _RANDOM_FLAGS:
            order["random"] = True
        else:
            raise ArgumentError(
                f"Unknown sort flag '{flag}'. "
                f"Valid: {sorted(_REVERSE_FLAGS | _RANDOM_FLAGS)}"
            )
    return order


def list_directory(directory: Path, grep: str | None = None) -> list[str]:
    """List video files in a directory, filtered by grep, sorted by name."""
    files = [
        p for p in directory.iterdir()
        if p.is_file() and p.suffix.lower() in VIDEO_EXTENSIONS
    ]
    if grep:
        files = [p for p in files if grep in p.name]
    return [str(p) for p in sorted(files, key=lambda p: p.name)]


def collect_clips(
    inputs,
    grep: str | None = None,
    sort_flags: str | None = None,
    rng: random.Random | None = None,
) -> list[str]:
    """Resolve input files/directories into an ordered list of clip paths.

    Args:
        inputs: File or directory paths, in the order given by the user.
        grep: Keep only paths containing this substring.
        sort_flags: Sort flag string (see parse_sort_flags).
        rng: Random source for --random-sort (tests pass a seeded one).

    Returns:
        Absolute clip paths.

    Raises:
        ArgumentError: An input doesn't exist, or bad sort flags.
    """
    order = parse_sort_flags(sort_flags)

    clips = []
    missing = []
    for item in inputs:
        p = Path(item).expanduser().resolve()
        if p.is_dir():
            clips.extend(list_directory(p, grep))
        elif p.exists():
            clips.append(str(p))
        else:
            missing.append(str(item))

    if missing:
        msg = f"Missing {len(missing)} input(s):\n"
        for m in missing:
            msg += f"  - {m}\n"
        raise ArgumentError(msg.rstrip("\n"))

    # Directory listings are already grepped by name; this also covers
    # explicitly named files.
    if grep:
        clips = [c for c in clips if grep in c]

    if order is not None:
        if order["random"]:
            (rng or random.Random()).shuffle(clips)
        else:
            clips.sort(reverse=order["reverse"])

    return clips
