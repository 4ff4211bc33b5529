"""Clip duration probing via ffprobe.

imageio-ffmpeg only bundles ffmpeg, so ffprobe is looked up on PATH.
Durations are read from the container (format=duration), which needs no
decoding and is fast even for long clips.
"""

import math
import subprocess
from concurrent.futures import ThreadPoolExecutor

from .errors import ProbeError

FFPROBE = "ffprobe"


def parse_duration_output(text: str) -> float:
    """Parse ffprobe's duration output into seconds.

    ffprobe prints a fixed-point number followed by a newline
    (e.g. "12.480000\\n"). Some builds honour the locale and use a decimal
    comma, and containers without a duration print "N/A".

    Raises:
        ValueError: If the output is not a finite, non-negative number.
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if not lines:
        raise ValueError("empty duration output")
    value = lines[0].replace(",", ".")
    try:
        seconds = float(value)
    except ValueError:
        raise ValueError(f"unparseable duration {lines[0]!r}") from None
    if not math.isfinite(seconds) or seconds < 0:
        raise ValueError(f"invalid duration {lines[0]!r}")
    return seconds


def get_duration(path) -> float:
    """Get clip duration in seconds using ffprobe.

    Raises:
        ProbeError: ffprobe is missing, can't read the file, or prints
            something that isn't a duration.
    """
    cmd = [
        FFPROBE, "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        str(path),
    ]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError:
        raise ProbeError(path, "ffprobe not found on PATH") from None

    if result.returncode != 0:
        detail = result.stderr.strip() or f"exit code {result.returncode}"
        raise ProbeError(path, f"not a readable media file ({detail})")

    try:
        return parse_duration_output(result.stdout)
    except ValueError as e:
        raise ProbeError(path, str(e)) from None


def probe_durations(paths, probe=get_duration, workers=None) -> list[float]:
    """Probe several clips concurrently, returning durations in input order.

    Each clip is an independent ffprobe run, so they are issued on a
    thread pool and gathered in order. The first failure (in input order)
    is re-raised unchanged.

    Args:
        paths: Clip paths to probe.
        probe: Callable path -> seconds. Defaults to get_duration.
        workers: Max concurrent probes. None = one per path.

    Raises:
        ValueError: workers is not None and less than 1.
    """
    paths = list(paths)
    if workers is not None and workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers!r}")
    if not paths:
        return []
    if len(paths) == 1:
        return [probe(paths[0])]

    max_workers = min(workers or len(paths), len(paths))
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(probe, paths))
