"""clipxfade.common — small shared helpers.

Contains: ${var} path resolution (shared by config files), the number
formatting used in filter graph expressions, and the CLI parser class.
"""

import argparse
import re
import sys


# ── Path utilities ─────────────────────────────────────────────────

def resolve_path_vars(text: str, paths: dict[str, str]) -> str:
    """Replace ${name} variables in a string using the paths dict."""
    def _replace(match):
        key = match.group(1)
        if key not in paths:
            raise ValueError(f"Unknown path variable: ${{{key}}}")
        return str(paths[key])
    return re.sub(r"\$\{(\w+)\}", _replace, text)


# ── Number formatting ──────────────────────────────────────────────

def format_seconds(value: float) -> str:
    """Format seconds for an ffmpeg option value.

    Millisecond precision, trailing zeros dropped: 8.0 -> "8",
    6.5 -> "6.5", 2.0004 -> "2". Negative zero is written as "0".
    """
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    if text == "-0":
        return "0"
    return text


# ── CLI parsing ────────────────────────────────────────────────────

class CliParser(argparse.ArgumentParser):
    """ArgumentParser that exits 1 on usage errors (argparse uses 2)."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def positive_int(text: str) -> int:
    """argparse type for counts that must be >= 1."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text!r}")
    return value
