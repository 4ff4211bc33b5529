"""Running ffmpeg for a compiled GraphPlan.

The command is built as a plain argv list (no shell): one -i per clip in
the plan's input order, the filter graph, a -map of the final label, and
the output path.
"""

import shutil
import subprocess
from pathlib import Path

import imageio_ffmpeg

from .errors import ExecutionError
from .graph import GraphPlan

_FFMPEG = imageio_ffmpeg.get_ffmpeg_exe()


def build_command(
    plan: GraphPlan,
    output: str,
    loglevel: str = "error",
    ffmpeg: str | None = None,
) -> list[str]:
    """Build the ffmpeg argv for a plan."""
    inputs = []
    for path in plan.inputs:
        inputs.extend(["-i", path])

    return [
        ffmpeg or _FFMPEG, "-y",
        "-v", loglevel,
        *inputs,
        "-filter_complex", plan.filter_expression,
        "-map", f"[{plan.output_label}]",
        str(output),
    ]


def run_transcoder(cmd: list[str]) -> None:
    """Run ffmpeg and wait for it.

    Raises:
        ExecutionError: ffmpeg exited nonzero (code kept verbatim).
            ffmpeg missing is reported as code 127, like a shell would.
    """
    try:
        proc = subprocess.Popen(cmd)
    except FileNotFoundError:
        raise ExecutionError(127, cmd) from None

    try:
        code = proc.wait()
    except KeyboardInterrupt:
        proc.terminate()
        try:
            proc.wait(timeout=5)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.wait()
        raise

    if code != 0:
        raise ExecutionError(code, cmd)


def copy_clip(source: str, output: str) -> None:
    """Copy a single clip straight to the output (no transitions needed)."""
    Path(output).parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, output)


def remove_partial_output(output: str) -> None:
    """Best-effort removal of an unfinished output file."""
    try:
        Path(output).unlink()
    except OSError:
        pass
