"""Shared test fixtures for clipxfade tests."""

import subprocess

import pytest
import imageio_ffmpeg

_FFMPEG = imageio_ffmpeg.get_ffmpeg_exe()


def _render_clip(path, color="blue", duration=2, fps=10):
    """Render a small solid-color test clip (160x120, no audio)."""
    subprocess.run(
        [
            _FFMPEG, "-y",
            "-f", "lavfi", "-i", f"color=c={color}:s=160x120:d={duration}:r={fps}",
            "-c:v", "libx264", "-crf", "28", "-pix_fmt", "yuv420p",
            str(path),
        ],
        check=True,
        capture_output=True,
    )
    return path


@pytest.fixture
def make_clip(tmp_path):
    """Factory fixture: make_clip("a.mp4", color="red", duration=2)."""
    def _make(name, **kwargs):
        return _render_clip(tmp_path / name, **kwargs)
    return _make


@pytest.fixture
def clip_dir(tmp_path):
    """A folder with three 2-second clips plus a non-video file."""
    d = tmp_path / "clips"
    d.mkdir()
    for name, color in [("b.mp4", "green"), ("a.mp4", "red"), ("c.mp4", "blue")]:
        _render_clip(d / name, color=color)
    (d / "notes.txt").write_text("not a clip")
    return d
