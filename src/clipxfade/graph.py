"""Transition graph compiler -- clips + transition settings -> ffmpeg filter graph.

Compiles an ordered list of clips into a chain of xfade filters, one per
junction between adjacent clips. The result is a typed GraphPlan; turning
it into ffmpeg's textual -filter_complex syntax is a separate final step
(render_filter_graph), so tests can assert on structure.

Timing model:
  Each junction's offset is measured against the clip immediately before
  it: offset_i = duration(clip[i-1]) - transition. It is NOT a running
  total of the composited stream.

Labels:
  Junction 1 reads the raw first input (0:v). Every later junction reads
  the previous junction's output. The right-hand input is always the raw
  clip i (i:v). Intermediate outputs are v1, v2, ...; the last junction
  writes the sentinel label outv.

Two clips are a special case: both streams are first resampled to a
common frame rate, because xfade works on frame indices and mismatched
rates drift or glitch.
"""

import math
from dataclasses import dataclass, replace

from .common import format_seconds
from .errors import InsufficientInputs, InvalidDuration, InvalidEffectList
from .probe import get_duration, probe_durations


OUTPUT_LABEL = "outv"
DEFAULT_FPS = 25


@dataclass(frozen=True)
class Clip:
    """One input clip. duration is None until probed."""
    path: str
    index: int
    duration: float | None = None


@dataclass(frozen=True)
class TransitionSpec:
    """Transition duration (seconds) and the effects cycled over junctions."""
    duration: float
    effects: tuple[str, ...]


@dataclass(frozen=True)
class JunctionPlan:
    """A single xfade between two streams."""
    index: int
    effect: str
    offset: float
    left_label: str
    right_label: str
    output_label: str


@dataclass(frozen=True)
class FpsNormalization:
    """An fps filter applied to a stream before it reaches xfade."""
    input_label: str
    fps: int
    output_label: str


@dataclass(frozen=True)
class GraphPlan:
    """Compiled filter graph for one run."""
    junctions: tuple[JunctionPlan, ...]
    inputs: tuple[str, ...]
    output_label: str
    transition_duration: float
    normalizations: tuple[FpsNormalization, ...] = ()

    @property
    def filter_expression(self) -> str:
        return render_filter_graph(self)

    @property
    def intermediate_labels(self) -> tuple[str, ...]:
        return tuple(
            j.output_label for j in self.junctions
            if j.output_label != self.output_label
        )


def make_clips(paths) -> list[Clip]:
    """Wrap ordered paths as Clips with unresolved durations."""
    return [Clip(path=str(p), index=i) for i, p in enumerate(paths)]


def _validate_spec(spec: TransitionSpec) -> None:
    t = spec.duration
    if isinstance(t, bool) or not isinstance(t, (int, float)):
        raise InvalidDuration(f"Transition duration must be a number, got {t!r}")
    if not math.isfinite(t) or t <= 0:
        raise InvalidDuration(f"Transition duration must be > 0, got {t!r}")
    # Rendered at millisecond precision; anything smaller would print as 0.
    if format_seconds(t) == "0":
        raise InvalidDuration(f"Transition duration must be at least 0.001s, got {t!r}")
    if not spec.effects:
        raise InvalidEffectList("Effect list must not be empty")
    for i, effect in enumerate(spec.effects):
        if not isinstance(effect, str) or not effect.strip():
            raise InvalidEffectList(f"Effect {i}: empty effect name")


def resolve_durations(clips, probe=get_duration, workers=None) -> list[Clip]:
    """Fill in missing durations for every clip except the last.

    The last clip's duration never enters an offset, so it is not probed.
    Unknown durations are probed concurrently; clips that already carry a
    duration are left alone.
    """
    clips = list(clips)
    needed = [i for i, c in enumerate(clips[:-1]) if c.duration is None]
    durations = probe_durations(
        [clips[i].path for i in needed], probe=probe, workers=workers,
    )
    for i, seconds in zip(needed, durations):
        clips[i] = replace(clips[i], duration=seconds)
    return clips


def compile_transitions(
    clips,
    spec: TransitionSpec,
    probe=get_duration,
    workers=None,
) -> GraphPlan:
    """Compile an ordered clip list into a GraphPlan.

    Args:
        clips: Ordered Clips (at least two). Order is preserved as given.
        spec: Transition duration and effect list.
        probe: Callable path -> seconds used for clips without a duration.
        workers: Max concurrent probes (None = one per clip).

    Returns:
        GraphPlan with N-1 junctions.

    Raises:
        InvalidDuration: spec.duration is not a positive number, or rounds
            to 0 at millisecond precision.
        InvalidEffectList: spec.effects is empty.
        InsufficientInputs: fewer than two clips.
        ProbeError: a duration lookup failed (propagated as-is).
    """
    _validate_spec(spec)
    clips = list(clips)
    n = len(clips)
    if n < 2:
        raise InsufficientInputs(
            f"At least 2 clips are required for transitions, got {n}"
        )

    clips = resolve_durations(clips, probe=probe, workers=workers)
    inputs = tuple(c.path for c in clips)
    t = spec.duration
    effects = spec.effects

    # ── Two clips: normalize frame rates, single junction ──────────
    if n == 2:
        normalizations = (
            FpsNormalization("0:v", DEFAULT_FPS, "0v"),
            FpsNormalization("1:v", DEFAULT_FPS, "1v"),
        )
        junction = JunctionPlan(
            index=1,
            effect=effects[0],
            offset=clips[0].duration - t,
            left_label="0v",
            right_label="1v",
            output_label=OUTPUT_LABEL,
        )
        return GraphPlan(
            junctions=(junction,),
            inputs=inputs,
            output_label=OUTPUT_LABEL,
            transition_duration=t,
            normalizations=normalizations,
        )

    # ── General case: chain xfades left to right ───────────────────
    junctions = []
    for i in range(1, n):
        left = "0:v" if i == 1 else junctions[-1].output_label
        out = OUTPUT_LABEL if i == n - 1 else f"v{i}"
        junctions.append(JunctionPlan(
            index=i,
            effect=effects[(i - 1) % len(effects)],
            offset=clips[i - 1].duration - t,
            left_label=left,
            right_label=f"{i}:v",
            output_label=out,
        ))

    return GraphPlan(
        junctions=tuple(junctions),
        inputs=inputs,
        output_label=OUTPUT_LABEL,
        transition_duration=t,
    )


# ── Serialization ─────────────────────────────────────────────────


def render_junction(junction: JunctionPlan, transition_duration: float) -> str:
    return (
        f"[{junction.left_label}][{junction.right_label}]"
        f"xfade=transition={junction.effect}"
        f":duration={format_seconds(transition_duration)}"
        f":offset={format_seconds(junction.offset)}"
        f"[{junction.output_label}]"
    )


def render_filter_graph(plan: GraphPlan) -> str:
    """Serialize a GraphPlan to ffmpeg -filter_complex syntax.

    fps normalization stages come first, then junctions in order; stages
    are separated by ';'.
    """
    parts = [
        f"[{n.input_label}]fps={n.fps}[{n.output_label}]"
        for n in plan.normalizations
    ]
    parts.extend(
        render_junction(j, plan.transition_duration) for j in plan.junctions
    )
    return ";".join(parts)
