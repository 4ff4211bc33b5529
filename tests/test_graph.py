"""Tests for the transition graph compiler.

Durations are supplied through a fake probe (or preset on the Clip), so
nothing here touches ffmpeg.
"""

import threading

import pytest

from clipxfade.errors import (
    InsufficientInputs,
    InvalidDuration,
    InvalidEffectList,
    ProbeError,
)
from clipxfade.graph import (
    OUTPUT_LABEL,
    Clip,
    TransitionSpec,
    compile_transitions,
    make_clips,
    render_filter_graph,
    resolve_durations,
)


def _probe_from(durations):
    """Fake probe: looks up a duration by path, records calls."""
    calls = []

    def probe(path):
        calls.append(path)
        return durations[path]

    probe.calls = calls
    return probe


def _compile(durations, t=1.0, effects=("fade",)):
    paths = [f"/clips/{i}.mp4" for i in range(len(durations))]
    probe = _probe_from(dict(zip(paths, durations)))
    plan = compile_transitions(
        make_clips(paths), TransitionSpec(duration=t, effects=tuple(effects)),
        probe=probe,
    )
    return plan, probe


class TestJunctionCount:
    @pytest.mark.parametrize("n", [2, 3, 4, 7])
    def test_one_junction_per_adjacent_pair(self, n):
        plan, _ = _compile([5.0] * n, t=1.0)
        assert len(plan.junctions) == n - 1

    def test_inputs_keep_caller_order(self):
        plan, _ = _compile([3.0, 4.0, 5.0])
        assert plan.inputs == ("/clips/0.mp4", "/clips/1.mp4", "/clips/2.mp4")


class TestEffects:
    def test_effects_cycle_over_junctions(self):
        plan, _ = _compile([5.0] * 4, effects=["fade", "wipeleft"])
        assert [j.effect for j in plan.junctions] == ["fade", "wipeleft", "fade"]

    def test_single_effect_reused(self):
        plan, _ = _compile([5.0] * 5, effects=["dissolve"])
        assert {j.effect for j in plan.junctions} == {"dissolve"}

    def test_unknown_effect_passed_through(self):
        plan, _ = _compile([5.0, 5.0, 5.0], effects=["not_a_real_effect"])
        assert "transition=not_a_real_effect" in plan.filter_expression

    def test_two_clips_use_first_effect(self):
        plan, _ = _compile([5.0, 5.0], effects=["circleopen", "fade"])
        assert plan.junctions[0].effect == "circleopen"


class TestOffsets:
    def test_offsets_use_preceding_clip_only(self):
        plan, _ = _compile([10.0, 8.0, 12.0], t=2.0)
        assert [j.offset for j in plan.junctions] == [8.0, 6.0]

    def test_two_clip_offset(self):
        plan, _ = _compile([7.5, 3.0], t=0.5)
        assert plan.junctions[0].offset == 7.0

    def test_negative_offset_passed_through(self):
        plan, _ = _compile([1.0, 5.0, 5.0], t=2.0)
        assert plan.junctions[0].offset == -1.0
        assert ":offset=-1[" in plan.filter_expression

    def test_last_clip_not_probed(self):
        _, probe = _compile([4.0, 4.0, 4.0])
        assert "/clips/2.mp4" not in probe.calls
        assert sorted(probe.calls) == ["/clips/0.mp4", "/clips/1.mp4"]

    def test_known_durations_not_probed(self):
        clips = [
            Clip("/a.mp4", 0, duration=6.0),
            Clip("/b.mp4", 1, duration=None),
            Clip("/c.mp4", 2),
        ]
        probe = _probe_from({"/b.mp4": 9.0})
        plan = compile_transitions(clips, TransitionSpec(1.0, ("fade",)), probe=probe)
        assert probe.calls == ["/b.mp4"]
        assert [j.offset for j in plan.junctions] == [5.0, 8.0]


class TestLabels:
    def test_general_case_chain(self):
        plan, _ = _compile([5.0] * 4)
        wiring = [(j.left_label, j.right_label, j.output_label) for j in plan.junctions]
        assert wiring == [
            ("0:v", "1:v", "v1"),
            ("v1", "2:v", "v2"),
            ("v2", "3:v", OUTPUT_LABEL),
        ]

    def test_intermediate_labels_unique(self):
        n = 9
        plan, _ = _compile([5.0] * n)
        labels = plan.intermediate_labels
        assert len(labels) == n - 2
        assert len(set(labels)) == n - 2
        assert OUTPUT_LABEL not in labels
        assert plan.junctions[-1].output_label == OUTPUT_LABEL
        assert plan.output_label == OUTPUT_LABEL

    def test_two_clips_normalize_fps_first(self):
        plan, _ = _compile([5.0, 5.0])
        assert [(n.input_label, n.output_label) for n in plan.normalizations] == [
            ("0:v", "0v"), ("1:v", "1v"),
        ]
        j = plan.junctions[0]
        assert (j.left_label, j.right_label, j.output_label) == ("0v", "1v", OUTPUT_LABEL)
        assert plan.intermediate_labels == ()

    def test_general_case_has_no_normalization(self):
        plan, _ = _compile([5.0] * 3)
        assert plan.normalizations == ()


class TestRenderFilterGraph:
    def test_two_clip_expression(self):
        plan, _ = _compile([10.0, 4.0], t=1.0, effects=["wipeleft"])
        assert render_filter_graph(plan) == (
            "[0:v]fps=25[0v];[1:v]fps=25[1v];"
            "[0v][1v]xfade=transition=wipeleft:duration=1:offset=9[outv]"
        )

    def test_three_clip_expression(self):
        plan, _ = _compile([10.0, 8.0, 12.0], t=2.0, effects=["fade", "slideup"])
        assert plan.filter_expression == (
            "[0:v][1:v]xfade=transition=fade:duration=2:offset=8[v1];"
            "[v1][2:v]xfade=transition=slideup:duration=2:offset=6[outv]"
        )

    def test_fractional_seconds(self):
        plan, _ = _compile([3.25, 3.0, 3.0], t=0.5)
        assert "duration=0.5:offset=2.75[v1]" in plan.filter_expression

    def test_deterministic(self):
        first, _ = _compile([4.2, 6.1, 3.3, 9.9], t=0.7, effects=["fade", "wipeup"])
        second, _ = _compile([4.2, 6.1, 3.3, 9.9], t=0.7, effects=["fade", "wipeup"])
        assert first.filter_expression == second.filter_expression


class TestValidation:
    @pytest.mark.parametrize("n", [0, 1])
    def test_too_few_clips(self, n):
        with pytest.raises(InsufficientInputs):
            _compile([5.0] * n)

    @pytest.mark.parametrize("t", [0, -1.0, float("nan"), float("inf")])
    def test_bad_transition_duration(self, t):
        with pytest.raises(InvalidDuration):
            _compile([5.0, 5.0], t=t)

    def test_duration_below_a_millisecond(self):
        with pytest.raises(InvalidDuration, match="0.001"):
            _compile([5.0, 5.0], t=0.0004)

    def test_one_millisecond_renders(self):
        plan, _ = _compile([5.0, 5.0, 5.0], t=0.001)
        assert "duration=0.001:offset=4.999[v1]" in plan.filter_expression

    def test_empty_effects(self):
        with pytest.raises(InvalidEffectList):
            _compile([5.0, 5.0], effects=[])

    def test_blank_effect_name(self):
        with pytest.raises(InvalidEffectList):
            _compile([5.0, 5.0], effects=["fade", " "])

    def test_validation_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            _compile([5.0])

    def test_probe_error_propagates_unwrapped(self):
        def probe(path):
            raise ProbeError(path, "not a movie")

        with pytest.raises(ProbeError) as exc_info:
            compile_transitions(
                make_clips(["/a.mp4", "/b.mp4", "/c.mp4"]),
                TransitionSpec(1.0, ("fade",)), probe=probe,
            )
        assert exc_info.value.path in ("/a.mp4", "/b.mp4")


class TestResolveDurations:
    def test_probes_run_concurrently(self):
        # Each probe waits for the other; sequential probing would time out.
        barrier = threading.Barrier(3, timeout=5)

        def probe(path):
            barrier.wait()
            return 2.0

        clips = resolve_durations(make_clips(["/a", "/b", "/c", "/d"]), probe=probe)
        assert [c.duration for c in clips] == [2.0, 2.0, 2.0, None]

    def test_clips_are_not_mutated(self):
        clips = make_clips(["/a", "/b"])
        resolved = resolve_durations(clips, probe=lambda p: 3.0)
        assert clips[0].duration is None
        assert resolved[0].duration == 3.0
