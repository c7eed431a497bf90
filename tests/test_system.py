"""Integration tests for the System driver loop."""

import json

import pytest
from botkit import (
    System, ManualClock, PendulumPlant, ShapeMismatchError, SimpleRecorder,
    from_fn, pid_controller,
)
from botkit.runtime.schemas import BotkitConfig, LoopSettings


class Model:
    def __init__(self):
        self.state = 0.0
        self.swap = False


def app(model):
    return (pid_controller(model.state, 0.0, 0.5, 0.1, 0.2)
            .then(lambda _, control: PendulumPlant(control))
            .then(lambda m, angle: setattr(m, "state", angle)))


class TestSystemLifecycle:

    def test_build_then_rebuild(self):
        clock = ManualClock()
        system = System(Model(), app, clock=clock)
        assert system.build() is None
        assert system.is_built
        assert system.tick == 0

        clock.advance(1)
        system.rebuild()
        assert system.tick == 1
        assert system.model.state == pytest.approx(0.95)

    def test_rebuild_before_build(self):
        system = System(Model(), app, clock=ManualClock())
        with pytest.raises(RuntimeError, match="not built"):
            system.rebuild()

    def test_state_tree_persists(self):
        clock = ManualClock(step_ms=1)
        system = System(Model(), app, clock=clock)
        system.build()
        root = system.state
        for _ in range(3):
            clock.advance()
            system.rebuild()
        assert system.state is root

    def test_run_counts_ticks(self):
        clock = ManualClock(step_ms=2)
        system = System(Model(), app, clock=clock)
        system.run(ticks=25, log_interval=10, on_tick=lambda s: clock.advance())
        assert system.tick == 25
        assert system.metrics.counters["ticks"] == 26
        assert "tick_duration" in system.metrics.timers

    def test_run_is_deterministic(self):
        def final_state():
            clock = ManualClock(step_ms=3)
            system = System(Model(), app, clock=clock)
            system.run(ticks=100, on_tick=lambda s: clock.advance())
            return system.model.state

        assert final_state() == final_state()

    def test_shape_change_between_ticks(self):
        def describe(model):
            if model.swap:
                return from_fn(lambda _: 0.0).then(lambda _, x: None)
            return pid_controller(model.state, 1.0, 1.0, 0.0, 0.0)

        model = Model()
        system = System(model, describe, clock=ManualClock())
        system.build()
        model.swap = True
        with pytest.raises(ShapeMismatchError):
            system.rebuild()
        assert system.tick == 0
        assert system.metrics.counters["ticks"] == 1

    def test_failed_tick_leaves_tick_and_needs_rebuild(self):
        def describe(model):
            pid = pid_controller(0.0, -1.0, 1.0, 0.0, 0.0)
            if model.swap:
                return pid.then(lambda _, x: from_fn(lambda m: x))
            return pid.then(lambda _, control: PendulumPlant(control))

        model = Model()
        system = System(model, describe, clock=ManualClock())
        system.build()
        pid_state = system.state.left

        model.swap = True
        with pytest.raises(ShapeMismatchError, match="changed shape"):
            system.rebuild()
        assert system.tick == 0
        assert system.metrics.counters["ticks"] == 1
        # the upstream stage had already run before the mismatch surfaced
        assert pid_state.total_error == -1.0

        system.reset()
        system.build()
        assert system.state.left.total_error == 0.0
        assert system.rebuild() == pytest.approx(-1.0)
        assert system.tick == 1

    def test_long_run_survives_divergence(self):
        clock = ManualClock(step_ms=5)
        system = System(Model(), app, clock=clock)
        system.run(ticks=8000, log_interval=1000, on_tick=lambda s: clock.advance())
        assert system.tick == 8000
        assert system.metrics.counters["ticks"] == 8001

    def test_tick_timing_history_is_bounded(self):
        system = System(None, lambda m: from_fn(lambda _: 1.0), clock=ManualClock())
        system.run(ticks=1500, log_interval=1000)
        assert len(system.metrics.history["tick_duration"]) == system.metrics.history_size == 1000
        assert system.snapshot()["tick_timing"]["count"] == 1000

    def test_snapshot(self):
        system = System(Model(), app, clock=ManualClock())
        assert system.snapshot() == {"status": "not_initialized"}
        system.build()
        snap = system.snapshot()
        assert snap["status"] == "active"
        assert snap["shape"] == (("PidControllerState", "PendulumPlantState"), "UnitState")

    def test_reset(self):
        system = System(Model(), app, clock=ManualClock())
        system.run(ticks=3)
        system.reset()
        assert not system.is_built
        assert system.tick == 0
        assert system.metrics.counters == {}


class TestSystemRecording:

    def test_rows_per_tick(self):
        clock = ManualClock(step_ms=1)
        recorder = SimpleRecorder()
        system = System(Model(), app, clock=clock, recorder=recorder,
                        observe=lambda m, out: {"angle": m.state})
        system.run(ticks=4, on_tick=lambda s: clock.advance())
        assert len(recorder.rows) == 5
        assert recorder.rows[0]["tick"] == 0.0
        assert recorder.rows[-1]["output"] is None
        assert recorder.rows[-1]["angle"] == pytest.approx(system.model.state)

    def test_export_without_recorder(self):
        system = System(Model(), app, clock=ManualClock())
        with pytest.raises(RuntimeError, match="No recorder"):
            system.export()

    def test_export_jsonl(self, tmp_path):
        clock = ManualClock(step_ms=1)
        settings = LoopSettings(record=True, record_format="jsonl", output=str(tmp_path / "run"))
        system = System(Model(), app, clock=clock, recorder=SimpleRecorder(), settings=settings)
        system.run(ticks=2, on_tick=lambda s: clock.advance())

        path = system.export()
        assert path == str(tmp_path / "run.jsonl")
        lines = (tmp_path / "run.jsonl").read_text().splitlines()
        assert "_metadata" in json.loads(lines[0])
        assert len(lines) == 4

    def test_from_config(self):
        config = BotkitConfig.model_validate({"loop": {"record": True, "ticks": 7, "log_level": "WARNING"}})
        clock = ManualClock()
        system = System.from_config(Model(), app, config, clock=clock)
        assert isinstance(system.recorder, SimpleRecorder)
        system.run()
        assert system.tick == 7
        assert len(system.recorder.rows) == 8
