"""Driver loop that owns the model and the root state tree."""

import logging
from typing import Any, Callable, Dict, Optional

from ..task import Clock, Context, MonotonicClock, StateNode, Task, state_shape
from ..task.base import as_task
from ..observability import MetricsCollector, setup_logging
from .recorder import SimpleRecorder
from .schemas import BotkitConfig, LoopSettings

logger = logging.getLogger(__name__)


class System:
    """
    Calls ``app(model)`` every tick and drives the resulting task.

    The first tick builds the state tree; every later tick rebuilds the fresh
    description against it. ``observe(model, output)`` may return extra
    columns for the recorder.
    """

    def __init__(self, model: Any, app: Callable[[Any], Task],
                 clock: Optional[Clock] = None,
                 recorder: Optional[SimpleRecorder] = None,
                 settings: Optional[LoopSettings] = None,
                 observe: Optional[Callable[[Any, Any], Dict[str, Any]]] = None):
        self.model = model
        self.app = app
        self.cx = Context(clock=clock or MonotonicClock())
        self.recorder = recorder
        self.settings = settings or LoopSettings()
        self.observe = observe
        self.metrics = MetricsCollector()
        self.state: Optional[StateNode] = None
        self.output: Any = None

    @classmethod
    def from_config(cls, model: Any, app: Callable[[Any], Task], config: BotkitConfig,
                    clock: Optional[Clock] = None, **kwargs) -> "System":
        """Configure logging and recording from ``config.loop``."""
        loop = config.loop
        setup_logging(loop.log_level, loop.log_format)
        recorder = SimpleRecorder(enabled=True) if loop.record else None
        return cls(model, app, clock=clock, recorder=recorder, settings=loop, **kwargs)

    @property
    def tick(self) -> int:
        return self.cx.tick

    @property
    def is_built(self) -> bool:
        return self.state is not None

    def _describe(self) -> Task:
        return as_task(self.app(self.model))

    def _record(self):
        self.metrics.set_metric("last_output", self.output)
        if self.recorder is None:
            return
        row = {"tick": self.cx.tick, "clock_ms": self.cx.clock.now_ms(), "output": self.output}
        if self.observe is not None:
            row.update(self.observe(self.model, self.output))
        self.recorder.log(row)

    def build(self) -> Any:
        """Build the state tree from the first description."""
        self.cx.tick = 0
        task = self._describe()
        self.output, self.state = task.build(self.cx, self.model)
        self.metrics.increment_counter("ticks")
        self._record()
        logger.info(f"System built: {task!r}, shape={state_shape(self.state)}")
        return self.output

    def rebuild(self) -> Any:
        """
        Run one tick against the existing state tree.

        If the tick raises (e.g. ShapeMismatchError), ``tick`` and the counters
        are left unchanged, but stages rebuilt before the failure have already
        mutated their nodes: call ``reset()`` and ``build()`` before continuing.
        """
        if self.state is None:
            raise RuntimeError("System not built. Call build() first.")

        previous_tick = self.cx.tick
        self.cx.tick += 1
        self.metrics.start_timer("tick_duration")
        try:
            task = self._describe()
            task.check_state(self.state)
            self.output = task.rebuild(self.cx, self.model, self.state)
        except Exception as e:
            logger.error(f"Error during tick {self.cx.tick}: {e}")
            self.metrics.stop_timer("tick_duration")
            self.cx.tick = previous_tick
            raise

        self.metrics.stop_timer("tick_duration")
        self.metrics.increment_counter("ticks")
        self._record()
        logger.debug(f"Tick {self.cx.tick}: output={self.output!r}")
        return self.output

    def run(self, ticks: Optional[int] = None, log_interval: Optional[int] = None,
            on_tick: Optional[Callable[["System"], None]] = None) -> Any:
        """
        Build if needed, then rebuild ``ticks`` times.

        ``on_tick`` runs after each rebuild; a ManualClock can be advanced
        there to get a fixed dt.
        """
        ticks = self.settings.ticks if ticks is None else ticks
        log_interval = log_interval or self.settings.log_interval

        if not self.is_built:
            self.build()

        for i in range(ticks):
            self.rebuild()
            if on_tick is not None:
                on_tick(self)
            if (i + 1) % log_interval == 0:
                logger.info(f"Tick {self.cx.tick} ({i + 1}/{ticks}): output={self.output!r}")

        logger.info(f"Run finished after {ticks} ticks")
        return self.output

    def snapshot(self) -> Dict[str, Any]:
        """Summary of the current loop state."""
        if self.state is None:
            return {"status": "not_initialized"}
        return {
            "status": "active",
            "tick": self.cx.tick,
            "output": self.output,
            "shape": state_shape(self.state),
            "metrics_summary": self.metrics.summary_stats(),
            "tick_timing": self.metrics.timer_stats("tick_duration"),
            "recent_rows": self.recorder.get_recent(5) if self.recorder else [],
        }

    def export(self, path: Optional[str] = None, fmt: Optional[str] = None) -> str:
        """Export recorded rows; format and path default to the loop settings."""
        if self.recorder is None:
            raise RuntimeError("No recorder available")
        path = path or self.settings.output or "botkit_run"
        full_path = self.recorder.export(fmt or self.settings.record_format, path)
        logger.info(f"Recording exported to: {full_path}")
        return full_path

    def reset(self):
        """Drop the state tree; the next build starts from scratch."""
        self.state = None
        self.output = None
        self.cx.tick = 0
        if self.recorder:
            self.recorder.clear()
        self.metrics.reset()
        logger.info("System reset")
