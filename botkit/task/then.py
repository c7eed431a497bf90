# botkit/task/then.py
from __future__ import annotations
import logging
from typing import Any, Callable

from .base import Context, PairState, ShapeMismatchError, Task, as_task

logger = logging.getLogger(__name__)


class Then(Task):
    """
    Sequential composition: ``left`` runs first, then ``f(model, left_output)``
    names the task to run next.

    ``f`` is called again on every tick so the right-hand task always sees the
    current upstream output. Only the state pair persists.

    A shape check failing on the right child is raised after ``left`` has
    already been rebuilt, so the pair is partially updated at that point.
    """
    state_type = PairState

    def __init__(self, left: Task, f: Callable[[Any, Any], "Task | None"]):
        self.left = left
        self.f = f

    def build(self, cx: Context, model: Any):
        out1, s1 = self.left.build(cx, model)
        right = as_task(self.f(model, out1))
        out2, s2 = right.build(cx, model)
        logger.debug(f"Built {type(self.left).__name__} -> {type(right).__name__}")
        return out2, PairState(s1, s2)

    def rebuild(self, cx: Context, model: Any, state: PairState):
        self.check_state(state)
        self.left.check_state(state.left)
        out1 = self.left.rebuild(cx, model, state.left)

        right = as_task(self.f(model, out1))
        try:
            right.check_state(state.right)
        except ShapeMismatchError as e:
            raise ShapeMismatchError(
                f"Continuation of {type(self.left).__name__} changed shape: {e}"
            ) from e
        return right.rebuild(cx, model, state.right)

    def __repr__(self) -> str:
        return f"Then({self.left!r}, {getattr(self.f, '__name__', 'f')})"
