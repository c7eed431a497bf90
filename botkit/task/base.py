# botkit/task/base.py
"""
Task contract and state-tree primitives.

A task is a short-lived description of one control-loop step. Its private,
long-lived data lives in a ``StateNode`` that ``build`` creates once and
``rebuild`` mutates on every later tick. Composed tasks own composite nodes,
so the state tree mirrors the composition.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Tuple, Type

from .clock import Clock, MonotonicClock


class ShapeMismatchError(TypeError):
    """A state node does not match the task it is being rebuilt with."""


@dataclass
class Context:
    """Per-call capabilities handed to every task."""
    clock: Clock = field(default_factory=MonotonicClock)
    tick: int = 0


class StateNode:
    """Base class for every persistent state node."""

    def children(self) -> Tuple["StateNode", ...]:
        return ()


@dataclass
class UnitState(StateNode):
    """Empty state for stateless tasks."""


@dataclass
class PairState(StateNode):
    """State of a sequenced pair: ``(left, right)``."""
    left: StateNode
    right: StateNode

    def children(self) -> Tuple[StateNode, ...]:
        return (self.left, self.right)


class Task(ABC):
    """
    Base class for every stage.

    Subclasses set ``state_type`` to the node class their ``build`` returns
    and implement ``build``/``rebuild``.
    """
    state_type: Type[StateNode] = StateNode

    @abstractmethod
    def build(self, cx: Context, model: Any) -> Tuple[Any, StateNode]:
        """Create a fresh state node and the initial output."""

    @abstractmethod
    def rebuild(self, cx: Context, model: Any, state: StateNode) -> Any:
        """Re-evaluate against ``state``, updating it in place."""

    def then(self, f: Callable[[Any, Any], "Task | None"]) -> "Task":
        """Sequence ``f(model, output)`` after this task."""
        from .then import Then
        return Then(self, f)

    def check_state(self, state: StateNode) -> None:
        if not isinstance(state, self.state_type):
            raise ShapeMismatchError(
                f"{type(self).__name__} expects {self.state_type.__name__}, "
                f"got {type(state).__name__}"
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Unit(Task):
    """No-op task: output ``None``, empty state."""
    state_type = UnitState

    def build(self, cx, model):
        return None, UnitState()

    def rebuild(self, cx, model, state):
        return None


class FromFn(Task):
    """Stateless task whose output is ``fn(model)`` on every call."""
    state_type = UnitState

    def __init__(self, fn: Callable[[Any], Any]):
        self.fn = fn

    def build(self, cx, model):
        return self.fn(model), UnitState()

    def rebuild(self, cx, model, state):
        return self.fn(model)

    def __repr__(self) -> str:
        name = getattr(self.fn, "__name__", repr(self.fn))
        return f"FromFn({name})"


def from_fn(fn: Callable[[Any], Any]) -> FromFn:
    return FromFn(fn)


def as_task(value: "Task | None") -> Task:
    """Continuations may return ``None`` to end a chain."""
    if value is None:
        return Unit()
    if not isinstance(value, Task):
        raise TypeError(f"Continuation must return a Task or None, got {type(value).__name__}")
    return value


def state_shape(state: StateNode) -> Any:
    """Nested tuple of node type names mirroring the state tree."""
    kids = state.children()
    if not kids:
        return type(state).__name__
    return tuple(state_shape(k) for k in kids)


def leaf_states(state: StateNode) -> Iterator[StateNode]:
    """Leaf nodes in composition order (left to right)."""
    kids = state.children()
    if not kids:
        yield state
        return
    for k in kids:
        yield from leaf_states(k)
