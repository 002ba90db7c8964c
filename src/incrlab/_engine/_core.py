"""Articulations, effect counters and the engine interface shared by both backends."""

from __future__ import annotations

import dataclasses
import itertools
import logging
from abc import ABC, abstractmethod
from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from incrlab._enums import Effect, EngineKind
from incrlab._errors import BackendDesyncError

from ._names import Loc, Name

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from ._trace import GraphSnapshot, Trace

logger = logging.getLogger(__name__)

_engine_ids = itertools.count(1)


@dataclass(frozen=True, slots=True)
class Art[T]:
    """An articulation: a reference to a cell or thunk owned by one engine.

    Two articulations are equal when they name the same location in the same
    engine. The payload is private to the owning engine.
    """

    loc: Loc
    engine: int
    payload: Any = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"@{self.loc}"


@dataclass(frozen=True, slots=True)
class Unforced:
    """Placeholder for a thunk that has not been forced, found while reflecting a value."""

    loc: Loc

    def __str__(self) -> str:
        return f"<unforced {self.loc}>"


def _count_field(effect: Effect) -> str:
    return effect.value.replace("-", "_")


@dataclass(frozen=True, slots=True)
class EngineCounts:
    """Number of engine operations, by effect."""

    alloc_fresh: int = 0
    alloc_exists: int = 0
    force_hit: int = 0
    force_miss: int = 0
    force_read: int = 0
    dirty: int = 0
    clean_rec: int = 0
    clean_eval: int = 0
    clean_edge: int = 0
    remove: int = 0

    @classmethod
    def from_counter(cls, counter: Counter[Effect]) -> EngineCounts:
        return cls(**{_count_field(effect): n for effect, n in counter.items()})

    def __getitem__(self, effect: Effect) -> int:
        return getattr(self, _count_field(effect))

    def __sub__(self, other: EngineCounts) -> EngineCounts:
        return EngineCounts(
            **{f.name: getattr(self, f.name) - getattr(other, f.name) for f in dataclasses.fields(self)},
        )

    @property
    def total(self) -> int:
        return sum(getattr(self, f.name) for f in dataclasses.fields(self))

    def as_dict(self) -> dict[str, int]:
        return dataclasses.asdict(self)


class Engine(ABC):
    """A backend that allocates cells and thunks and forces them.

    The baseline engine recomputes every thunk on every force. The incremental
    engine records a dependency graph and reuses results whose inputs did not
    change. Scenario code never talks to an engine directly; it goes through a
    ``BackendContext``.
    """

    kind: ClassVar[EngineKind]

    def __init__(self) -> None:
        self.id = next(_engine_ids)
        self._path: tuple[Name, ...] = ()
        self._counter: Counter[Effect] = Counter()

    @abstractmethod
    def cell[T](self, name: Name, value: T) -> Art[T]:
        """Allocate (or re-allocate) a mutable input cell."""

    @abstractmethod
    def thunk[T](self, name: Name, fn: Callable[..., T], args: tuple[Any, ...]) -> Art[T]:
        """Allocate (or re-allocate) a suspended computation ``fn(*args)``."""

    @abstractmethod
    def force[T](self, art: Art[T]) -> T:
        """Return the value of a cell, or the (possibly cached) result of a thunk."""

    @abstractmethod
    def peek(self, art: Art[Any]) -> tuple[bool, Any]:
        """Read an articulation without forcing it.

        Returns ``(False, None)`` for a thunk that has no result yet, or whose
        result may be out of date.
        """

    @contextmanager
    def namespace(self, name: Name) -> Iterator[None]:
        """Allocate under a nested namespace for the duration of the block."""
        saved = self._path
        self._path = (*saved, name)
        try:
            yield
        finally:
            self._path = saved

    @property
    def path(self) -> tuple[Name, ...]:
        return self._path

    def counts(self) -> EngineCounts:
        """Cumulative operation counts since the engine was created."""
        return EngineCounts.from_counter(self._counter)

    def trace_begin(self) -> None:  # noqa: B027 - optional hook
        """Start recording a trace log. Engines without traces ignore this."""

    def trace_end(self) -> tuple[Trace, ...]:
        """Stop recording and return the log collected since ``trace_begin``."""
        return ()

    def snapshot(self) -> GraphSnapshot | None:
        """Copy the engine's dependency graph, if it keeps one."""
        return None

    def _loc(self, name: Name) -> Loc:
        return Loc(self._path, name)

    def _check_owner(self, art: Art[Any]) -> None:
        if not isinstance(art, Art):
            msg = f"Expected an articulation, got {type(art).__name__}"
            raise TypeError(msg)
        if art.engine != self.id:
            msg = f"Articulation {art} belongs to engine #{art.engine}, not to the active {self.kind} engine #{self.id}"
            raise BackendDesyncError(msg)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id})"


def _rebuild(value: Any, on_art: Callable[[Art[Any]], Any]) -> Any:
    if isinstance(value, Art):
        return on_art(value)
    if isinstance(value, (Name, Loc, str, bytes, int, float)) or value is None:
        return value
    if isinstance(value, tuple):
        return tuple(_rebuild(v, on_art) for v in value)
    if isinstance(value, list):
        return [_rebuild(v, on_art) for v in value]
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        changes = {f.name: _rebuild(getattr(value, f.name), on_art) for f in dataclasses.fields(value) if f.init}
        return dataclasses.replace(value, **changes)
    return value


def materialize(engine: Engine, value: Any) -> Any:
    """Force every articulation reachable from ``value`` and inline its content.

    The result contains no articulations, so values produced by different
    engines can be compared with ``==``.
    """
    return _rebuild(value, lambda art: materialize(engine, engine.force(art)))


def reflect_value(engine: Engine, value: Any) -> Any:
    """Copy ``value`` with articulations inlined, without forcing anything.

    Thunks that have no result yet are replaced by ``Unforced`` markers.
    """

    def on_art(art: Art[Any]) -> Any:
        engine._check_owner(art)  # noqa: SLF001
        ready, content = engine.peek(art)
        if not ready:
            return Unforced(art.loc)
        return reflect_value(engine, content)

    return _rebuild(value, on_art)


def matches_forced(reflected: Any, value: Any) -> bool:
    """Compare a reflected value with a materialized one.

    An ``Unforced`` marker in ``reflected`` matches anything, so only the
    part of the value that was actually forced is compared.
    """
    if isinstance(reflected, Unforced):
        return True
    if isinstance(reflected, (tuple, list)):
        return (
            type(reflected) is type(value)
            and len(reflected) == len(value)
            and all(matches_forced(r, v) for r, v in zip(reflected, value, strict=True))
        )
    if dataclasses.is_dataclass(reflected) and not isinstance(reflected, type):
        return type(reflected) is type(value) and all(
            matches_forced(getattr(reflected, f.name), getattr(value, f.name))
            for f in dataclasses.fields(reflected)
            if f.compare
        )
    return reflected == value
