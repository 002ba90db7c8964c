"""The baseline engine: no graph, no caching."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from incrlab._enums import Effect, EngineKind

from ._core import Art, Engine

if TYPE_CHECKING:
    from collections.abc import Callable

    from ._names import Loc, Name

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Cell:
    value: Any


@dataclass(frozen=True, slots=True)
class _Suspension:
    loc: Loc
    fn: Callable[..., Any]
    args: tuple[Any, ...]


class NaiveEngine(Engine):
    """Evaluates every thunk from scratch each time it is forced.

    Cells are immutable snapshots: re-allocating a name yields a new
    articulation and leaves older ones untouched.
    """

    kind = EngineKind.BASELINE

    def cell[T](self, name: Name, value: T) -> Art[T]:
        self._counter[Effect.ALLOC_FRESH] += 1
        return Art(self._loc(name), self.id, _Cell(value))

    def thunk[T](self, name: Name, fn: Callable[..., T], args: tuple[Any, ...]) -> Art[T]:
        loc = self._loc(name)
        self._counter[Effect.ALLOC_FRESH] += 1
        return Art(loc, self.id, _Suspension(loc, fn, args))

    def force[T](self, art: Art[T]) -> T:
        self._check_owner(art)
        match art.payload:
            case _Cell(value):
                self._counter[Effect.FORCE_READ] += 1
                return value
            case _Suspension(loc, fn, args):
                self._counter[Effect.FORCE_MISS] += 1
                saved = self._path
                self._path = loc.path
                try:
                    return fn(*args)
                finally:
                    self._path = saved
            case payload:
                msg = f"Unknown articulation payload: {payload!r}"
                raise TypeError(msg)

    def peek(self, art: Art[Any]) -> tuple[bool, Any]:
        if isinstance(art.payload, _Cell):
            return True, art.payload.value
        return False, None
