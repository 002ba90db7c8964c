"""The backend context handed to scenario code.

Scenario code is written once and runs under both backends. It never names
an engine; it calls ``ctx.cell``, ``ctx.thunk`` and ``ctx.force`` and the
context forwards to whichever engine the harness installed last.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ._engine import materialize, reflect_value
from ._enums import EngineKind
from ._errors import BackendDesyncError

if TYPE_CHECKING:
    from collections.abc import Callable
    from contextlib import AbstractContextManager

    from ._engine import Art, Engine, Name

logger = logging.getLogger(__name__)


class BackendContext:
    """Holds the engine that backend operations currently go to."""

    __slots__ = ("_active",)

    def __init__(self, engine: Engine | None = None) -> None:
        self._active = engine

    def install(self, engine: Engine | None) -> Engine | None:
        """Make ``engine`` the active engine and return the one it replaces."""
        previous = self._active
        self._active = engine
        logger.debug("Installed %r (replacing %r)", engine, previous)
        return previous

    @property
    def active(self) -> Engine:
        """The active engine.

        Raises:
            BackendDesyncError: If no engine is installed.

        """
        if self._active is None:
            msg = "No backend is installed"
            raise BackendDesyncError(msg)
        return self._active

    def is_incremental(self) -> bool:
        return self._active is not None and self._active.kind is EngineKind.INCREMENTAL

    def is_baseline(self) -> bool:
        return self._active is not None and self._active.kind is EngineKind.BASELINE

    def expect(self, kind: EngineKind) -> None:
        """Check that the active engine is of the given kind.

        Raises:
            BackendDesyncError: If it is not.

        """
        actual = self._active.kind if self._active is not None else None
        if actual is not kind:
            msg = f"Expected the {kind} backend to be active, found {actual or 'none'}"
            raise BackendDesyncError(msg)

    def cell[T](self, name: Name, value: T) -> Art[T]:
        return self.active.cell(name, value)

    def thunk[T](self, name: Name, fn: Callable[..., T], *args: Any) -> Art[T]:
        """Allocate a thunk computing ``fn(ctx, *args)``."""
        return self.active.thunk(name, fn, (self, *args))

    def force[T](self, art: Art[T]) -> T:
        return self.active.force(art)

    def memo[T](self, name: Name, fn: Callable[..., T], *args: Any) -> T:
        """Allocate a thunk and force it immediately."""
        return self.force(self.thunk(name, fn, *args))

    def namespace(self, name: Name) -> AbstractContextManager[None]:
        return self.active.namespace(name)

    def reflect_value(self, value: Any) -> Any:
        """Copy ``value`` with articulations inlined and nothing forced."""
        return reflect_value(self.active, value)

    def materialize(self, value: Any) -> Any:
        """Force everything reachable from ``value`` and inline it."""
        return materialize(self.active, value)

    def __repr__(self) -> str:
        return f"BackendContext({self._active!r})"
