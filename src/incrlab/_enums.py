"""String enums shared across incrlab, each member carrying a docstring."""

from enum import StrEnum
from typing import Self


class StrEnumWithDoc(StrEnum):
    """Base class for string enums whose members carry their own docstring."""

    def __new__(cls, value: str, doc: str = "") -> Self:
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.__doc__ = doc
        return obj


class NominalStrategy(StrEnumWithDoc):
    """How checkpoint names are placed in a generated input."""

    REGULAR = "regular", "Checkpoint names come from a sequential counter."
    BY_CONTENT = "by_content", "Checkpoint names are derived from the element they wrap."


class EngineKind(StrEnumWithDoc):
    """The two evaluation strategies compared by the harness."""

    BASELINE = "baseline", "Recomputes everything from scratch on every force."
    INCREMENTAL = "incremental", "Keeps a dependency graph and reuses prior results."


class EffectKind(StrEnumWithDoc):
    """Kind of a dependency edge in the incremental graph."""

    ALLOC = "alloc", "The source allocated the target."
    FORCE = "force", "The source forced (observed) the target."


class Effect(StrEnumWithDoc):
    """Operation reported by the incremental engine in its trace log."""

    CLEAN_REC = "clean-rec", "Cleaning recursed into a dirty successor."
    CLEAN_EVAL = "clean-eval", "Cleaning found a changed value and re-evaluated the thunk."
    CLEAN_EDGE = "clean-edge", "Cleaning found an unchanged value and cleaned the edge."
    DIRTY = "dirty", "An edge was dirtied by a change to its target."
    REMOVE = "remove", "An edge was removed before re-evaluation."
    ALLOC_FRESH = "alloc-fresh", "A name was allocated for the first time."
    ALLOC_EXISTS = "alloc-exists", "A name was allocated again."
    FORCE_HIT = "force-hit", "A thunk was forced and its cached result reused."
    FORCE_MISS = "force-miss", "A thunk was forced and (re-)evaluated."
    FORCE_READ = "force-read", "A cell was read."

    @property
    def kind(self) -> EffectKind | None:
        """The edge kind this effect is recorded on, if any."""
        match self:
            case Effect.ALLOC_FRESH | Effect.ALLOC_EXISTS:
                return EffectKind.ALLOC
            case Effect.FORCE_HIT | Effect.FORCE_MISS | Effect.FORCE_READ:
                return EffectKind.FORCE
            case _:
                return None
