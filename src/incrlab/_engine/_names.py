"""Names and locations identifying allocations in an engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Name:
    """A symbolic, hashable identity for an allocation.

    A name is a base symbol (a string, an integer or a pair of names) plus a
    path of fork directions. Forking ``n`` gives ``n.L`` and ``n.R``, two
    fresh names that are distinct from each other and from ``n``.
    """

    symbol: str | int | tuple[Name, Name]
    forks: tuple[str, ...] = ()

    @classmethod
    def of_str(cls, s: str) -> Name:
        return cls(s)

    @classmethod
    def of_int(cls, n: int) -> Name:
        return cls(n)

    @classmethod
    def pair(cls, left: Name, right: Name) -> Name:
        return cls((left, right))

    def fork(self) -> tuple[Name, Name]:
        """Split this name into two distinct names."""
        return Name(self.symbol, (*self.forks, "L")), Name(self.symbol, (*self.forks, "R"))

    def __str__(self) -> str:
        if isinstance(self.symbol, tuple):
            base = f"({self.symbol[0]},{self.symbol[1]})"
        else:
            base = str(self.symbol)
        return ".".join((base, *self.forks))


@dataclass(frozen=True, slots=True)
class Loc:
    """A location: the namespace path an allocation happened in, plus its name."""

    path: tuple[Name, ...]
    name: Name

    def __str__(self) -> str:
        return "/".join((*(str(p) for p in self.path), str(self.name)))
