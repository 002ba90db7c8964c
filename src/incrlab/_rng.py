"""Forkable, counter-based pseudo-random generator.

The harness hands each backend its own fork of a single master generator, so
both backends draw identical randomness within a step without disturbing the
master's position.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Sequence


class Rng:
    """A Philox-backed generator with an explicit ``fork`` operation.

    Two generators compare equal when their underlying counter states are
    equal, i.e. when they will produce the same future draws.
    """

    __slots__ = ("_bit_generator", "_generator")

    def __init__(self, bit_generator: np.random.Philox) -> None:
        self._bit_generator = bit_generator
        self._generator = np.random.Generator(bit_generator)

    @classmethod
    def from_seeds(cls, seeds: Sequence[int]) -> Rng:
        """Create a generator from a sequence of non-negative integer seeds."""
        return cls(np.random.Philox(np.random.SeedSequence(list(seeds))))

    def fork(self) -> Rng:
        """Return an independent copy positioned exactly where this one is."""
        bit_generator = np.random.Philox()
        bit_generator.state = self._bit_generator.state
        return Rng(bit_generator)

    @property
    def state(self) -> dict[str, Any]:
        """The underlying bit generator state."""
        return self._bit_generator.state

    def below(self, bound: int) -> int:
        """Draw an integer uniformly from ``[0, bound)``."""
        if bound <= 0:
            msg = f"bound must be positive, got {bound}"
            raise ValueError(msg)
        return int(self._generator.integers(0, bound))

    def word(self) -> int:
        """Draw a uniformly random unsigned 64-bit integer."""
        return int(self._generator.integers(0, 2**64, dtype=np.uint64))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rng):
            return NotImplemented
        return _states_equal(self.state, other.state)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        counter = self.state["state"]["counter"]
        return f"Rng(counter={counter.tolist()})"


def _states_equal(a: Any, b: Any) -> bool:
    """Compare bit generator states, which may contain numpy arrays."""
    if isinstance(a, dict) and isinstance(b, dict):
        return a.keys() == b.keys() and all(_states_equal(a[k], b[k]) for k in a)
    if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
        return bool(np.array_equal(a, b))
    return a == b
