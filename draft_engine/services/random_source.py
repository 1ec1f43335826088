"""Seeded pseudo-random source for reproducible simulations."""
import math


_MASK32 = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & _MASK32


class Mulberry32:
    """
    Mulberry32 generator with its own state.

    Each simulation builds its own instance, so two runs with the same seed
    produce identical streams no matter what else is running.
    """

    def __init__(self, seed: int):
        self._state = seed & _MASK32

    @property
    def state(self) -> int:
        return self._state

    def copy(self) -> 'Mulberry32':
        clone = Mulberry32(0)
        clone._state = self._state
        return clone

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / 4294967296.0

    def gauss(self) -> float:
        """Standard normal sample via Box-Muller."""
        u = 0.0
        v = 0.0
        while u == 0.0:
            u = self.random()
        while v == 0.0:
            v = self.random()
        return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
