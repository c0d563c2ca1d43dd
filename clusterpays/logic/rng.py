"""RNG sources for symbol sampling."""
import random
import secrets
from abc import ABC, abstractmethod


class RNGBase(ABC):
    """
    Abstract RNG interface.

    Implementations only need randint(); randbelow() is derived from it
    unless overridden.
    """

    @abstractmethod
    def randint(self, a: int, b: int) -> int:
        """Return random int in [a, b] inclusive."""
        pass

    def randbelow(self, n: int) -> int:
        """Return random int in [0, n)."""
        if n <= 0:
            raise ValueError(f"randbelow bound must be positive, got {n}")
        return self.randint(0, n - 1)


class ProductionRNG(RNGBase):
    """Default RNG for live play, backed by the OS entropy pool."""

    def randint(self, a: int, b: int) -> int:
        return secrets.randbelow(b - a + 1) + a

    def randbelow(self, n: int) -> int:
        return secrets.randbelow(n)


class SeededRNG(RNGBase):
    """
    Test/Simulation RNG.

    Deterministic for a given seed. One instance per grid or engine;
    sharing it interleaves draws between owners.
    """

    def __init__(self, seed: int):
        self._rng = random.Random(seed)
        self.seed = seed

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def randbelow(self, n: int) -> int:
        return self._rng.randrange(n)
