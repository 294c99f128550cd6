from typing import Sequence, TypeVar

import numpy as np

T = TypeVar("T")


class RandomSource:
    """Source of randomness for sampling usages and recurrences.

    Wraps a :class:`numpy.random.Generator`. Pass the same instance to every call
    of one simulation to make it reproducible from a single seed.

    Args:
        seed: Seed, ``numpy.random.SeedSequence`` or an existing ``numpy.random.Generator``.
            ``None`` draws fresh entropy from the OS.
    """

    def __init__(self, seed=None):
        if isinstance(seed, np.random.Generator):
            self.generator = seed
        else:
            self.generator = np.random.default_rng(seed)

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.generator.bit_generator.__class__.__name__}>"

    def uniform(self, low: float, high: float) -> float:
        """Uniform real number in ``[low, high)``. An empty interval yields ``low``."""
        if high <= low:
            return float(low)
        return float(self.generator.uniform(low, high))

    def choice(self, options: Sequence[T]) -> T:
        """Pick one of ``options`` with equal probability."""
        if not options:
            raise ValueError("Cannot choose from an empty sequence.")
        return options[int(self.generator.integers(len(options)))]


# Process-wide source used when no explicit one is given
_default_source = RandomSource()


def get_random_source(rng=None) -> RandomSource:
    """Resolve ``rng`` into a :class:`RandomSource`.

    ``None`` returns the process-wide source, a ``numpy.random.Generator`` is wrapped
    (keeping its state) and a :class:`RandomSource` is returned as is. Integer seeds
    are rejected here: a seed must be turned into a source once, not on every draw.
    """
    if rng is None:
        return _default_source
    if isinstance(rng, RandomSource):
        return rng
    if isinstance(rng, np.random.Generator):
        return RandomSource(rng)
    raise TypeError(f"Expected RandomSource or numpy Generator, got '{type(rng).__name__}'.")
