"""
Random source helpers.

Every stochastic routine takes an optional ``numpy.random.Generator`` so that a
single seeded source can drive a whole league; ``None`` means fresh entropy.
"""

import uuid
from typing import Optional, Sequence, TypeVar

import numpy as np

T = TypeVar("T")


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create a generator, seeded for reproducibility when ``seed`` is given."""
    return np.random.default_rng(seed)


def ensure_rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def randint(rng: np.random.Generator, low: int, high: int) -> int:
    """Uniform integer in the closed range [low, high]."""
    return int(rng.integers(low, high, endpoint=True))


def pick(rng: np.random.Generator, items: Sequence[T]) -> T:
    """Uniformly random element of a non-empty sequence."""
    return items[int(rng.integers(len(items)))]


def new_id(rng: np.random.Generator) -> str:
    """UUID4-formatted identifier drawn from ``rng``."""
    return str(uuid.UUID(bytes=rng.bytes(16), version=4))
