from __future__ import annotations

"""Randomness helpers for figure selection and seeding."""

import os
from typing import Callable, List, Optional, Sequence, TypeVar

import numpy as np

T = TypeVar("T")

Permutation = Callable[[Sequence[T]], List[T]]


def seed_from_env() -> Optional[int]:
    """Return the SEED env var as an int, or None if unset/invalid."""
    seed = os.environ.get("SEED")
    if seed is None:
        return None
    try:
        return int(seed)
    except ValueError:
        return None


def make_permutation(seed: Optional[int] = None) -> Permutation:
    """Build a shuffling function.

    With a seed the order is reproducible across runs; without one it draws
    from fresh OS entropy.
    """
    rng = np.random.default_rng(seed)

    def permute(items: Sequence[T]) -> List[T]:
        order = rng.permutation(len(items))
        return [items[int(i)] for i in order]

    return permute


def identity_permutation(items: Sequence[T]) -> List[T]:
    return list(items)
