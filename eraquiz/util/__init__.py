from .clock import Clock, FixedClock, SystemClock
from .randomness import Permutation, identity_permutation, make_permutation, seed_from_env

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "Permutation",
    "identity_permutation",
    "make_permutation",
    "seed_from_env",
]
