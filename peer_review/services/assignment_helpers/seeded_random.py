# /peer-review-backend/peer_review/services/assignment_helpers/seeded_random.py

"""
Deterministic random source for the pairing strategies.

The generator is a 32-bit "mulberry32" mixer whose state is derived from the
SHA-256 digest of the seed string, so any string (short, numeric, adversarial)
yields a well-spread starting state. A zero state is replaced by the mixer's
increment constant so the sequence can never collapse into a fixed point.
"""

import hashlib
import secrets
from typing import Callable, List, Optional, Sequence, TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF
_GOLDEN_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiplication."""
    return (a * b) & _MASK32


def generate_seed() -> str:
    """A fresh random seed, returned to callers so previews can be reproduced."""
    return secrets.token_hex(8)


def initial_state(seed: str) -> int:
    digest = hashlib.sha256(str(seed).encode("utf-8")).digest()
    state = int.from_bytes(digest[:4], "little")
    if state == 0:
        state = _GOLDEN_INCREMENT
    return state


class SeededRandom:
    """
    Callable returning floats in [0, 1). Two instances built from the same
    seed produce the same sequence.
    """

    def __init__(self, seed: str):
        self.seed = seed
        self._state = initial_state(seed)

    def __call__(self) -> float:
        self._state = (self._state + _GOLDEN_INCREMENT) & _MASK32
        s = self._state
        t = _imul(s ^ (s >> 15), 1 | s)
        t ^= (t + _imul(t ^ (t >> 7), 61 | t)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / _TWO_POW_32


def build_seeded_random(seed: Optional[str]) -> Optional[Callable[[], float]]:
    if seed is None:
        return None
    return SeededRandom(seed)


def shuffle_items(items: Sequence[T], random_fn: Optional[Callable[[], float]] = None) -> List[T]:
    """
    Fisher-Yates shuffle returning a new list. Without `random_fn` the shuffle
    draws from the OS CSPRNG instead.
    """
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        if random_fn is not None:
            j = int(random_fn() * (i + 1))
        else:
            j = secrets.randbelow(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled
