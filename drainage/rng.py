"""Deterministic random sources: per-cell LCG and splittable numpy streams."""

from __future__ import annotations

from dataclasses import dataclass
import hashlib

import numpy as np

MINSTD_MULTIPLIER = 48271
MINSTD_MODULUS = 2147483647

_MASK32 = 0xFFFFFFFF


def _normalize_seed(seed: int) -> int:
    return int(seed) & ((1 << 64) - 1)


def cell_hash(seed: int, i: int, j: int) -> int:
    """Hash a seed and integer cell coordinates into an unsigned 32-bit value."""

    h = ((int(i) * 73856093) ^ (int(j) * 19349663) ^ (int(seed) * 83492791)) & _MASK32
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & _MASK32
    h ^= h >> 13
    return h


class MinStdRand:
    """Park-Miller linear congruential generator (the C++ `minstd_rand`)."""

    __slots__ = ("state",)

    def __init__(self, seed: int) -> None:
        state = int(seed) % MINSTD_MODULUS
        self.state = state if state != 0 else 1

    def next(self) -> int:
        self.state = (self.state * MINSTD_MULTIPLIER) % MINSTD_MODULUS
        return self.state

    def uniform(self) -> float:
        """Return a float in the open interval (0, 1)."""

        return self.next() / MINSTD_MODULUS


def derive_seed(parent_seed: int, key: str, *, namespace: str = "drainage-v1") -> int:
    """Derive a deterministic child seed from a parent seed and label."""

    payload = f"{namespace}:{_normalize_seed(parent_seed)}:{key}".encode("utf-8")
    digest = hashlib.blake2b(payload, digest_size=8, person=b"rngfork00").digest()
    return int.from_bytes(digest, byteorder="big", signed=False)


@dataclass(frozen=True)
class RngStream:
    """Immutable RNG stream that can be forked by deterministic stage names."""

    seed: int
    namespace: str = "drainage-v1"

    def fork(self, key: str) -> "RngStream":
        if not key:
            raise ValueError("fork key must be non-empty")
        return RngStream(derive_seed(self.seed, key, namespace=self.namespace), self.namespace)

    def generator(self) -> np.random.Generator:
        return np.random.Generator(np.random.PCG64(np.uint64(_normalize_seed(self.seed))))
