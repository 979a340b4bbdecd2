"""Random number generation utilities for neuralmass.

Every noisy state variable of a column owns one ``NormalStream``. Streams are
seeded exactly once, at construction, and never touch torch's global RNG, so
columns advanced side by side cannot perturb each other's noise.
"""

from __future__ import annotations

from hashlib import md5
from typing import Optional, Sequence

import torch


def string_hash_md5(s: str) -> int:
    """Stable hash function for strings using MD5. Returns 31-bit int safe for int64 arithmetic."""
    return int(md5(s.encode()).hexdigest()[:8], 16) % (2**31)


def derive_seed(base_seed: int, stream_name: str) -> int:
    """Derive a reproducible per-stream seed from a column seed and a stream name.

    Uses md5 instead of ``hash()`` because Python salts string hashes per session.
    """
    return string_hash_md5(f"{base_seed}_{stream_name}")


class NormalStream:
    """Independent standard-normal sample stream backed by a private generator.

    Args:
        seed: Seed applied once at construction. ``None`` seeds from OS entropy.
        dtype: Sample dtype (float64 by default to match column state).
    """

    def __init__(self, seed: Optional[int] = None, dtype: torch.dtype = torch.float64):
        self.dtype = dtype
        self.generator = torch.Generator(device="cpu")
        if seed is None:
            self.seed = self.generator.seed()
        else:
            self.seed = int(seed)
            self.generator.manual_seed(self.seed)

    def draw(self, n: int = 1) -> torch.Tensor:
        """Return ``n`` samples from N(0, 1)."""
        return torch.randn(n, generator=self.generator, dtype=self.dtype)


class SequenceStream(NormalStream):
    """Deterministic stand-in for ``NormalStream`` that replays fixed values.

    Values are returned in order and wrap around when exhausted. Useful for
    tests that need to know exactly which sample feeds which RK stage.
    """

    def __init__(self, values: Sequence[float], dtype: torch.dtype = torch.float64):
        if len(values) == 0:
            raise ValueError("SequenceStream needs at least one value")
        self.dtype = dtype
        self.values = torch.tensor(list(values), dtype=dtype)
        self.position = 0

    def draw(self, n: int = 1) -> torch.Tensor:
        idx = (torch.arange(n) + self.position) % self.values.shape[0]
        self.position = (self.position + n) % self.values.shape[0]
        return self.values[idx]
