"""
Rejection-sampled Gaussian random walks.

A walk starts at a fixed ordinate and takes ``count - 1`` steps drawn from
N(0, 0.5) scaled by ``variance``. A walk is only accepted when its last
sample ends within ``tolerance`` of its first, which is what lets tiles
generated from independent walks line up with each other.
"""

import logging
import time
from typing import Optional, Tuple

import torch

from ..errors import SeedRejectionExhaustedError

log = logging.getLogger(__name__)

STEP_STD = 0.5
CLOSURE_TOLERANCE = 1.0

_SEED_MASK = 0xFFFF_FFFF_FFFF_FFFF


def wall_clock_seed() -> int:
    return time.time_ns() & _SEED_MASK


def random_walk(start: float, count: int, variance: float, generator: torch.Generator) -> torch.Tensor:
    steps = torch.randn(count - 1, generator=generator, dtype=torch.float64) * STEP_STD * variance
    walk = torch.empty(count, dtype=torch.float64)
    walk[0] = start
    walk[1:] = start + torch.cumsum(steps, dim=0)
    return walk


def closed_walk(
    start: float,
    count: int,
    variance: float,
    seed: Optional[int] = None,
    max_attempts: int = 1000,
    tolerance: float = CLOSURE_TOLERANCE,
    kind: str = "walking",
) -> Tuple[torch.Tensor, int]:
    """
    Draw walks until one closes within ``tolerance``.

    Attempt ``k`` is seeded with ``seed + k`` so a given seed always yields
    the same accepted walk. Returns the walk and the number of attempts used.
    """
    if count < 2:
        raise ValueError(f"A walk needs at least 2 samples, got {count}")
    if seed is None:
        seed = wall_clock_seed()

    generator = torch.Generator()
    for attempt in range(max_attempts):
        generator.manual_seed((seed + attempt) & _SEED_MASK)
        walk = random_walk(start, count, variance, generator)
        if abs(float(walk[0] - walk[-1])) <= tolerance:
            log.debug("%s walk closed after %d attempt(s)", kind, attempt + 1)
            return walk, attempt + 1

    raise SeedRejectionExhaustedError(kind, max_attempts, tolerance)
