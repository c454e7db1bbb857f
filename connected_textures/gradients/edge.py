"""
Edge gradients: a seam that crosses the tile from left to right.
"""

import torch

from .base import GradientKind, WalkingGradient
from .sampling import closed_walk


class EdgeGradient(WalkingGradient):
    kind = GradientKind.EDGE

    @property
    def sample_count(self) -> int:
        return self.settings.sample_count

    def generate_samples(self) -> torch.Tensor:
        count = self.sample_count
        if count < 2:
            raise ValueError(f"Edge gradients need at least 2 samples, got {count}")

        ys, self.attempts = closed_walk(
            self.settings.seam_height,
            count,
            self.settings.variance,
            seed=self.seed,
            max_attempts=self.settings.max_attempts,
            kind=self.kind.value,
        )
        xs = torch.arange(count, dtype=torch.float64) * (self.width / (count - 1))
        return torch.stack([xs, ys], dim=1)

    def is_outside(self, closest_x, closest_y, xs, ys) -> torch.Tensor:
        # below the seam
        return closest_y < ys
