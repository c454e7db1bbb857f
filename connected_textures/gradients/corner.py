"""
Corner gradients: a seam along a quarter circle around the tile origin.

The walk runs on the radius while the angle sweeps evenly from 0 to pi/2.
A quarter circle of radius r is pi/4 the length of a diameter, so the walk
uses that fraction of the edge sample count.
"""

import math

import torch

from .base import GradientKind, WalkingGradient
from .geometry import euclidean, polar
from .sampling import closed_walk


class CornerGradient(WalkingGradient):
    kind = GradientKind.CORNER

    @property
    def sample_count(self) -> int:
        return int(math.pi / 4 * self.settings.sample_count)

    def generate_samples(self) -> torch.Tensor:
        count = self.sample_count
        if count < 2:
            raise ValueError(
                f"Corner gradients need at least 2 samples, got {count} "
                f"from sample_count={self.settings.sample_count}"
            )

        radii, self.attempts = closed_walk(
            self.settings.seam_height,
            count,
            self.settings.variance,
            seed=self.seed,
            max_attempts=self.settings.max_attempts,
            kind=self.kind.value,
        )
        angles = torch.arange(count, dtype=torch.float64) * ((math.pi / 2) / (count - 1))
        self.polar_samples = torch.stack([radii, angles], dim=1)

        xs, ys = euclidean(radii, angles)
        return torch.stack([xs, ys], dim=1)

    def is_outside(self, closest_x, closest_y, xs, ys) -> torch.Tensor:
        return polar(closest_x, closest_y)[0] < polar(xs, ys)[0]
