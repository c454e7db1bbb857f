"""
Abstract base class for walking gradients.

A walking gradient is a per-pixel blend weight field built around a random
seam polyline. Pixels on the seam weigh 0.5; the weight ramps linearly to 0
on one side and to 1 on the other over ``steepness`` pixels.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Union

import torch
from PIL import Image

from .geometry import closest_point_on_segment
from .sampling import wall_clock_seed


class GradientKind(str, Enum):
    EDGE = "edge"
    CORNER = "corner"


@dataclass(frozen=True)
class GradientSettings:
    kind: GradientKind
    width: int
    height: int
    sample_count: int
    variance: float
    steepness: float
    seam_height: float
    max_attempts: int = 1000

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Gradient dimensions must be positive, got {self.width}x{self.height}")
        if self.steepness <= 0:
            raise ValueError(f"steepness must be > 0, got {self.steepness}")
        if self.variance < 0:
            raise ValueError(f"variance must be >= 0, got {self.variance}")


SYMMETRY_OPERATIONS = ("flip_x", "flip_y", "transpose", "invert")


class WalkingGradient(ABC):
    kind: GradientKind

    def __init__(self, settings: GradientSettings, seed: Optional[int] = None):
        if settings.kind != self.kind:
            raise ValueError(f"{self.__class__.__name__} cannot be built from {settings.kind.value} settings")

        self.settings = settings
        self.width = settings.width
        self.height = settings.height
        self.seed = wall_clock_seed() if seed is None else seed
        self.attempts = 0

        self.samples = self.generate_samples()
        self.field = self.rasterize()

    @property
    @abstractmethod
    def sample_count(self) -> int:
        pass

    @abstractmethod
    def generate_samples(self) -> torch.Tensor:
        """Return the seam polyline as an (N, 2) tensor of Cartesian points."""

    @abstractmethod
    def is_outside(self, closest_x, closest_y, xs, ys) -> torch.Tensor:
        """Boolean mask of pixels on the side of the seam that ramps towards 1."""

    def rasterize(self) -> torch.Tensor:
        ys, xs = torch.meshgrid(
            torch.arange(self.height, dtype=torch.float64),
            torch.arange(self.width, dtype=torch.float64),
            indexing="ij",
        )

        best_d = torch.full_like(xs, float("inf"))
        best_x = torch.zeros_like(xs)
        best_y = torch.zeros_like(ys)

        samples = self.samples
        for i in range(1, samples.shape[0]):
            cx, cy = closest_point_on_segment(xs, ys, samples[i - 1], samples[i])
            d = torch.hypot(xs - cx, ys - cy)
            # strict: the earliest segment keeps ties
            closer = d < best_d
            best_d = torch.where(closer, d, best_d)
            best_x = torch.where(closer, cx, best_x)
            best_y = torch.where(closer, cy, best_y)

        ramp = best_d / (2.0 * self.settings.steepness)
        outside = self.is_outside(best_x, best_y, xs, ys)
        field = torch.where(
            outside,
            torch.clamp(0.5 + ramp, max=1.0),
            0.5 - torch.clamp(ramp, max=0.5),
        )
        return field.to(torch.float32)

    def get_value(self, x: int, y: int) -> float:
        return float(self.field[y, x])

    def flip_x(self) -> None:
        """Mirror each row left to right."""
        self.field = torch.flip(self.field, dims=[1]).contiguous()

    def flip_y(self) -> None:
        """Mirror the rows top to bottom."""
        self.field = torch.flip(self.field, dims=[0]).contiguous()

    def transpose(self) -> None:
        """Transpose like a matrix; a non-square field swaps its width and height."""
        self.field = self.field.t().contiguous()
        self.width, self.height = self.height, self.width

    def invert(self) -> None:
        self.field = 1.0 - self.field

    def apply(self, operations: Iterable[str]) -> None:
        for name in operations:
            if name not in SYMMETRY_OPERATIONS:
                raise ValueError(f"Unknown symmetry operation: '{name}'. Available: {list(SYMMETRY_OPERATIONS)}")
            getattr(self, name)()

    def to_image(self) -> Image.Image:
        """Grayscale preview of the field, 0 black and 1 white."""
        array = self.field.mul(255.0).round().clamp(0, 255).to(torch.uint8).numpy()
        return Image.fromarray(array)

    def save_debug(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        self.to_image().save(path)
        return path

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(width={self.width}, height={self.height}, "
            f"samples={self.sample_count}, seed={self.seed})"
        )
