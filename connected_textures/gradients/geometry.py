"""
Vectorised 2D helpers for the gradient rasterizer.
"""

from typing import Tuple

import torch

_EPSILON = 1e-12


def closest_point_on_segment(
    xs: torch.Tensor, ys: torch.Tensor, a: torch.Tensor, b: torch.Tensor
) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Closest point on segment ``a``-``b`` to every point ``(xs, ys)``.

    The projection parameter is clamped to [0, 1] so results never leave
    the segment. A zero-length segment collapses to ``a``.
    """
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    length_sq = dx * dx + dy * dy

    if float(length_sq) <= _EPSILON:
        return torch.full_like(xs, float(a[0])), torch.full_like(ys, float(a[1]))

    t = ((xs - a[0]) * dx + (ys - a[1]) * dy) / length_sq
    t = torch.clamp(t, 0.0, 1.0)

    return a[0] + t * dx, a[1] + t * dy


def polar(x: torch.Tensor, y: torch.Tensor) -> Tuple[torch.Tensor, torch.Tensor]:
    """Cartesian to (radius, angle)."""
    return torch.hypot(x, y), torch.atan2(y, x)


def euclidean(r: torch.Tensor, theta: torch.Tensor) -> Tuple[torch.Tensor, torch.Tensor]:
    """(radius, angle) to Cartesian."""
    return r * torch.cos(theta), r * torch.sin(theta)
