"""
Walking gradients for connected texture tiles.

Available kinds:
- edge: seam crossing the tile horizontally (N/S/E/W transitions)
- corner: quarter-circle seam around the tile origin (corner transitions)
"""

from typing import Optional

from .base import GradientKind, GradientSettings, WalkingGradient, SYMMETRY_OPERATIONS
from .edge import EdgeGradient
from .corner import CornerGradient

GRADIENTS = {
    GradientKind.EDGE.value: EdgeGradient,
    GradientKind.CORNER.value: CornerGradient,
}


def get_gradient(settings: GradientSettings, seed: Optional[int] = None) -> WalkingGradient:
    """
    Build the walking gradient matching ``settings.kind``.

    Args:
        settings: Gradient geometry and random walk parameters
        seed: Base seed for the rejection sampler (wall clock when omitted)

    Returns:
        WalkingGradient instance with its field rasterized
    """
    kind = settings.kind.value if isinstance(settings.kind, GradientKind) else str(settings.kind)
    if kind not in GRADIENTS:
        available = get_available_gradient_kinds()
        raise ValueError(f"Unknown gradient kind: '{kind}'. Available kinds: {available}")

    return GRADIENTS[kind](settings, seed=seed)


def get_available_gradient_kinds() -> list:
    return list(GRADIENTS.keys())


__all__ = [
    "GradientKind",
    "GradientSettings",
    "WalkingGradient",
    "EdgeGradient",
    "CornerGradient",
    "SYMMETRY_OPERATIONS",
    "GRADIENTS",
    "get_gradient",
    "get_available_gradient_kinds",
]
