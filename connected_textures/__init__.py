"""
connected-textures

Builds a connected texture atlas from two base textures: twelve perimeter
tiles blend the top texture into the bottom one along randomly walked
seams, so any tile of the atlas can sit next to any other.

Pipeline:
1. Generate a walking gradient per tile (edge or corner seam)
2. Mirror/transpose it into the tile's orientation
3. Blend top and bottom through the gradient into the tile's atlas cell
4. Copy the top texture verbatim into the center cell
"""

from .atlas import ATLAS_TILES, ConnectedTextureFactory, TileSpec, build_atlas, generate
from .buffer import PixelBuffer, load_image, save_image
from .compositor import TileCompositor
from .errors import (
    ConnectedTextureError,
    InputDecodeError,
    InputShapeError,
    OutputPathError,
    SeedRejectionExhaustedError,
    SettingsError,
    SettingsMissingError,
)
from .gradients import (
    CornerGradient,
    EdgeGradient,
    GradientKind,
    GradientSettings,
    WalkingGradient,
    get_gradient,
)
from .settings import Settings, load_settings, resolve_settings

__all__ = [
    "ATLAS_TILES",
    "ConnectedTextureFactory",
    "TileSpec",
    "build_atlas",
    "generate",
    "PixelBuffer",
    "load_image",
    "save_image",
    "TileCompositor",
    "ConnectedTextureError",
    "InputDecodeError",
    "InputShapeError",
    "OutputPathError",
    "SeedRejectionExhaustedError",
    "SettingsError",
    "SettingsMissingError",
    "CornerGradient",
    "EdgeGradient",
    "GradientKind",
    "GradientSettings",
    "WalkingGradient",
    "get_gradient",
    "Settings",
    "load_settings",
    "resolve_settings",
]

__version__ = "1.0.0"
