"""
Connected texture atlas orchestration.

Atlas layout (5 columns x 3 rows of input-sized cells):

    col:   0      1      2      3        4
    row 0: NW     N      NE     NW-inv   NE-inv
    row 1: W      center E      SW-inv   SE-inv
    row 2: SW     S      SE     (unused) (unused)

Every perimeter tile blends the top image into the bottom image along its
own walking gradient. Inverse tiles swap the two images. The two unused
cells stay zero.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

import torch
from PIL import Image

from .buffer import PixelBuffer, load_image, save_image
from .compositor import TileCompositor
from .errors import InputShapeError, OutputPathError
from .gradients import GradientKind, WalkingGradient, get_gradient
from .settings import Settings

log = logging.getLogger(__name__)

ATLAS_COLUMNS = 5
ATLAS_ROWS = 3
CENTER_CELL = (1, 1)
UNUSED_CELLS = ((3, 2), (4, 2))

_SEED_MASK = 0xFFFF_FFFF_FFFF_FFFF


@dataclass(frozen=True)
class TileSpec:
    name: str
    kind: GradientKind
    operations: Tuple[str, ...]
    column: int
    row: int
    inverse: bool = False

    @property
    def transposed(self) -> bool:
        return self.operations.count("transpose") % 2 == 1


_EDGE = GradientKind.EDGE
_CORNER = GradientKind.CORNER

ATLAS_TILES = (
    TileSpec("nw", _CORNER, ("flip_x", "flip_y"), 0, 0),
    TileSpec("n", _EDGE, ("flip_y",), 1, 0),
    TileSpec("ne", _CORNER, ("flip_y",), 2, 0),
    TileSpec("w", _EDGE, ("transpose", "flip_x"), 0, 1),
    TileSpec("e", _EDGE, ("transpose",), 2, 1),
    TileSpec("sw", _CORNER, ("flip_x",), 0, 2),
    TileSpec("s", _EDGE, (), 1, 2),
    TileSpec("se", _CORNER, (), 2, 2),
    TileSpec("nw_inverse", _CORNER, ("flip_x", "flip_y"), 3, 0, inverse=True),
    TileSpec("ne_inverse", _CORNER, ("flip_y",), 4, 0, inverse=True),
    TileSpec("sw_inverse", _CORNER, ("flip_x",), 3, 1, inverse=True),
    TileSpec("se_inverse", _CORNER, (), 4, 1, inverse=True),
)


def derive_tile_seeds(seed: Optional[int], count: int) -> Optional[List[int]]:
    """
    Draw one walk seed per tile from a generator seeded with ``seed``.

    Attempt ``k`` of a walk uses ``seed + k``. Tile seeds are drawn from the
    full 62-bit range, so attempt runs of different tiles do not meet.
    """
    if seed is None:
        return None
    generator = torch.Generator()
    generator.manual_seed(seed & _SEED_MASK)
    draws = torch.randint(0, 2**62, (count,), generator=generator, dtype=torch.int64)
    return [int(value) for value in draws]


class ConnectedTextureFactory:
    """
    Builds the atlas from two equally sized images.

    The twelve blended tiles run on a thread pool while the calling thread
    copies the center tile. Each job writes only its own cell, so the
    output buffer is shared without locking.
    """

    def __init__(
        self,
        top: PixelBuffer,
        bottom: PixelBuffer,
        settings: Optional[Settings] = None,
        debug_dir: Optional[Union[str, Path]] = None,
    ):
        if not top.same_shape(bottom):
            raise InputShapeError(
                f"Top and bottom images must have the same size, got "
                f"{top.width}x{top.height} and {bottom.width}x{bottom.height}"
            )

        self.top = top
        self.bottom = bottom
        self.settings = settings or Settings()
        self.in_width = top.width
        self.in_height = top.height
        self.channels = min(top.channels, bottom.channels)

        self.output = PixelBuffer(
            self.in_width * ATLAS_COLUMNS,
            self.in_height * ATLAS_ROWS,
            self.channels,
        )
        self.compositor = TileCompositor(top, bottom, self.output)
        self.tile_seeds = derive_tile_seeds(self.settings.seed, len(ATLAS_TILES))

        self.debug_dir = Path(debug_dir) if debug_dir is not None else None
        if self.debug_dir is not None:
            self.debug_dir.mkdir(parents=True, exist_ok=True)

    def cell_origin(self, column: int, row: int) -> Tuple[int, int]:
        return column * self.in_width, row * self.in_height

    def tile_seed(self, index: int) -> Optional[int]:
        if self.tile_seeds is None:
            return None
        return self.tile_seeds[index]

    def build_gradient(self, spec: TileSpec, seed: Optional[int] = None) -> WalkingGradient:
        """Generate the gradient for ``spec`` and apply its symmetry operations."""
        width, height = self.in_width, self.in_height
        if spec.transposed:
            # generate at swapped size so the transposed field fits the cell
            width, height = height, width

        gradient_settings = self.settings.gradient_settings(spec.kind, width, height)
        gradient = get_gradient(gradient_settings, seed=seed)
        gradient.apply(spec.operations)
        return gradient

    def generate_tile(self, index: int, spec: TileSpec) -> str:
        gradient = self.build_gradient(spec, self.tile_seed(index))

        if self.debug_dir is not None:
            gradient.save_debug(self.debug_dir / f"{spec.name}_gradient.png")

        x_offset, y_offset = self.cell_origin(spec.column, spec.row)
        self.compositor.apply_tile_blend(gradient, x_offset, y_offset, inverse=spec.inverse)
        log.debug("Tile %s done (seed=%d, attempts=%d)", spec.name, gradient.seed, gradient.attempts)
        return spec.name

    def run(self) -> PixelBuffer:
        with ThreadPoolExecutor(max_workers=len(ATLAS_TILES), thread_name_prefix="tile") as executor:
            futures = [
                executor.submit(self.generate_tile, index, spec)
                for index, spec in enumerate(ATLAS_TILES)
            ]

            x_offset, y_offset = self.cell_origin(*CENTER_CELL)
            self.compositor.apply_base_tile(True, x_offset, y_offset)

            for future in futures:
                future.result()

        return self.output

    def __repr__(self) -> str:
        return (
            f"ConnectedTextureFactory(tile={self.in_width}x{self.in_height}, "
            f"channels={self.channels}, seed={self.settings.seed})"
        )


def build_atlas(
    top: PixelBuffer,
    bottom: PixelBuffer,
    settings: Optional[Settings] = None,
    debug_dir: Optional[Union[str, Path]] = None,
) -> PixelBuffer:
    return ConnectedTextureFactory(top, bottom, settings, debug_dir=debug_dir).run()


def check_output_path(path: Union[str, Path]) -> Path:
    """Reject output paths the atlas could never be written to."""
    path = Path(path)
    if not path.parent.is_dir():
        raise OutputPathError(f"Path to {path} does not exist.")
    if path.is_dir():
        raise OutputPathError(f"Output path {path} is a directory.")
    if path.suffix and path.suffix.lower() not in Image.registered_extensions():
        raise OutputPathError(f"Unsupported output image format {path.suffix!r} for {path}.")
    return path


def generate(
    top_path: Union[str, Path],
    bottom_path: Union[str, Path],
    out_path: Union[str, Path],
    settings: Optional[Settings] = None,
    debug_dir: Optional[Union[str, Path]] = None,
) -> Path:
    """Load both images, build the atlas and save it to ``out_path``."""
    out_path = check_output_path(out_path)
    top = load_image(top_path)
    bottom = load_image(bottom_path)

    atlas = build_atlas(top, bottom, settings, debug_dir=debug_dir)
    return save_image(atlas, out_path)
