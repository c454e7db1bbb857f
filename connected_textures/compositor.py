"""
Writes blended and verbatim tiles into the atlas output buffer.
"""

import torch

from .buffer import PixelBuffer
from .errors import InputShapeError
from .gradients import WalkingGradient


class TileCompositor:
    """
    Blends the top and bottom images through a walking gradient.

    A gradient value of 0 keeps the first source, 1 takes the second. Only
    the channels both inputs share are read or written.
    """

    def __init__(self, top: PixelBuffer, bottom: PixelBuffer, output: PixelBuffer):
        if not top.same_shape(bottom):
            raise InputShapeError(
                f"Top image is {top.width}x{top.height} but bottom image is {bottom.width}x{bottom.height}"
            )

        self.top = top
        self.bottom = bottom
        self.output = output
        self.width = top.width
        self.height = top.height
        self.channels = min(top.channels, bottom.channels)

        if output.channels != self.channels:
            raise ValueError(f"Output buffer has {output.channels} channels, expected {self.channels}")

    def blend_region(self, background: torch.Tensor, foreground: torch.Tensor, mask: torch.Tensor) -> torch.Tensor:
        mask_expanded = mask.unsqueeze(-1)
        return background * (1 - mask_expanded) + foreground * mask_expanded

    def apply_tile_blend(self, gradient: WalkingGradient, x_offset: int, y_offset: int, inverse: bool = False) -> None:
        """
        Blend one tile into the output rectangle at ``(x_offset, y_offset)``.

        Args:
            gradient: Blend weights, same size as the input images
            x_offset: Left edge of the rectangle in the output image
            y_offset: Top edge of the rectangle in the output image
            inverse: Swap the roles of the top and bottom images
        """
        mask = gradient.field
        if tuple(mask.shape) != (self.height, self.width):
            raise ValueError(
                f"Gradient is {mask.shape[1]}x{mask.shape[0]} but tiles are {self.width}x{self.height}"
            )

        first, second = (self.bottom, self.top) if inverse else (self.top, self.bottom)
        background = first.project(self.channels).to(torch.float32)
        foreground = second.project(self.channels).to(torch.float32)

        blended = self.blend_region(background, foreground, mask.to(torch.float32))
        target = self.output.region(x_offset, y_offset, self.width, self.height)
        target.copy_(blended.round().clamp(0, 255).to(torch.uint8))

    def apply_base_tile(self, use_top: bool, x_offset: int, y_offset: int) -> None:
        """Copy the top (or bottom) image unchanged into the output rectangle."""
        source = self.top if use_top else self.bottom
        target = self.output.region(x_offset, y_offset, self.width, self.height)
        target.copy_(source.project(self.channels))

    def __repr__(self) -> str:
        return f"TileCompositor(tile={self.width}x{self.height}, channels={self.channels})"
