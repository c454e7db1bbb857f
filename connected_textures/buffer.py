"""
Owned 8-bit pixel buffers and the Pillow bridge used to load and save them.

A buffer is a ``(height, width, channels)`` uint8 tensor. Rows are stored
top to bottom and channels are interleaved, so the byte for ``(x, y, c)``
sits at ``(y * width + x) * channels + c`` in ``to_bytes()``.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np
import torch
from PIL import Image

from .errors import InputDecodeError, OutputPathError

log = logging.getLogger(__name__)

SUPPORTED_CHANNELS = (1, 2, 3, 4)

_MODE_CHANNELS = {"L": 1, "LA": 2, "RGB": 3, "RGBA": 4}


class PixelBuffer:
    def __init__(self, width: int, height: int, channels: int, data: Optional[torch.Tensor] = None):
        if channels not in SUPPORTED_CHANNELS:
            raise ValueError(f"channels must be one of {SUPPORTED_CHANNELS}, got {channels}")
        if width <= 0 or height <= 0:
            raise ValueError(f"Buffer dimensions must be positive, got {width}x{height}")

        if data is None:
            data = torch.zeros((height, width, channels), dtype=torch.uint8)
        elif tuple(data.shape) != (height, width, channels) or data.dtype != torch.uint8:
            raise ValueError(
                f"Expected uint8 tensor of shape {(height, width, channels)}, "
                f"got {data.dtype} tensor with shape {tuple(data.shape)}"
            )

        self.data = data

    @classmethod
    def from_tensor(cls, tensor: torch.Tensor) -> "PixelBuffer":
        """Wrap an (H, W, C) or (H, W) uint8 tensor without copying it."""
        if tensor.dim() == 2:
            tensor = tensor.unsqueeze(-1)
        if tensor.dim() != 3:
            raise ValueError(f"Expected 2D or 3D tensor, got {tensor.dim()}D tensor with shape {tuple(tensor.shape)}")
        height, width, channels = tensor.shape
        return cls(width, height, channels, tensor.to(torch.uint8).contiguous())

    @classmethod
    def filled(cls, width: int, height: int, color) -> "PixelBuffer":
        """Create a solid buffer; the channel count is ``len(color)``."""
        color = torch.tensor(list(color), dtype=torch.uint8)
        data = color.view(1, 1, -1).expand(height, width, -1).clone()
        return cls(width, height, len(color), data)

    @property
    def width(self) -> int:
        return self.data.shape[1]

    @property
    def height(self) -> int:
        return self.data.shape[0]

    @property
    def channels(self) -> int:
        return self.data.shape[2]

    def index(self, x: int, y: int, c: int) -> int:
        """Byte offset of a sample in the row-major, channel-interleaved layout."""
        self._check_bounds(x, y, c)
        return (y * self.width + x) * self.channels + c

    def get(self, x: int, y: int, c: int) -> int:
        self._check_bounds(x, y, c)
        return int(self.data[y, x, c])

    def set(self, x: int, y: int, c: int, value: int) -> None:
        self._check_bounds(x, y, c)
        if not 0 <= value <= 255:
            raise ValueError(f"Sample value must be in [0, 255], got {value}")
        self.data[y, x, c] = value

    def region(self, x: int, y: int, width: int, height: int) -> torch.Tensor:
        """Writable view of a rectangle; raises if it leaves the buffer."""
        if x < 0 or y < 0 or x + width > self.width or y + height > self.height:
            raise ValueError(
                f"Region {width}x{height} at ({x}, {y}) exceeds buffer {self.width}x{self.height}"
            )
        return self.data[y : y + height, x : x + width, :]

    def project(self, channels: int) -> torch.Tensor:
        """View of the first ``channels`` channels."""
        if channels > self.channels:
            raise ValueError(f"Cannot project {self.channels}-channel buffer to {channels} channels")
        return self.data[:, :, :channels]

    def same_shape(self, other: "PixelBuffer") -> bool:
        return self.width == other.width and self.height == other.height

    def to_bytes(self) -> bytes:
        return self.data.cpu().numpy().tobytes()

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, self.channels, self.data.clone())

    def _check_bounds(self, x: int, y: int, c: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height and 0 <= c < self.channels):
            raise IndexError(
                f"Sample ({x}, {y}, {c}) outside buffer {self.width}x{self.height}x{self.channels}"
            )

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height}, channels={self.channels})"


def pil_to_tensor(image: Image.Image) -> torch.Tensor:
    """Convert a PIL image to an (H, W, C) uint8 tensor."""
    if image.mode not in _MODE_CHANNELS:
        has_alpha = "A" in image.getbands() or "transparency" in image.info
        if image.mode in ("1", "I", "I;16", "F"):
            image = image.convert("L")
        else:
            image = image.convert("RGBA" if has_alpha else "RGB")

    np_image = np.array(image, dtype=np.uint8)
    if np_image.ndim == 2:
        np_image = np_image[:, :, None]
    return torch.from_numpy(np_image.copy())


def tensor_to_pil(tensor: torch.Tensor) -> Image.Image:
    """Convert an (H, W, C) uint8 tensor to a PIL image."""
    np_image = tensor.cpu().numpy().astype(np.uint8)
    if np_image.shape[-1] == 1:
        np_image = np_image[:, :, 0]
    return Image.fromarray(np_image)


def load_image(path: Union[str, Path]) -> PixelBuffer:
    path = Path(path)
    try:
        with Image.open(path) as image:
            image.load()
            tensor = pil_to_tensor(image)
    except OSError as exc:
        raise InputDecodeError(
            f"Could not initialize image at {path}. "
            f"The file either doesn't exist or the file format is invalid ({exc})"
        ) from exc

    buffer = PixelBuffer.from_tensor(tensor)
    log.info("Loaded %s (%dx%d, %d channels)", path, buffer.width, buffer.height, buffer.channels)
    return buffer


def save_image(buffer: PixelBuffer, path: Union[str, Path]) -> Path:
    """Encode ``buffer``; the format follows the extension, PNG when there is none."""
    path = Path(path)
    image = tensor_to_pil(buffer.data)
    image_format = None if path.suffix else "PNG"

    if path.suffix.lower() in (".jpg", ".jpeg") and image.mode in ("LA", "RGBA"):
        image = image.convert(image.mode[:-1])

    try:
        image.save(path, format=image_format)
    except (OSError, ValueError) as exc:
        raise OutputPathError(f"Could not write image to {path} ({exc})") from exc
    log.info("Saved %s (%dx%d)", path, buffer.width, buffer.height)
    return path
