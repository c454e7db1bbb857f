import pytest
import torch

from connected_textures.buffer import PixelBuffer, save_image
from connected_textures.settings import Settings


@pytest.fixture
def solid():
    """Factory for solid-color buffers: solid(width, height, color)."""
    return PixelBuffer.filled


@pytest.fixture
def coordinate_image():
    """16x16 RGB buffer with pixel (x, y) = (16x, 16y, 0)."""
    ys, xs = torch.meshgrid(torch.arange(16), torch.arange(16), indexing="ij")
    data = torch.stack([xs * 16, ys * 16, torch.zeros_like(xs)], dim=-1).to(torch.uint8)
    return PixelBuffer.from_tensor(data)


@pytest.fixture
def noise_image():
    def make(width, height, channels, seed=0):
        generator = torch.Generator().manual_seed(seed)
        data = torch.randint(0, 256, (height, width, channels), generator=generator, dtype=torch.int64)
        return PixelBuffer.from_tensor(data.to(torch.uint8))

    return make


@pytest.fixture
def fast_settings():
    return Settings(sample_count=33, variance=2.0, steepness=4.0, seam_height=8.0, seed=1234)


@pytest.fixture
def image_files(tmp_path, solid):
    """Write a white top and a black bottom 16x16 PNG, return their paths."""
    top = save_image(solid(16, 16, (255, 255, 255)), tmp_path / "top.png")
    bottom = save_image(solid(16, 16, (0, 0, 0)), tmp_path / "bottom.png")
    return top, bottom
