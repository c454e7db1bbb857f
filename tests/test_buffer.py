import pytest
import torch
from PIL import Image

from connected_textures.buffer import PixelBuffer, load_image, pil_to_tensor, save_image, tensor_to_pil
from connected_textures.errors import InputDecodeError, OutputPathError


def test_new_buffer_is_zeroed():
    buffer = PixelBuffer(5, 3, 4)
    assert (buffer.width, buffer.height, buffer.channels) == (5, 3, 4)
    assert buffer.to_bytes() == bytes(5 * 3 * 4)


def test_rejects_unsupported_channel_count():
    with pytest.raises(ValueError):
        PixelBuffer(4, 4, 5)


def test_set_and_get_address_row_major_interleaved():
    buffer = PixelBuffer(4, 3, 3)
    buffer.set(2, 1, 1, 77)

    assert buffer.get(2, 1, 1) == 77
    assert buffer.index(2, 1, 1) == (1 * 4 + 2) * 3 + 1
    assert buffer.to_bytes()[buffer.index(2, 1, 1)] == 77


def test_out_of_bounds_access_raises():
    buffer = PixelBuffer(4, 3, 1)
    with pytest.raises(IndexError):
        buffer.get(4, 0, 0)
    with pytest.raises(IndexError):
        buffer.set(0, 3, 0, 1)
    with pytest.raises(IndexError):
        buffer.get(0, 0, 1)


def test_region_is_a_writable_view():
    buffer = PixelBuffer(6, 4, 2)
    buffer.region(2, 1, 3, 2).fill_(9)

    assert buffer.get(2, 1, 0) == 9
    assert buffer.get(4, 2, 1) == 9
    assert buffer.get(5, 2, 0) == 0
    assert buffer.get(2, 3, 0) == 0


def test_region_outside_buffer_raises():
    buffer = PixelBuffer(6, 4, 2)
    with pytest.raises(ValueError):
        buffer.region(4, 0, 3, 1)


def test_project_keeps_leading_channels():
    buffer = PixelBuffer.filled(2, 2, (10, 20, 30, 40))
    projected = buffer.project(3)
    assert projected.shape == (2, 2, 3)
    assert projected[0, 0].tolist() == [10, 20, 30]


def test_filled_buffer():
    buffer = PixelBuffer.filled(3, 2, (200, 0, 0))
    assert buffer.channels == 3
    assert buffer.get(2, 1, 0) == 200
    assert buffer.get(2, 1, 1) == 0


@pytest.mark.parametrize("channels", [1, 2, 3, 4])
def test_save_then_load_preserves_pixels(tmp_path, noise_image, channels):
    original = noise_image(7, 5, channels, seed=channels)
    path = save_image(original, tmp_path / f"image_{channels}.png")

    loaded = load_image(path)
    assert loaded.channels == channels
    assert torch.equal(loaded.data, original.data)


def test_save_without_extension_writes_png(tmp_path, solid):
    path = save_image(solid(4, 4, (1, 2, 3)), tmp_path / "atlas")
    with Image.open(path) as image:
        assert image.format == "PNG"


def test_palette_images_are_expanded_to_rgb():
    image = Image.new("P", (3, 3))
    image.putpalette([255, 0, 0] + [0, 0, 0] * 255)
    tensor = pil_to_tensor(image)
    assert tensor.shape == (3, 3, 3)
    assert tensor[0, 0].tolist() == [255, 0, 0]


def test_single_channel_round_trips_through_pil():
    tensor = torch.arange(12, dtype=torch.uint8).view(3, 4, 1)
    image = tensor_to_pil(tensor)
    assert image.mode == "L"
    assert image.size == (4, 3)
    assert torch.equal(pil_to_tensor(image), tensor)


def test_load_missing_file_raises_decode_error(tmp_path):
    with pytest.raises(InputDecodeError):
        load_image(tmp_path / "missing.png")


def test_load_garbage_file_raises_decode_error(tmp_path):
    path = tmp_path / "garbage.png"
    path.write_bytes(b"definitely not an image")
    with pytest.raises(InputDecodeError):
        load_image(path)


def test_save_to_unwritable_format_raises_output_error(tmp_path, solid):
    # BMP cannot store grey + alpha
    with pytest.raises(OutputPathError):
        save_image(solid(4, 4, (10, 200)), tmp_path / "atlas.bmp")
