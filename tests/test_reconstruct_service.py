"""Tests for rebuilding images and bitmaps from ARGB buffers."""

import pytest

from argbimage.errors import SizeMismatchError
from argbimage.services.channel_service import ChannelService
from argbimage.services.extract_service import ExtractService
from argbimage.services.header_service import with_header
from argbimage.services.reconstruct_service import ReconstructService, canonical_pixels


@pytest.fixture
def reconstructor():
    return ReconstructService()


class TestToImage:
    def test_size_and_mode(self, reconstructor):
        image = reconstructor.to_image(bytes([255, 255, 0, 0]) * 6, 3, 2)
        assert image.size == (3, 2)
        assert image.mode == "RGBa"

    def test_opaque_red_displays_red(self, reconstructor):
        image = reconstructor.to_image(bytes([255, 255, 0, 0]), 1, 1)
        assert image.convert("RGBA").getpixel((0, 0)) == (255, 0, 0, 255)

    def test_lossless_roundtrip(self, reconstructor, premultiplied_argb):
        image = reconstructor.to_image(premultiplied_argb, 3, 2)
        assert ExtractService().extract_image(image).pixels == premultiplied_argb

    def test_header_is_stripped(self, reconstructor):
        image = reconstructor.to_image(with_header(bytes([255, 255, 0, 0])), 1, 1)
        assert image.size == (1, 1)

    def test_size_mismatch(self, reconstructor):
        with pytest.raises(SizeMismatchError):
            reconstructor.to_image(bytes(12), 2, 2)


class TestToRawBitmap:
    def test_layout(self, reconstructor, premultiplied_argb):
        bitmap = reconstructor.to_raw_bitmap(premultiplied_argb, 3, 2)
        assert bitmap.bits_per_sample == 8
        assert bitmap.samples_per_pixel == 4
        assert bitmap.has_alpha
        assert not bitmap.is_planar
        assert bitmap.bytes_per_row == 3 * 4
        assert bitmap.premultiplied

    def test_data_is_rgba_view(self, reconstructor, premultiplied_argb):
        bitmap = reconstructor.to_raw_bitmap(premultiplied_argb, 3, 2)
        assert bytes(bitmap.data) == ChannelService().to_rgba(premultiplied_argb)

    def test_bitmap_roundtrips_through_extractor(self, reconstructor):
        bitmap = reconstructor.to_raw_bitmap(bytes([255, 255, 0, 0, 255, 0, 0, 255]), 2, 1)
        assert ExtractService().extract_bitmap(bitmap).pixels == bytes([255, 255, 0, 0, 255, 0, 0, 255])

    def test_size_mismatch(self, reconstructor):
        with pytest.raises(SizeMismatchError):
            reconstructor.to_raw_bitmap(bytes(4), 2, 1)


class TestCanonicalPixels:
    def test_untagged_passthrough(self):
        assert canonical_pixels(bytearray(4), 1, 1) == bytes(4)

    def test_negative_size(self):
        with pytest.raises(SizeMismatchError):
            canonical_pixels(b"", -1, 0)

    def test_wrong_tag_not_stripped(self):
        with pytest.raises(SizeMismatchError):
            canonical_pixels(b"RGBA" + bytes(4), 1, 1)
