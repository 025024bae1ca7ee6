"""Tests for the image wire format."""

import struct

import numpy as np
import pytest

from pixwarp import Image, ImageMsg, ImageSize, ShapeMismatch, decode_image, encode_image


@pytest.fixture
def rgb_u8():
    """3 wide, 2 tall RGB image."""
    return Image[3](ImageSize(width=3, height=2), np.arange(18, dtype=np.uint8))


class TestEncode:
    """Test the encoded layout."""

    def test_header(self, rgb_u8):
        payload = encode_image(rgb_u8)
        rows, cols, count = struct.unpack_from("<QQQ", payload)

        assert (rows, cols, count) == (2, 3, 18)
        assert len(payload) == 24 + 18

    def test_body_is_little_endian(self):
        image = Image[1](ImageSize(1, 1), [1], dtype=np.uint16)
        payload = encode_image(image)

        assert payload[24:] == b"\x01\x00"


class TestDecode:
    """Test decoding and error handling."""

    @pytest.mark.parametrize("dtype", [np.uint8, np.int16, np.float32, np.float64])
    def test_round_trip(self, dtype):
        image = Image[3](ImageSize(width=4, height=2), np.arange(24).astype(dtype))
        decoded = decode_image(encode_image(image), Image[3], dtype)

        assert isinstance(decoded, Image[3])
        assert decoded.size == image.size
        assert decoded.dtype == np.dtype(dtype)
        assert decoded == image

    def test_non_square_keeps_orientation(self, rgb_u8):
        decoded = decode_image(encode_image(rgb_u8), Image[3], np.uint8)

        assert decoded.width == 3
        assert decoded.height == 2

    def test_truncated_header(self):
        with pytest.raises(ValueError, match="header"):
            decode_image(b"\x00" * 10, Image[1], np.uint8)

    def test_truncated_body(self, rgb_u8):
        payload = encode_image(rgb_u8)
        with pytest.raises(ValueError):
            decode_image(payload[:-1], Image[3], np.uint8)

    def test_trailing_bytes(self, rgb_u8):
        payload = encode_image(rgb_u8)
        with pytest.raises(ValueError):
            decode_image(payload + b"\x00", Image[3], np.uint8)

    def test_wrong_channel_type(self, rgb_u8):
        # 18 elements cannot fill a 3x2 single-channel image
        with pytest.raises(ShapeMismatch):
            decode_image(encode_image(rgb_u8), Image[1], np.uint8)


class TestImageMsg:
    """Test the message envelope."""

    def test_default_is_empty(self):
        msg = ImageMsg.default(Image[3], np.uint8)

        assert msg.image.size == ImageSize(0, 0)
        assert msg.image.numel == 0
        assert msg.image.dtype == np.uint8

    def test_round_trip(self, rgb_u8):
        msg = ImageMsg(rgb_u8)
        restored = ImageMsg.decode(msg.encode(), Image[3], np.uint8)

        assert restored.image == msg.image

    def test_default_round_trip(self):
        msg = ImageMsg.default(Image[1], np.float32)
        restored = ImageMsg.decode(msg.encode(), Image[1], np.float32)

        assert restored.image == msg.image

    def test_repr_shows_size_only(self, rgb_u8):
        assert repr(ImageMsg(rgb_u8)) == "ImageMsg(size: ImageSize(width=3, height=2))"
