"""
Wire format for passing images between processes.

Layout (all little-endian):
    uint64 rows
    uint64 cols
    uint64 element count
    element count * itemsize bytes of row-major pixel data

Channel count and element type are fixed by the receiving image type and are
not written to the wire.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import Any, Self

import numpy as np

from pixwarp.constants import CODEC_HEADER_FORMAT
from pixwarp.image.image import Image, ImageSize

logger = logging.getLogger(__name__)

_HEADER = struct.Struct(CODEC_HEADER_FORMAT)


def encode_image(image: Image) -> bytes:
    """
    Serialize rows, cols and the flat element buffer.

    Args:
        image: Image to encode

    Returns:
        Encoded payload
    """
    flat = image.as_slice()
    header = _HEADER.pack(image.rows, image.cols, flat.size)
    body = flat.astype(flat.dtype.newbyteorder("<"), copy=False).tobytes()
    return header + body


def decode_image(payload: bytes, image_type: type[Image], dtype: Any) -> Image:
    """
    Rebuild an image through the shape-checked constructor.

    Args:
        payload: Bytes produced by encode_image()
        image_type: Concrete receiving type, e.g. Image[3]
        dtype: Element type of the receiving image

    Returns:
        Decoded image

    Raises:
        ValueError: If the payload is truncated or has trailing bytes
        ShapeMismatch: If the element count does not match rows * cols * channels
    """
    if len(payload) < _HEADER.size:
        raise ValueError(f"payload of {len(payload)} bytes is shorter than the {_HEADER.size}-byte header")

    rows, cols, count = _HEADER.unpack_from(payload)
    element_type = np.dtype(dtype).newbyteorder("<")
    expected_bytes = _HEADER.size + count * element_type.itemsize

    if len(payload) != expected_bytes:
        raise ValueError(
            f"payload has {len(payload)} bytes, header announces {expected_bytes} "
            f"({count} elements of {element_type})"
        )

    if count:
        data = np.frombuffer(payload, dtype=element_type, count=count, offset=_HEADER.size)
    else:
        data = np.empty(0, dtype=element_type)
    return image_type(ImageSize(width=cols, height=rows), data, dtype=np.dtype(dtype))


@dataclass
class ImageMsg:
    """
    Message envelope carrying one image.

    Attributes:
        image: Payload image

    Example:
        >>> msg = ImageMsg(Image[3].from_size_val(ImageSize(4, 2), 0, dtype=np.uint8))
        >>> restored = ImageMsg.decode(msg.encode(), Image[3], np.uint8)
        >>> restored.image == msg.image
        True
    """

    image: Image

    @classmethod
    def default(cls, image_type: type[Image], dtype: Any) -> Self:
        """Message holding an empty 0x0 image."""
        return cls(image_type(ImageSize(0, 0), np.empty(0, dtype=dtype), dtype=dtype))

    def encode(self) -> bytes:
        return encode_image(self.image)

    @classmethod
    def decode(cls, payload: bytes, image_type: type[Image], dtype: Any) -> Self:
        image = decode_image(payload, image_type, dtype)
        logger.debug("[ImageMsg] Decoded %s", image.size)
        return cls(image)

    def __repr__(self) -> str:
        return f"ImageMsg(size: {self.image.size!r})"
