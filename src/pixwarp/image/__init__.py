"""
Image data model: ImageSize, the Image[C] family, casting and the wire codec.
"""

from pixwarp.image.api import cast_and_scale
from pixwarp.image.codec import ImageMsg, decode_image, encode_image
from pixwarp.image.image import Image, ImageGray, ImageRgb, ImageRgba, ImageSize, image_type

__all__ = [
    "Image",
    "ImageSize",
    "ImageGray",
    "ImageRgb",
    "ImageRgba",
    "image_type",
    "cast_and_scale",
    "ImageMsg",
    "encode_image",
    "decode_image",
]
