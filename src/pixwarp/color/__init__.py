"""
Color space conversion.
"""

from pixwarp.color.api import gray_from_rgb

__all__ = ["gray_from_rgb"]
