"""
Pixel sampling at real-valued coordinates.

Functions:
- InterpolationMode: nearest / bilinear sampling strategies
- meshgrid(): (x, y) coordinate grids for a destination image
- interpolate_pixel(): sample one channel of an image at (u, v)
"""

from __future__ import annotations

from enum import IntEnum

import numpy as np

from pixwarp.constants import INTERP_BILINEAR, INTERP_NEAREST, VALID_INTERPOLATION_MODES
from pixwarp.errors import ChannelIndexOutOfBounds
from pixwarp.image.image import Image
from pixwarp.utils import to_kernel_input
from pixwarp.warp.kernels import interpolate_pixel_numba


class InterpolationMode(IntEnum):
    """
    Pixel sampling strategy.

    Out-of-range coordinates are clamped to the image border for both modes.
    """

    NEAREST = INTERP_NEAREST
    BILINEAR = INTERP_BILINEAR

    @classmethod
    def parse(cls, value: InterpolationMode | str | int) -> InterpolationMode:
        """
        Accept a mode, its name ("nearest", "bilinear") or its integer value.

        Example:
            >>> InterpolationMode.parse("bilinear")
            <InterpolationMode.BILINEAR: 1>
        """
        if isinstance(value, InterpolationMode):
            return value
        if isinstance(value, str):
            name = value.lower()
            if name not in VALID_INTERPOLATION_MODES:
                choices_str = ", ".join(sorted(VALID_INTERPOLATION_MODES))
                raise ValueError(
                    f"interpolation='{value}' is not valid. Valid options are: {choices_str}"
                )
            return cls[name.upper()]
        return cls(value)


def meshgrid(x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Combine two 1-D ranges into (len(y), len(x)) coordinate grids.

    Args:
        x: Column coordinates [W]
        y: Row coordinates [H]

    Returns:
        (xx, yy), each [H, W], where xx[r, c] = x[c] and yy[r, c] = y[r]
    """
    xx, yy = np.meshgrid(np.asarray(x), np.asarray(y), indexing="xy")
    return xx, yy


def coordinate_grid(width: int, height: int) -> np.ndarray:
    """
    Build the (x, y) grid of every pixel of a width x height image.

    Returns:
        float32 array [height, width, 2] with grid[v, u] == (u, v)
    """
    x = np.arange(0, width, dtype=np.float32)
    y = np.arange(0, height, dtype=np.float32)
    xx, yy = meshgrid(x, y)
    return np.stack([xx, yy], axis=2)


def interpolate_pixel(
    image: Image | np.ndarray,
    u: float,
    v: float,
    c: int,
    interpolation: InterpolationMode | str = InterpolationMode.BILINEAR,
) -> float:
    """
    Sample channel c of an image at the real-valued coordinate (u, v).

    Args:
        image: Image, or a borrowed [H, W, C] array view
        u: Column coordinate
        v: Row coordinate
        c: Channel index
        interpolation: Sampling strategy

    Returns:
        Sampled value

    Example:
        >>> img = Image[1](ImageSize(2, 1), [0.0, 1.0], dtype=np.float32)
        >>> interpolate_pixel(img, 0.5, 0.0, 0)
        0.5
    """
    view = image.data if isinstance(image, Image) else np.asarray(image)
    if view.ndim != 3:
        raise ValueError(f"image must be [H, W, C], got shape {view.shape}")
    if view.shape[0] == 0 or view.shape[1] == 0:
        raise ValueError("cannot sample an image without pixels")
    if not 0 <= c < view.shape[2]:
        raise ChannelIndexOutOfBounds(c, view.shape[2])

    mode = InterpolationMode.parse(interpolation)
    return float(interpolate_pixel_numba(to_kernel_input(view), float(u), float(v), int(c), int(mode)))
