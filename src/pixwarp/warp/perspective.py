"""
Perspective (projective) image warping.

CPU-optimized using NumPy for the 3x3 matrix math and a parallel Numba kernel
for the per-pixel sampling.

Functions:
- determinant3x3(), adjugate3x3(), inverse_perspective_matrix()
- transform_point(): apply a flat 3x3 matrix to one point
- warp_perspective(): backward-warp a source image into a destination image
"""

from __future__ import annotations

import logging
from typing import TypeAlias

import numpy as np

from pixwarp.constants import DEFAULT_FILL_VALUE, PERSPECTIVE_MATRIX_SIZE
from pixwarp.errors import CannotComputeDeterminant, ImageDataNotInitialized
from pixwarp.image.image import Image
from pixwarp.utils import commit_kernel_output, kernel_output, to_kernel_input
from pixwarp.validators import validate_float_dtype, validate_same_channels, validate_same_dtype
from pixwarp.warp.interpolation import InterpolationMode, coordinate_grid
from pixwarp.warp.kernels import transform_point_numba, warp_perspective_numba

logger = logging.getLogger(__name__)

# Flat row-major 3x3 matrix, or anything convertible to one
PerspectiveMatrix: TypeAlias = np.ndarray | tuple | list


# ============================================================================
# 3x3 Matrix Math (float32)
# ============================================================================


def as_perspective_matrix(m: PerspectiveMatrix) -> np.ndarray:
    """
    Normalize a 9-element or 3x3 array-like to a flat float32 array [9].

    Raises:
        ValueError: If m does not hold exactly nine values
    """
    matrix = np.asarray(m, dtype=np.float32)
    if matrix.size != PERSPECTIVE_MATRIX_SIZE or matrix.ndim not in (1, 2):
        raise ValueError(f"perspective matrix must be [9] or [3, 3], got shape {matrix.shape}")
    return matrix.reshape(-1)


def determinant3x3(m: PerspectiveMatrix) -> np.float32:
    """Determinant by cofactor expansion along the first row."""
    m = as_perspective_matrix(m)
    return (
        m[0] * (m[4] * m[8] - m[5] * m[7])
        - m[1] * (m[3] * m[8] - m[5] * m[6])
        + m[2] * (m[3] * m[7] - m[4] * m[6])
    )


def adjugate3x3(m: PerspectiveMatrix) -> np.ndarray:
    """Transpose of the cofactor matrix, flat row-major [9]."""
    m = as_perspective_matrix(m)
    # fmt: off
    return np.array(
        [
            m[4] * m[8] - m[5] * m[7],  # [0, 0]
            m[2] * m[7] - m[1] * m[8],  # [0, 1]
            m[1] * m[5] - m[2] * m[4],  # [0, 2]
            m[5] * m[6] - m[3] * m[8],  # [1, 0]
            m[0] * m[8] - m[2] * m[6],  # [1, 1]
            m[2] * m[3] - m[0] * m[5],  # [1, 2]
            m[3] * m[7] - m[4] * m[6],  # [2, 0]
            m[1] * m[6] - m[0] * m[7],  # [2, 1]
            m[0] * m[4] - m[1] * m[3],  # [2, 2]
        ],
        dtype=np.float32,
    )
    # fmt: on


def inverse_perspective_matrix(m: PerspectiveMatrix) -> np.ndarray:
    """
    Invert a 3x3 projective matrix.

    Only an exactly zero determinant is rejected; nearly singular matrices are
    inverted as-is.

    Args:
        m: Flat row-major matrix [9] or [3, 3]

    Returns:
        Inverse as flat float32 array [9]

    Raises:
        CannotComputeDeterminant: If det(m) == 0

    Example:
        >>> inverse_perspective_matrix([1, 0, -1, 0, 1, 1, 0, 0, 1])
        array([ 1.,  0.,  1.,  0.,  1., -1.,  0.,  0.,  1.], dtype=float32)
    """
    det = determinant3x3(m)
    if det == 0.0:
        raise CannotComputeDeterminant()

    with np.errstate(over="ignore"):
        inv_det = np.float32(1.0) / det
        inverse = adjugate3x3(m) * inv_det

    logger.debug("[inverse_perspective_matrix] det=%s", det)
    return inverse


def transform_point(x: float, y: float, m: PerspectiveMatrix) -> tuple[float, float]:
    """
    Apply a projective matrix to a single point.

    The y output is computed from the already-transformed x, exactly as the
    warp kernel does.

    Example:
        >>> transform_point(1.0, 1.0, [1, 0, -1, 0, 1, 1, 0, 0, 1])
        (0.0, 2.0)
    """
    matrix = as_perspective_matrix(m)
    x_out, y_out = transform_point_numba(np.float32(x), np.float32(y), matrix)
    return float(x_out), float(y_out)


# ============================================================================
# Warp
# ============================================================================


@validate_float_dtype("src")
@validate_same_dtype()
@validate_same_channels()
def warp_perspective(
    src: Image,
    dst: Image,
    m: PerspectiveMatrix,
    interpolation: InterpolationMode | str = InterpolationMode.BILINEAR,
    fill_value: float = DEFAULT_FILL_VALUE,
) -> None:
    """
    Apply a perspective transformation to an image.

    The destination size is chosen by the caller through dst; src and dst may
    differ in size. Every destination pixel is mapped back through the inverse
    of m and sampled from src. Passing the same image as src and dst warps
    it in place.

    Args:
        src: Source image [H, W, C] (float dtype)
        dst: Pre-allocated destination image, same channel count and dtype
        m: 3x3 perspective matrix mapping src -> dst, flat row-major [9]
        interpolation: Sampling strategy ("nearest" or "bilinear")
        fill_value: Value for pixels whose source coordinate is not finite

    Raises:
        CannotComputeDeterminant: If m is singular (dst is left untouched)
        ImageDataNotInitialized: If src has no pixels but dst does

    Example:
        >>> src = Image[1](ImageSize(2, 3), [0.0, 1.0, 2.0, 3.0, 4.0, 5.0], dtype=np.float32)
        >>> dst = Image[1].from_size_val(ImageSize(2, 3), 0.0, dtype=np.float32)
        >>> warp_perspective(src, dst, [-1, 0, 1, 0, 1, 0, 0, 0, 1], "nearest")
        >>> dst.as_slice()
        array([1., 0., 3., 2., 5., 4.], dtype=float32)
    """
    inv_m = inverse_perspective_matrix(m)
    mode = InterpolationMode.parse(interpolation)

    if dst.numel == 0:
        logger.debug("[warp_perspective] Empty destination, nothing to do")
        return

    if src.width == 0 or src.height == 0:
        raise ImageDataNotInitialized()

    # (x, y) for every destination pixel, laid out like the destination rows
    xy = coordinate_grid(dst.width, dst.height)

    out = dst.tensor.view_mut()
    src_data = src.data
    if np.shares_memory(src_data, out):
        # Rows would otherwise sample pixels already overwritten
        logger.debug("[warp_perspective] src and dst overlap, sampling from a copy")
        src_data = src.to_numpy()

    buffer = kernel_output(out)
    warp_perspective_numba(to_kernel_input(src_data), xy, inv_m, int(mode), float(fill_value), buffer)
    commit_kernel_output(buffer, out)

    logger.info(
        "[warp_perspective] %s -> %s (%s, %d channels)",
        src.size,
        dst.size,
        mode.name.lower(),
        src.num_channels,
    )
