"""
Numba-optimized kernels for interpolation and perspective warping.

Boundary policy: sampling coordinates are clamped to the valid pixel range
[0, width - 1] x [0, height - 1], so border pixels are replicated outward.
Destination pixels whose inverse-mapped coordinate is not finite (w == 0)
receive the fill value.

These kernels are compiled without fastmath so the isfinite checks are kept,
and with error_model="numpy" so a zero w divides to inf instead of raising.
"""

from __future__ import annotations

import math

import numpy as np
from numba import njit, prange

from pixwarp.constants import INTERP_BILINEAR, INTERP_NEAREST

# ============================================================================
# Point Transform
# ============================================================================


@njit(cache=True, nogil=True, error_model="numpy")
def transform_point_numba(x: float, y: float, m: np.ndarray) -> tuple[float, float]:
    """
    Apply a flat 3x3 projective matrix to a point.

    The y coordinate is computed from the already-transformed x, not the
    input x. Existing outputs depend on this; see test_y_uses_transformed_x.

    Args:
        x: Input x
        y: Input y
        m: Row-major matrix [9]

    Returns:
        Transformed (x, y)
    """
    w = m[6] * x + m[7] * y + m[8]
    x = (m[0] * x + m[1] * y + m[2]) / w
    y = (m[3] * x + m[4] * y + m[5]) / w
    return x, y


# ============================================================================
# Interpolation
# ============================================================================


@njit(cache=True, nogil=True)
def nearest_neighbor_interpolation_numba(image: np.ndarray, u: float, v: float, c: int) -> float:
    """
    Sample the closest lattice point (halves round away from zero).

    Args:
        image: Source image [H, W, C]
        u: Column coordinate
        v: Row coordinate
        c: Channel index

    Returns:
        Sampled value
    """
    height = image.shape[0]
    width = image.shape[1]

    u = min(max(u, 0.0), width - 1.0)
    v = min(max(v, 0.0), height - 1.0)

    iu = int(math.floor(u + 0.5))
    iv = int(math.floor(v + 0.5))

    return image[iv, iu, c]


@njit(cache=True, nogil=True)
def bilinear_interpolation_numba(image: np.ndarray, u: float, v: float, c: int) -> float:
    """
    Weighted average of the four lattice neighbours around (u, v).

    Neighbours past the last row or column reuse the edge sample.

    Args:
        image: Source image [H, W, C]
        u: Column coordinate
        v: Row coordinate
        c: Channel index

    Returns:
        Interpolated value
    """
    height = image.shape[0]
    width = image.shape[1]

    u = min(max(u, 0.0), width - 1.0)
    v = min(max(v, 0.0), height - 1.0)

    iu = int(u)
    iv = int(v)
    frac_u = u - iu
    frac_v = v - iv

    iu1 = iu + 1 if iu + 1 < width else iu
    iv1 = iv + 1 if iv + 1 < height else iv

    val00 = image[iv, iu, c]
    val01 = image[iv, iu1, c]
    val10 = image[iv1, iu, c]
    val11 = image[iv1, iu1, c]

    frac_uu = 1.0 - frac_u
    frac_vv = 1.0 - frac_v

    return (
        val00 * frac_uu * frac_vv
        + val01 * frac_u * frac_vv
        + val10 * frac_uu * frac_v
        + val11 * frac_u * frac_v
    )


@njit(cache=True, nogil=True)
def interpolate_pixel_numba(image: np.ndarray, u: float, v: float, c: int, mode: int) -> float:
    """Dispatch to the sampler selected by mode (INTERP_NEAREST / INTERP_BILINEAR)."""
    if mode == INTERP_NEAREST:
        return nearest_neighbor_interpolation_numba(image, u, v, c)
    return bilinear_interpolation_numba(image, u, v, c)


# ============================================================================
# Perspective Warp (parallel over destination rows)
# ============================================================================


@njit(parallel=True, cache=True, nogil=True, error_model="numpy")
def warp_perspective_numba(
    src: np.ndarray,
    xy: np.ndarray,
    inv_m: np.ndarray,
    mode: int,
    fill_value: float,
    out: np.ndarray,
) -> None:
    """
    Backward-warp src into out.

    Each destination pixel reads only from src, so rows are independent.

    Args:
        src: Source image [Hs, Ws, C]
        xy: Destination coordinate grid [H, W, 2] holding (x, y) per pixel
        inv_m: Inverse (destination -> source) matrix [9]
        mode: INTERP_NEAREST or INTERP_BILINEAR
        fill_value: Value for pixels whose source coordinate is not finite
        out: Destination image [H, W, C] (pre-allocated, fully overwritten)
    """
    height = out.shape[0]
    width = out.shape[1]
    channels = out.shape[2]

    for row in prange(height):
        for col in range(width):
            u_src, v_src = transform_point_numba(xy[row, col, 0], xy[row, col, 1], inv_m)

            if not (np.isfinite(u_src) and np.isfinite(v_src)):
                for c in range(channels):
                    out[row, col, c] = fill_value
                continue

            for c in range(channels):
                out[row, col, c] = interpolate_pixel_numba(src, u_src, v_src, c, mode)


# ============================================================================
# Warmup
# ============================================================================


def warmup_warp_kernels() -> None:
    """
    Warm up Numba JIT compilation for the float32 warp path.

    Call this once at import time to avoid first-call compilation overhead.
    """
    src = np.random.rand(8, 8, 3).astype(np.float32)
    out = np.empty((4, 4, 3), dtype=np.float32)
    inv_m = np.array([2.0, 0.0, 0.0, 0.0, 2.0, 0.0, 0.0, 0.0, 1.0], dtype=np.float32)

    xs = np.arange(4, dtype=np.float32)
    xx, yy = np.meshgrid(xs, xs)
    xy = np.stack([xx, yy], axis=2)

    warp_perspective_numba(src, xy, inv_m, INTERP_NEAREST, 0.0, out)
    warp_perspective_numba(src, xy, inv_m, INTERP_BILINEAR, 0.0, out)


# Warmup on import to avoid first-call overhead
warmup_warp_kernels()
