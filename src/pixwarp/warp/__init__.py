"""
Geometric warping: interpolation, perspective warp and the Perspective pipeline.
"""

from pixwarp.warp.config import WarpConfig
from pixwarp.warp.interpolation import (
    InterpolationMode,
    coordinate_grid,
    interpolate_pixel,
    meshgrid,
)
from pixwarp.warp.perspective import (
    adjugate3x3,
    as_perspective_matrix,
    determinant3x3,
    inverse_perspective_matrix,
    transform_point,
    warp_perspective,
)
from pixwarp.warp.pipeline import Perspective

__all__ = [
    "InterpolationMode",
    "meshgrid",
    "coordinate_grid",
    "interpolate_pixel",
    "as_perspective_matrix",
    "determinant3x3",
    "adjugate3x3",
    "inverse_perspective_matrix",
    "transform_point",
    "warp_perspective",
    "Perspective",
    "WarpConfig",
]
