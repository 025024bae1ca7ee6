"""
Perspective: composable 2D geometric pipeline with matrix pre-composition.

Chains translations, scalings, rotations, flips and raw 3x3 matrices, then
compiles them into a single perspective matrix so the image is resampled
exactly once.

Key Features:
- Method chaining for intuitive pipeline construction
- Steps compose in call order (each new step is left-multiplied)
- Optional center point for rotation and scaling
- Single warp pass on apply()
"""

from __future__ import annotations

import logging
import math
from copy import deepcopy
from typing import Any, Self, TypeAlias

import numpy as np

from pixwarp.constants import IDENTITY_MATRIX
from pixwarp.image.image import Image, ImageSize
from pixwarp.warp.config import WarpConfig
from pixwarp.warp.interpolation import InterpolationMode
from pixwarp.warp.perspective import PerspectiveMatrix, as_perspective_matrix, warp_perspective

logger = logging.getLogger(__name__)

Point: TypeAlias = tuple[float, float] | list[float] | np.ndarray


def _translation_matrix(tx: float, ty: float) -> np.ndarray:
    return np.array([[1.0, 0.0, tx], [0.0, 1.0, ty], [0.0, 0.0, 1.0]], dtype=np.float32)


def _about_center(matrix: np.ndarray, center: Point | None) -> np.ndarray:
    """T(center) @ matrix @ T(-center)."""
    if center is None:
        return matrix
    cx, cy = (float(v) for v in center)
    return _translation_matrix(cx, cy) @ matrix @ _translation_matrix(-cx, -cy)


class Perspective:
    """
    Composable perspective transform pipeline.

    Supported Operations:
    - translate: Shift by (tx, ty) pixels
    - scale: Uniform or per-axis scaling, optionally about a center
    - rotate: Rotation by an angle in radians, optionally about a center
    - flip_horizontal / flip_vertical: Mirror within an image extent
    - matrix: Arbitrary 3x3 perspective matrix

    Args:
        config: Sampling defaults (default: WarpConfig())

    Example:
        >>> pipeline = (Perspective()
        ...     .scale(0.5)
        ...     .rotate(np.pi / 8, center=(16, 16))
        ...     .translate(4, 0)
        ... )
        >>> warped = pipeline(image, size=ImageSize(32, 32))
    """

    __slots__ = ("_steps", "_compiled_matrix", "_is_dirty", "config")

    def __init__(self, config: WarpConfig | None = None):
        self.config = config if config is not None else WarpConfig()
        self._steps: list[tuple[str, np.ndarray]] = []
        self._compiled_matrix: np.ndarray | None = None
        self._is_dirty: bool = True
        logger.debug("[Perspective] Initialized with %s", self.config)

    def _push(self, name: str, matrix: np.ndarray) -> Self:
        self._steps.append((name, matrix))
        self._is_dirty = True
        return self

    def translate(self, tx: float, ty: float) -> Self:
        """
        Add a translation to the pipeline.

        Returns:
            Self for method chaining
        """
        return self._push("translate", _translation_matrix(tx, ty))

    def scale(self, sx: float, sy: float | None = None, center: Point | None = None) -> Self:
        """
        Add a scaling to the pipeline.

        Args:
            sx: Horizontal scale (also vertical when sy is None)
            sy: Optional vertical scale
            center: Optional fixed point of the scaling

        Returns:
            Self for method chaining
        """
        sy = sx if sy is None else sy
        matrix = np.diag([sx, sy, 1.0]).astype(np.float32)
        return self._push("scale", _about_center(matrix, center))

    def rotate(self, angle: float, center: Point | None = None) -> Self:
        """
        Add a rotation to the pipeline.

        Args:
            angle: Rotation angle in radians, counter-clockwise in pixel axes
            center: Optional center of rotation

        Returns:
            Self for method chaining

        Example:
            >>> Perspective().rotate(np.pi / 2, center=(1.5, 1.5))
        """
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        matrix = np.array(
            [[cos_a, -sin_a, 0.0], [sin_a, cos_a, 0.0], [0.0, 0.0, 1.0]], dtype=np.float32
        )
        return self._push("rotate", _about_center(matrix, center))

    def flip_horizontal(self, width: int) -> Self:
        """Mirror columns within an image of the given width."""
        matrix = np.array([[-1.0, 0.0, width - 1.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]], dtype=np.float32)
        return self._push("flip_horizontal", matrix)

    def flip_vertical(self, height: int) -> Self:
        """Mirror rows within an image of the given height."""
        matrix = np.array([[1.0, 0.0, 0.0], [0.0, -1.0, height - 1.0], [0.0, 0.0, 1.0]], dtype=np.float32)
        return self._push("flip_vertical", matrix)

    def matrix(self, m: PerspectiveMatrix) -> Self:
        """
        Add an arbitrary perspective matrix to the pipeline.

        Args:
            m: Flat row-major [9] or [3, 3] matrix

        Returns:
            Self for method chaining
        """
        return self._push("matrix", as_perspective_matrix(m).reshape(3, 3))

    def compile(self) -> Self:
        """
        Compose all steps into a single 3x3 matrix.

        Returns:
            Self for method chaining
        """
        if not self._is_dirty and self._compiled_matrix is not None:
            logger.debug("[Perspective] Already compiled, skipping")
            return self

        logger.debug("[Perspective] Compiling %d steps", len(self._steps))

        M = np.array(IDENTITY_MATRIX, dtype=np.float32).reshape(3, 3)
        for _, step in self._steps:
            M = step @ M

        self._compiled_matrix = M
        self._is_dirty = False
        return self

    def get_matrix(self) -> np.ndarray:
        """
        Get the compiled matrix.

        Returns:
            Flat row-major float32 array [9]
        """
        if self._is_dirty or self._compiled_matrix is None:
            self.compile()
        return self._compiled_matrix.reshape(-1).copy()

    def is_identity(self) -> bool:
        """True if the pipeline has no steps."""
        return not self._steps

    def apply(
        self,
        src: Image,
        size: ImageSize | tuple[int, int] | None = None,
        interpolation: InterpolationMode | str | None = None,
    ) -> Image:
        """
        Warp an image through the compiled pipeline.

        Args:
            src: Source image (float dtype)
            size: Destination size (default: same as src)
            interpolation: Override of config.interpolation

        Returns:
            New image of the same channel type and dtype as src

        Raises:
            CannotComputeDeterminant: If the composed matrix is singular
        """
        size = src.size if size is None else ImageSize.from_value(size)

        # Fast-path: no steps and no resize
        if self.is_identity() and size == src.size:
            return src.copy()

        mode = self.config.interpolation if interpolation is None else interpolation
        dst = type(src).from_size_val(size, 0, dtype=src.dtype, allocator=src.tensor.allocator)
        warp_perspective(src, dst, self.get_matrix(), mode, self.config.fill_value)

        logger.info("[Perspective] Applied %d steps: %s -> %s", len(self._steps), src.size, size)
        return dst

    def __call__(
        self,
        src: Image,
        size: ImageSize | tuple[int, int] | None = None,
        interpolation: InterpolationMode | str | None = None,
    ) -> Image:
        """Apply the pipeline when called as a function."""
        return self.apply(src, size=size, interpolation=interpolation)

    def reset(self) -> Self:
        """
        Reset the pipeline, clearing all steps.

        Returns:
            Self for method chaining
        """
        self._steps = []
        self._compiled_matrix = None
        self._is_dirty = True
        logger.debug("[Perspective] Reset")
        return self

    def copy(self) -> Self:
        """Create a deep copy of the pipeline."""
        return deepcopy(self)

    def __copy__(self) -> Self:
        """Shallow copy (creates deep copy for safety)."""
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        new_obj = self.__class__(deepcopy(self.config, memo))
        new_obj._steps = [(name, step.copy()) for name, step in self._steps]
        new_obj._compiled_matrix = (
            self._compiled_matrix.copy() if self._compiled_matrix is not None else None
        )
        new_obj._is_dirty = self._is_dirty
        return new_obj

    @property
    def is_compiled(self) -> bool:
        """Check if the pipeline is compiled."""
        return not self._is_dirty and self._compiled_matrix is not None

    def __repr__(self) -> str:
        status = "compiled" if self.is_compiled else "not compiled"
        steps = ", ".join(name for name, _ in self._steps)
        return f"Perspective({len(self._steps)} steps: [{steps}]) [{status}]"

    def __len__(self) -> int:
        """Number of steps in the pipeline."""
        return len(self._steps)
