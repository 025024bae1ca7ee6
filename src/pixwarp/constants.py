"""
Constants and default values for pixwarp.

Centralizes magic numbers and configuration defaults for better maintainability.
"""

from __future__ import annotations

# =============================================================================
# Element Types
# =============================================================================

# Dtypes allowed to back a tensor buffer
SAFE_DTYPE_NAMES = (
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "int8",
    "int16",
    "int32",
    "int64",
    "float16",
    "float32",
    "float64",
)

TENSOR_RANK = 3  # height, width, channels

# =============================================================================
# Interpolation / Warp Constants
# =============================================================================

INTERP_NEAREST = 0
INTERP_BILINEAR = 1

DEFAULT_INTERPOLATION = "bilinear"
VALID_INTERPOLATION_MODES = {"nearest", "bilinear"}

# Written where the inverse mapping yields a non-finite coordinate (w == 0)
DEFAULT_FILL_VALUE = 0.0

# Row-major 3x3 identity
IDENTITY_MATRIX = (1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0)
PERSPECTIVE_MATRIX_SIZE = 9

# =============================================================================
# Color Constants
# =============================================================================

# Integer luminance weights, summing to GRAY_DIVISOR
GRAY_WEIGHT_R = 76.0
GRAY_WEIGHT_G = 150.0
GRAY_WEIGHT_B = 29.0
GRAY_DIVISOR = 255.0

# =============================================================================
# Codec Constants
# =============================================================================

# rows, cols, element count (little-endian uint64 each)
CODEC_HEADER_FORMAT = "<QQQ"
