"""
Image normalization: mean/std standardization and min/max rescaling.
"""

from pixwarp.normalize.api import find_min_max, normalize_mean_std, normalize_min_max

__all__ = [
    "normalize_mean_std",
    "find_min_max",
    "normalize_min_max",
]
