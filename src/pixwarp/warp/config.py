"""
Warp configuration.

Provides the sampling defaults used by the Perspective pipeline.
"""

from dataclasses import dataclass

from pixwarp.constants import (
    DEFAULT_FILL_VALUE,
    DEFAULT_INTERPOLATION,
    VALID_INTERPOLATION_MODES,
)


@dataclass
class WarpConfig:
    """
    Configuration for perspective warping.

    Attributes:
        interpolation: Sampling strategy ("nearest" or "bilinear")
        fill_value: Value written where the source coordinate is not finite
    """

    interpolation: str = DEFAULT_INTERPOLATION
    fill_value: float = DEFAULT_FILL_VALUE

    def __post_init__(self):
        """Validate configuration parameters."""
        if not isinstance(self.interpolation, str):
            raise TypeError(
                f"interpolation must be a string, got {type(self.interpolation).__name__}"
            )

        self.interpolation = self.interpolation.lower()
        if self.interpolation not in VALID_INTERPOLATION_MODES:
            raise ValueError(
                f"Invalid interpolation: {self.interpolation}. "
                f"Must be one of {sorted(VALID_INTERPOLATION_MODES)}"
            )

        if isinstance(self.fill_value, bool) or not isinstance(self.fill_value, (int, float)):
            raise TypeError(f"fill_value must be a number, got {type(self.fill_value).__name__}")
        self.fill_value = float(self.fill_value)
