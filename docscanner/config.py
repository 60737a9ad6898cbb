"""Tunable constants for the scanning pipeline."""

import os
from dataclasses import dataclass, fields

ENV_PREFIX = "DOCSCANNER_"


@dataclass(frozen=True)
class ScanConfig:
    """Parameters shared by the detector, rectifier and enhancer.

    Attributes:
        blur_kernel: Side of the square Gaussian kernel applied before Canny.
        canny_low: Lower hysteresis threshold of the edge detector.
        canny_high: Upper hysteresis threshold of the edge detector.
        min_contour_area: Contours enclosing less area are ignored.
        approx_epsilon: Polygon approximation tolerance as a fraction of
            the contour perimeter.
        threshold_block_size: Neighborhood size of the adaptive threshold.
        threshold_offset: Constant subtracted from the weighted local mean.
        fill_value: Intensity written where the warp samples outside the
            source image.
        jpeg_quality: Quality used when the caller layer encodes output.
    """

    blur_kernel: int = 5
    canny_low: int = 75
    canny_high: int = 200
    min_contour_area: float = 1000.0
    approx_epsilon: float = 0.02
    threshold_block_size: int = 15
    threshold_offset: float = 10.0
    fill_value: int = 0
    jpeg_quality: int = 95

    def __post_init__(self):
        for name in ("blur_kernel", "threshold_block_size"):
            value = getattr(self, name)
            if value <= 1 or value % 2 == 0:
                raise ValueError(f"{name} must be an odd integer > 1, got {value}")
        if not 0 <= self.canny_low <= self.canny_high:
            raise ValueError(
                f"canny thresholds must satisfy 0 <= low <= high, "
                f"got ({self.canny_low}, {self.canny_high})"
            )
        if self.min_contour_area < 0:
            raise ValueError("min_contour_area must be non-negative")
        if not 0 < self.approx_epsilon < 1:
            raise ValueError("approx_epsilon must be in (0, 1)")
        if not 0 <= self.fill_value <= 255:
            raise ValueError("fill_value must be in [0, 255]")
        if not 0 <= self.jpeg_quality <= 100:
            raise ValueError("jpeg_quality must be in [0, 100]")

    @classmethod
    def from_env(cls, environ=None) -> "ScanConfig":
        """Build a config, overriding defaults from DOCSCANNER_* variables."""
        environ = os.environ if environ is None else environ
        overrides = {}
        for field in fields(cls):
            raw = environ.get(ENV_PREFIX + field.name.upper())
            if raw is None or raw == "":
                continue
            caster = int if isinstance(field.default, int) else float
            try:
                overrides[field.name] = caster(raw)
            except ValueError:
                raise ValueError(
                    f"{ENV_PREFIX + field.name.upper()} is not a valid number: {raw!r}"
                ) from None
        return cls(**overrides)


DEFAULT_CONFIG = ScanConfig()
