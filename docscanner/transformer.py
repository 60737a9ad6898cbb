"""Perspective rectification of a detected document."""

import logging
import math
from typing import Optional, Tuple

import cv2
import numpy as np

from .config import DEFAULT_CONFIG, ScanConfig
from .exceptions import DegenerateQuadrilateralError
from .geometry import Quadrilateral, edge_lengths, has_collinear_corners, has_negligible_area

logger = logging.getLogger(__name__)


class PerspectiveRectifier:
    """Warps a quadrilateral region of an image onto an upright rectangle.

    The output is as wide as the longer of the top and bottom edges and as
    tall as the longer of the left and right edges, so the page is never
    downsampled along either axis.
    """

    def __init__(self, config: Optional[ScanConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def output_dimensions(self, quad: Quadrilateral) -> Tuple[float, float]:
        """Compute the rectified width and height.

        Args:
            quad: Ordered document corners.

        Returns:
            Tuple of (width, height), unrounded.
        """
        bottom, top, right, left = edge_lengths(quad)
        return max(bottom, top), max(right, left)

    def is_degenerate(self, quad: Quadrilateral) -> bool:
        width, height = self.output_dimensions(quad)
        if width <= 0 or height <= 0:
            return True
        return has_collinear_corners(quad) or has_negligible_area(quad)

    def homography(self, quad: Quadrilateral) -> np.ndarray:
        """Solve the 3x3 transform taking the corners onto the output rectangle."""
        width, height = self.output_dimensions(quad)
        dst_pts = np.array([
            [0, 0],                        # Top-left
            [width - 1, 0],                # Top-right
            [width - 1, height - 1],       # Bottom-right
            [0, height - 1],               # Bottom-left
        ], dtype=np.float32)
        return cv2.getPerspectiveTransform(quad.to_array(), dst_pts)

    def rectify(self, image: np.ndarray, quad: Quadrilateral) -> np.ndarray:
        """Extract and flatten the document.

        Args:
            image: Source image; its channel count is preserved.
            quad: Ordered document corners in source coordinates.

        Returns:
            The rectified image, ceil(width) by ceil(height).

        Raises:
            DegenerateQuadrilateralError: If the corners are collinear or
                coincident.
        """
        if self.is_degenerate(quad):
            raise DegenerateQuadrilateralError(
                f"Corners do not span a quadrilateral: {quad.to_flat()}"
            )

        width, height = self.output_dimensions(quad)
        size = (math.ceil(width), math.ceil(height))
        matrix = self.homography(quad)

        fill = self.config.fill_value
        rectified = cv2.warpPerspective(
            image, matrix, size,
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=(fill, fill, fill, fill),
        )
        # OpenCV drops a trailing singleton channel axis
        if image.ndim == 3 and rectified.ndim == 2:
            rectified = rectified[:, :, np.newaxis]

        logger.debug("Rectified %dx%d region to %dx%d", image.shape[1], image.shape[0], *size)
        return rectified
