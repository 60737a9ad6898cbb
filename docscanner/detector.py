"""Document boundary detection from a Canny edge map."""

import logging
from typing import List, Optional, Tuple

import cv2
import numpy as np

from .config import DEFAULT_CONFIG, ScanConfig
from .geometry import Quadrilateral

logger = logging.getLogger(__name__)


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Return a single-channel copy of a gray, BGR or BGRA image."""
    if image.ndim == 2:
        return image.copy()
    channels = image.shape[2]
    if channels == 1:
        return image[:, :, 0].copy()
    if channels == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    if channels == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    raise ValueError(f"Unsupported channel count: {channels}")


class EdgeDetector:
    """Finds the outline of a document as the largest four-sided contour.

    The image is blurred, run through Canny, and every closed contour of
    sufficient area is simplified with Douglas-Peucker. The biggest polygon
    that simplifies to exactly four vertices is taken to be the page.
    """

    def __init__(self, config: Optional[ScanConfig] = None):
        """Initialize the edge detector.

        Args:
            config: Blur, Canny, area and approximation parameters.
                Defaults to ``DEFAULT_CONFIG``.
        """
        self.config = config or DEFAULT_CONFIG

    def detect(self, image: np.ndarray) -> Optional[Quadrilateral]:
        """Detect the document boundary.

        Args:
            image: Input image, gray or BGR(A).

        Returns:
            The ordered corners, or None if no contour qualifies.
        """
        edges = self.edge_map(image)
        candidates = self.find_candidates(edges)

        if not candidates:
            logger.debug("No four-sided contour above %.0f px area", self.config.min_contour_area)
            return None

        area, polygon = candidates[0]
        quad = Quadrilateral.from_points(polygon)
        logger.debug(
            "Selected quadrilateral of area %.0f from %d candidates: %s",
            area, len(candidates), quad.to_flat(),
        )
        return quad

    def edge_map(self, image: np.ndarray) -> np.ndarray:
        """Binary edge map of the blurred intensity image."""
        gray = to_grayscale(image)
        k = self.config.blur_kernel
        blurred = cv2.GaussianBlur(gray, (k, k), 0)
        return cv2.Canny(blurred, self.config.canny_low, self.config.canny_high)

    def find_candidates(self, edges: np.ndarray) -> List[Tuple[float, np.ndarray]]:
        """All four-vertex polygons from the edge map, largest area first.

        Args:
            edges: Binary edge map.

        Returns:
            List of (polygon area, (4, 2) vertex array) pairs.
        """
        contours, _ = cv2.findContours(edges, cv2.RETR_LIST, cv2.CHAIN_APPROX_SIMPLE)

        candidates = []
        for contour in contours:
            if cv2.contourArea(contour) < self.config.min_contour_area:
                continue

            perimeter = cv2.arcLength(contour, True)
            approx = cv2.approxPolyDP(contour, self.config.approx_epsilon * perimeter, True)
            if len(approx) != 4:
                continue

            candidates.append((abs(cv2.contourArea(approx)), approx.reshape(4, 2)))

        logger.debug("%d contours, %d quadrilateral candidates", len(contours), len(candidates))

        # Stable sort keeps contour order among equal areas
        candidates.sort(key=lambda c: c[0], reverse=True)
        return candidates
