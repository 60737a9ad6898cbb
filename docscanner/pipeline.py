"""Entry points that run the scanner stages and report failures as values.

Nothing in the taxonomy of ``ScanFailure`` escapes these functions as an
exception; callers inspect the returned ``ScanResult``.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np

from .config import ScanConfig
from .detector import EdgeDetector
from .enhancer import Enhancer
from .exceptions import DegenerateQuadrilateralError, InvalidPolygonError
from .geometry import Quadrilateral
from .results import ScanFailure, ScanResult
from .transformer import PerspectiveRectifier

logger = logging.getLogger(__name__)

QuadLike = Union[Quadrilateral, Sequence[float], np.ndarray]


@dataclass(frozen=True)
class ScannedPage:
    """A detected outline and the binarized page cut out along it."""

    quad: Quadrilateral
    image: np.ndarray


def _image_available(image) -> bool:
    """True for a non-empty uint8 gray, BGR or BGRA array."""
    if not isinstance(image, np.ndarray) or image.size == 0 or image.dtype != np.uint8:
        return False
    if image.ndim == 2:
        return True
    return image.ndim == 3 and image.shape[2] in (1, 3, 4)


def _unavailable() -> ScanResult:
    logger.warning("No usable image to process")
    return ScanResult.fail(
        ScanFailure.IMAGE_UNAVAILABLE,
        "Image is missing, empty, or not an 8-bit gray/BGR/BGRA array",
    )


def _as_quad(quad: QuadLike) -> Quadrilateral:
    if isinstance(quad, Quadrilateral):
        return quad
    return Quadrilateral.from_flat(quad)


def detect_contour(image: np.ndarray, config: Optional[ScanConfig] = None) -> ScanResult[Quadrilateral]:
    """Find the document outline in a decoded image."""
    if not _image_available(image):
        return _unavailable()

    quad = EdgeDetector(config).detect(image)
    if quad is None:
        logger.info("No document outline found")
        return ScanResult.fail(ScanFailure.NOT_FOUND, "No four-sided contour found")
    return ScanResult.success(quad)


def rectify(image: np.ndarray, quad: QuadLike, config: Optional[ScanConfig] = None) -> ScanResult[np.ndarray]:
    """Perspective-correct the region inside ``quad``, without enhancement."""
    if not _image_available(image):
        return _unavailable()

    try:
        return ScanResult.success(PerspectiveRectifier(config).rectify(image, _as_quad(quad)))
    except InvalidPolygonError as e:
        logger.warning("Rejected polygon: %s", e)
        return ScanResult.fail(ScanFailure.INVALID_POLYGON, str(e))
    except DegenerateQuadrilateralError as e:
        logger.warning("Refusing to rectify: %s", e)
        return ScanResult.fail(ScanFailure.DEGENERATE, str(e))


def enhance(image: np.ndarray, config: Optional[ScanConfig] = None) -> ScanResult[np.ndarray]:
    """Binarize an image with the adaptive threshold."""
    if not _image_available(image):
        return _unavailable()
    return ScanResult.success(Enhancer(config).enhance(image))


def rectify_and_enhance(
    image: np.ndarray, quad: QuadLike, config: Optional[ScanConfig] = None
) -> ScanResult[np.ndarray]:
    """Rectify the document inside ``quad`` and binarize the result.

    Args:
        image: Decoded source image.
        quad: A ``Quadrilateral``, or eight numbers holding the TL, TR, BR
            and BL corners in that order.
        config: Optional pipeline parameters.

    Returns:
        The enhanced single-channel page, or an INVALID_POLYGON, DEGENERATE
        or IMAGE_UNAVAILABLE failure.
    """
    rectified = rectify(image, quad, config)
    if not rectified:
        return rectified

    enhanced = enhance(rectified.value, config)
    if enhanced:
        logger.info("Produced %dx%d scan", enhanced.value.shape[1], enhanced.value.shape[0])
    return enhanced


def scan(image: np.ndarray, config: Optional[ScanConfig] = None) -> ScanResult[ScannedPage]:
    """Detect the document and return it rectified and binarized."""
    detected = detect_contour(image, config)
    if not detected:
        return ScanResult.fail(detected.failure, detected.message)

    page = rectify_and_enhance(image, detected.value, config)
    if not page:
        return ScanResult.fail(page.failure, page.message)
    return ScanResult.success(ScannedPage(quad=detected.value, image=page.value))
