"""Adaptive binarization of rectified pages."""

import logging
from typing import Optional

import cv2
import numpy as np

from .config import DEFAULT_CONFIG, ScanConfig
from .detector import to_grayscale

logger = logging.getLogger(__name__)


class Enhancer:
    """Turns a rectified page into a black-and-white scan.

    Each pixel is compared against a Gaussian-weighted mean of its
    neighborhood minus a constant, which copes with shadows and uneven
    lighting across the page.
    """

    def __init__(self, config: Optional[ScanConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def enhance(self, image: np.ndarray) -> np.ndarray:
        """Binarize an image.

        Args:
            image: 8-bit gray or BGR(A) image.

        Returns:
            Single-channel uint8 image containing only 0 and 255.
        """
        gray = to_grayscale(image)
        binary = cv2.adaptiveThreshold(
            gray, 255,
            cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
            cv2.THRESH_BINARY,
            self.config.threshold_block_size,
            self.config.threshold_offset,
        )
        logger.debug("Binarized %dx%d page", binary.shape[1], binary.shape[0])
        return binary
