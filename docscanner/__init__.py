"""Document scanner: outline detection, perspective correction and binarization."""

from .config import DEFAULT_CONFIG, ScanConfig
from .detector import EdgeDetector
from .enhancer import Enhancer
from .exceptions import DegenerateQuadrilateralError, InvalidPolygonError, ScannerError
from .geometry import Point, Quadrilateral, order_corners
from .pipeline import ScannedPage, detect_contour, enhance, rectify, rectify_and_enhance, scan
from .results import ScanFailure, ScanResult
from .transformer import PerspectiveRectifier

__all__ = [
    "DEFAULT_CONFIG",
    "ScanConfig",
    "EdgeDetector",
    "PerspectiveRectifier",
    "Enhancer",
    "Point",
    "Quadrilateral",
    "order_corners",
    "ScanFailure",
    "ScanResult",
    "ScannedPage",
    "ScannerError",
    "InvalidPolygonError",
    "DegenerateQuadrilateralError",
    "detect_contour",
    "rectify",
    "enhance",
    "rectify_and_enhance",
    "scan",
]
