"""
Image I/O around the scanner: decoding, encoding, file workflows and PDF export.
"""

import io
import logging
import os
from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np
from PIL import Image

from docscanner import (
    DEFAULT_CONFIG,
    InvalidPolygonError,
    Quadrilateral,
    ScanConfig,
    ScanFailure,
    ScanResult,
    detect_contour,
    enhance,
    rectify,
)

logger = logging.getLogger(__name__)

SCAN_MODES = ("auto", "original")


def decode_image(image_bytes: bytes) -> Optional[np.ndarray]:
    """Decode encoded image bytes to a BGR array, or None if unreadable."""
    if not image_bytes:
        return None
    nparr = np.frombuffer(image_bytes, np.uint8)
    return cv2.imdecode(nparr, cv2.IMREAD_COLOR)


def load_image(path: str) -> Optional[np.ndarray]:
    """Read and decode an image file, or None if it cannot be read."""
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        logger.warning("Cannot read %s: %s", path, e)
        return None
    return decode_image(data)


def encode_jpeg(image: np.ndarray, quality: Optional[int] = None) -> Optional[bytes]:
    """Encode an image as JPEG bytes, or None on failure."""
    if quality is None:
        quality = DEFAULT_CONFIG.jpeg_quality
    try:
        ok, buffer = cv2.imencode('.jpg', image, [cv2.IMWRITE_JPEG_QUALITY, int(quality)])
    except cv2.error as e:
        logger.warning("JPEG encoding failed: %s", e)
        return None
    return buffer.tobytes() if ok else None


def save_image(image: np.ndarray, path: str, quality: Optional[int] = None) -> bool:
    """Write an image to ``path`` as JPEG. Returns whether it was written."""
    data = encode_jpeg(image, quality)
    if data is None:
        return False
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        logger.warning("Cannot write %s: %s", path, e)
        return False
    return True


def cv2_to_pil(image: np.ndarray) -> Image.Image:
    """Convert a gray or BGR OpenCV image to PIL."""
    if image.ndim == 2:
        return Image.fromarray(image)
    return Image.fromarray(cv2.cvtColor(image, cv2.COLOR_BGR2RGB))


def create_thumbnail(image: np.ndarray, max_size: Tuple[int, int] = (300, 300)) -> Image.Image:
    """
    Create a PIL thumbnail of an OpenCV image.

    Args:
        image: Gray or BGR image
        max_size: Maximum dimensions

    Returns:
        Thumbnail image
    """
    thumbnail = cv2_to_pil(image)
    thumbnail.thumbnail(max_size, Image.Resampling.LANCZOS)
    return thumbnail


def draw_quadrilateral(
    image: np.ndarray,
    quad: Quadrilateral,
    color: Tuple[int, int, int] = (0, 255, 0),
    thickness: int = 3,
) -> np.ndarray:
    """Return a copy of ``image`` with the outline and corners drawn on it."""
    preview = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR) if image.ndim == 2 else image.copy()
    pts = quad.to_array().round().astype(np.int32)
    cv2.polylines(preview, [pts.reshape(-1, 1, 2)], True, color, thickness)
    for x, y in pts:
        cv2.circle(preview, (int(x), int(y)), thickness * 3, color, -1)
    return preview


def process_image(
    path: str,
    output_path: str,
    polygon: Optional[Sequence[float]] = None,
    mode: str = "auto",
    config: Optional[ScanConfig] = None,
) -> ScanResult[str]:
    """
    Scan a photo on disk and write the result as JPEG.

    Args:
        path: Source photo
        output_path: Where to write the scanned page
        polygon: Eight corner coordinates (TL, TR, BR, BL). Detected
            automatically when None.
        mode: "auto" binarizes the page, "original" keeps the rectified
            image as is
        config: Optional pipeline parameters

    Returns:
        Result holding ``output_path`` on success
    """
    config = config or DEFAULT_CONFIG

    if mode not in SCAN_MODES:
        return ScanResult.fail(ScanFailure.INVALID_MODE, f"Unknown mode {mode!r}")

    image = load_image(path)
    if image is None:
        logger.warning("Failed to load image: %s", path)
        return ScanResult.fail(ScanFailure.IMAGE_UNAVAILABLE, f"Unable to load {path}")

    if polygon is None:
        detected = detect_contour(image, config)
        if not detected:
            return ScanResult.fail(detected.failure, detected.message)
        quad = detected.value
    else:
        try:
            quad = Quadrilateral.from_flat(polygon)
        except InvalidPolygonError as e:
            logger.warning("Polygon invalid: %s", e)
            return ScanResult.fail(ScanFailure.INVALID_POLYGON, str(e))

    page = rectify(image, quad, config)
    if page and mode == "auto":
        page = enhance(page.value, config)
    if not page:
        return ScanResult.fail(page.failure, page.message)

    if not save_image(page.value, output_path, config.jpeg_quality):
        return ScanResult.fail(ScanFailure.ENCODE_FAILURE, f"Unable to write {output_path}")

    logger.info("Scanned %s to %s", path, output_path)
    return ScanResult.success(output_path)


def _load_pdf_page(path: str) -> Optional[Image.Image]:
    try:
        with open(path, "rb") as f:
            page = Image.open(io.BytesIO(f.read()))
            page.load()
    except (OSError, Image.UnidentifiedImageError) as e:
        logger.warning("Skipping unreadable page %s: %s", path, e)
        return None
    if page.mode not in ("L", "RGB"):
        page = page.convert("RGB")
    return page


def generate_pdf(page_paths: Sequence[str], output_path: str, resolution: float = 150.0) -> ScanResult[str]:
    """
    Combine scanned pages into a single PDF, one image per page.

    Pages that cannot be read are skipped.

    Returns:
        Result holding ``output_path`` on success
    """
    pages: List[Image.Image] = []
    for path in page_paths:
        page = _load_pdf_page(path)
        if page is not None:
            pages.append(page)

    if not pages:
        return ScanResult.fail(ScanFailure.IMAGE_UNAVAILABLE, "No readable pages")

    first, rest = pages[0], pages[1:]
    try:
        first.save(output_path, "PDF", save_all=True, append_images=rest, resolution=resolution)
    except (OSError, ValueError) as e:
        logger.warning("Cannot write PDF %s: %s", output_path, e)
        if os.path.exists(output_path):
            os.remove(output_path)
        return ScanResult.fail(ScanFailure.ENCODE_FAILURE, str(e))

    logger.info("Wrote %d page PDF to %s", len(pages), output_path)
    return ScanResult.success(output_path)


def pdf_bytes(pages: Sequence[np.ndarray], resolution: float = 150.0) -> Optional[bytes]:
    """Render in-memory pages to PDF bytes, or None if there are no pages."""
    if not pages:
        return None
    images = [cv2_to_pil(page) for page in pages]
    buffer = io.BytesIO()
    images[0].save(buffer, "PDF", save_all=True, append_images=images[1:], resolution=resolution)
    return buffer.getvalue()
