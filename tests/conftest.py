"""Shared fixtures: synthetic photos of a dark page on a light table."""

import cv2
import numpy as np
import pytest

SCENARIO_CORNERS = [(100, 120), (650, 90), (680, 540), (80, 560)]


def draw_document(corners, width=800, height=600, background=220, fill=40):
    """BGR image with a filled dark polygon on a uniform light background."""
    image = np.full((height, width, 3), background, dtype=np.uint8)
    pts = np.array(corners, dtype=np.int32).reshape(-1, 1, 2)
    cv2.fillPoly(image, [pts], (fill, fill, fill))
    return image


@pytest.fixture
def scenario_image():
    return draw_document(SCENARIO_CORNERS)


@pytest.fixture
def blank_image():
    return np.full((600, 800, 3), 220, dtype=np.uint8)


@pytest.fixture
def textured_page():
    """Rectified-looking page: white with dark strokes and a lighting gradient."""
    gradient = np.linspace(150, 250, 320, dtype=np.float32)
    page = np.tile(gradient, (240, 1)).astype(np.uint8)
    for row in range(30, 220, 30):
        cv2.line(page, (20, row), (300, row), 30, 2)
    return cv2.cvtColor(page, cv2.COLOR_GRAY2BGR)
