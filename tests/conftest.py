"""
Pytest configuration and fixtures for docraster tests
"""

import math

import cv2
import numpy as np
import pytest

from docraster.drawing import Color, PixelBuffer


def _draw_lines(width, height, angle, starts, length, thickness=1):
    """White page with black lines descending to the right at ``angle`` degrees."""
    page = np.full((height, width), 255, dtype=np.uint8)
    dx = int(round(length * math.cos(math.radians(angle))))
    dy = int(round(length * math.sin(math.radians(angle))))
    for x, y in starts:
        cv2.line(page, (x, y), (x + dx, y + dy), 0, thickness)
    return PixelBuffer.from_array(page)


@pytest.fixture
def white_page():
    """All-white 120x80 buffer"""
    return PixelBuffer(120, 80)


@pytest.fixture
def single_line_page():
    """200x100 page with one 150px, 1px thick line at row 50 tilted 5 degrees"""
    return _draw_lines(200, 100, 5.0, [(25, 50)], 150)


@pytest.fixture
def make_text_page():
    """Factory for a 400x300 page with parallel 'text lines' at a given angle"""

    def make(angle=5.0, thickness=2):
        starts = [(50, y) for y in range(90, 200, 20)]
        return _draw_lines(400, 300, angle, starts, 300, thickness)

    return make


@pytest.fixture
def boxed_page():
    """White 160x120 page with a black box covering x 40..99, y 30..69"""
    page = np.full((120, 160, 3), 255, dtype=np.uint8)
    cv2.rectangle(page, (40, 30), (99, 69), (0, 0, 0), -1)
    return PixelBuffer.from_array(page)


@pytest.fixture
def noise_buffer():
    """Deterministic random RGBA buffer for pixel-exact comparisons"""
    rng = np.random.default_rng(1234)
    pixels = rng.integers(0, 256, size=(37, 53, 4), dtype=np.uint8)
    return PixelBuffer.from_array(pixels)


@pytest.fixture
def red():
    return Color(255, 255, 0, 0)
