"""
In-memory ARGB pixel grid.

A PixelBuffer is the unit of work for every raster operation. Pixels are
held in a ``(height, width, 4)`` uint8 numpy array in RGBA channel order so
that both OpenCV and Pillow can consume it without reshaping. Decoding and
encoding of file formats is delegated to Pillow.
"""

import io
import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union

import cv2
import numpy as np
from PIL import Image

from .color import Color
from .geometry import Size

logger = logging.getLogger(__name__)

# Rec. 601 weights used to classify ink pixels
LUMINANCE_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


class PixelBuffer:
    """
    A width x height grid of 32-bit ARGB pixels.

    Raster operations never mutate their input: they return a new buffer.
    ``set_pixel`` is provided for building buffers by hand.
    """

    __slots__ = ("_pixels",)

    def __init__(self, width: int, height: int, background: Optional[Color] = None):
        """
        Allocate a buffer filled with a single color.

        Args:
            width: Width in pixels (> 0).
            height: Height in pixels (> 0).
            background: Fill color. Defaults to opaque white.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Buffer dimensions must be positive, got {width}x{height}")

        fill = background or Color.WHITE
        self._pixels = np.empty((int(height), int(width), 4), dtype=np.uint8)
        self._pixels[:] = fill.rgba

    @classmethod
    def adopt(cls, pixels: np.ndarray) -> "PixelBuffer":
        """Wrap an RGBA uint8 ``(h, w, 4)`` array without copying; the caller gives up ownership."""
        if pixels.dtype != np.uint8 or pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"Expected an RGBA uint8 array, got {pixels.dtype} {pixels.shape}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise ValueError(f"Buffer dimensions must be positive, got shape {pixels.shape}")

        buffer = cls.__new__(cls)
        buffer._pixels = pixels
        return buffer

    # Construction from external representations

    @classmethod
    def from_array(cls, array: np.ndarray, channel_order: str = "RGB") -> "PixelBuffer":
        """
        Create a buffer from a numpy image.

        Args:
            array: ``(h, w)`` grayscale, ``(h, w, 3)`` color or ``(h, w, 4)``
                color with alpha. uint8 or bool.
            channel_order: "RGB" for Pillow-style arrays, "BGR" for OpenCV.

        Returns:
            A new PixelBuffer owning a copy of the data.
        """
        if not isinstance(array, np.ndarray):
            raise TypeError(f"Expected numpy array, got {type(array)}")

        if array.dtype == np.bool_:
            array = array.astype(np.uint8) * 255
        elif array.dtype != np.uint8:
            raise ValueError(f"Unsupported pixel dtype: {array.dtype}")

        if array.ndim == 2:
            rgba = cv2.cvtColor(np.ascontiguousarray(array), cv2.COLOR_GRAY2RGBA)
        elif array.ndim == 3 and array.shape[2] == 3:
            code = cv2.COLOR_BGR2RGBA if channel_order.upper() == "BGR" else cv2.COLOR_RGB2RGBA
            rgba = cv2.cvtColor(np.ascontiguousarray(array), code)
        elif array.ndim == 3 and array.shape[2] == 4:
            if channel_order.upper() == "BGR":
                rgba = cv2.cvtColor(np.ascontiguousarray(array), cv2.COLOR_BGRA2RGBA)
            else:
                rgba = np.array(array, dtype=np.uint8, copy=True)
        else:
            raise ValueError(f"Unsupported image shape: {array.shape}")

        if rgba.shape[0] == 0 or rgba.shape[1] == 0:
            raise ValueError(f"Buffer dimensions must be positive, got shape {array.shape}")

        return cls.adopt(np.ascontiguousarray(rgba))

    @classmethod
    def from_argb(cls, argb: np.ndarray) -> "PixelBuffer":
        """Create a buffer from a ``(h, w)`` array of packed 0xAARRGGBB values."""
        argb = np.asarray(argb, dtype=np.uint32)
        if argb.ndim != 2:
            raise ValueError(f"Expected a 2-D ARGB array, got shape {argb.shape}")

        pixels = np.empty(argb.shape + (4,), dtype=np.uint8)
        pixels[..., 0] = (argb >> 16) & 0xFF
        pixels[..., 1] = (argb >> 8) & 0xFF
        pixels[..., 2] = argb & 0xFF
        pixels[..., 3] = (argb >> 24) & 0xFF
        return cls.from_array(pixels)

    @classmethod
    def from_pil(cls, image: Image.Image) -> "PixelBuffer":
        """Create a buffer from a Pillow image of any mode."""
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls.adopt(np.array(image, dtype=np.uint8))

    @classmethod
    def from_file(cls, path: Union[Path, str]) -> "PixelBuffer":
        """Decode an image file with Pillow (first frame only)."""
        with Image.open(path) as image:
            image.load()
            logger.debug(f"Loaded {path}: {image.format} {image.size[0]}x{image.size[1]} {image.mode}")
            return cls.from_pil(image)

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, BinaryIO]) -> "PixelBuffer":
        """Decode encoded image bytes (PNG, JPEG, TIFF, ...) with Pillow."""
        stream = io.BytesIO(data) if isinstance(data, (bytes, bytearray)) else data
        with Image.open(stream) as image:
            image.load()
            return cls.from_pil(image)

    @classmethod
    def from_rgb_buffer(cls, data: bytes, width: int, height: int) -> "PixelBuffer":
        """
        Create a buffer from raw, tightly packed 24-bit RGB bytes.

        Args:
            data: ``width * height * 3`` bytes, row-major.
            width: Image width.
            height: Image height.
        """
        expected = width * height * 3
        if len(data) != expected:
            raise ValueError(f"RGB buffer holds {len(data)} bytes, expected {expected} for {width}x{height}")

        rgb = np.frombuffer(data, dtype=np.uint8).reshape(height, width, 3)
        return cls.from_array(rgb)

    # Pixel access

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    @property
    def pixels(self) -> np.ndarray:
        """The backing RGBA array (not a copy)."""
        return self._pixels

    @property
    def nbytes(self) -> int:
        return self._pixels.nbytes

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) is outside {self.width}x{self.height} buffer")

    def get_pixel(self, x: int, y: int) -> Color:
        self._check_bounds(x, y)
        r, g, b, a = (int(v) for v in self._pixels[y, x])
        return Color(a, r, g, b)

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        self._check_bounds(x, y)
        self._pixels[y, x] = color.rgba

    def __getitem__(self, position: tuple[int, int]) -> Color:
        x, y = position
        return self.get_pixel(x, y)

    def __setitem__(self, position: tuple[int, int], color: Color) -> None:
        x, y = position
        self.set_pixel(x, y, color)

    @property
    def argb(self) -> np.ndarray:
        """Packed 0xAARRGGBB values as a ``(h, w)`` uint32 array."""
        p = self._pixels.astype(np.uint32)
        return (p[..., 3] << 24) | (p[..., 0] << 16) | (p[..., 1] << 8) | p[..., 2]

    def luminance(self) -> np.ndarray:
        """Per-pixel luminance (0-255) as a ``(h, w)`` float64 array."""
        return self._pixels[..., :3] @ LUMINANCE_WEIGHTS

    @property
    def is_grayscale(self) -> bool:
        """Whether every pixel has equal red, green and blue channels."""
        rgb = self._pixels[..., :3]
        return bool(np.all(rgb[..., 0] == rgb[..., 1]) and np.all(rgb[..., 1] == rgb[..., 2]))

    def clone(self) -> "PixelBuffer":
        return PixelBuffer.adopt(self._pixels.copy())

    # Export

    def to_array(self, mode: str = "RGBA") -> np.ndarray:
        """
        Copy the pixels into a numpy array.

        Args:
            mode: "RGBA", "RGB", "BGRA", "BGR" or "L" (grayscale).
        """
        mode = mode.upper()
        if mode == "RGBA":
            return self._pixels.copy()
        if mode == "RGB":
            return cv2.cvtColor(self._pixels, cv2.COLOR_RGBA2RGB)
        if mode == "BGRA":
            return cv2.cvtColor(self._pixels, cv2.COLOR_RGBA2BGRA)
        if mode == "BGR":
            return cv2.cvtColor(self._pixels, cv2.COLOR_RGBA2BGR)
        if mode == "L":
            return cv2.cvtColor(self._pixels, cv2.COLOR_RGBA2GRAY)
        raise ValueError(f"Unsupported array mode: {mode}")

    def to_pil(self) -> Image.Image:
        return Image.fromarray(self._pixels.copy())

    def to_bytes(self, format: str = "PNG", quality: int = 95) -> bytes:
        """
        Encode the buffer with Pillow.

        Args:
            format: Pillow format name (PNG, JPEG, TIFF, BMP, WEBP).
            quality: JPEG/WEBP quality (1-100).
        """
        image = self.to_pil()
        save_kwargs = {"format": format}

        if format.upper() in ("JPEG", "JPG"):
            # JPEG has no alpha channel
            image = image.convert("RGB")
            save_kwargs["format"] = "JPEG"
            save_kwargs["quality"] = quality
        elif format.upper() == "WEBP":
            save_kwargs["quality"] = quality

        output = io.BytesIO()
        image.save(output, **save_kwargs)
        return output.getvalue()

    def save(self, path: Union[Path, str], format: Optional[str] = None) -> Path:
        """Encode to a file; the format is inferred from the suffix when omitted."""
        path = Path(path)
        image = self.to_pil()
        if (format or path.suffix.lstrip(".")).upper() in ("JPEG", "JPG"):
            image = image.convert("RGB")
        image.save(path, format=format)
        return path

    def get_rgb_buffer(self) -> bytes:
        """Raw 24-bit RGB bytes, row-major, alpha dropped."""
        return self.to_array("RGB").tobytes()

    def get_rgba_buffer(self) -> bytes:
        """Raw 32-bit RGBA bytes, row-major."""
        return self._pixels.tobytes()

    def extract_alpha(self) -> bytes:
        """One byte of alpha per pixel, row-major."""
        return self._pixels[..., 3].tobytes()

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self._pixels.shape == other._pixels.shape and bool(np.array_equal(self._pixels, other._pixels))

    __hash__ = None

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"
