"""
Image utility functions.

Loading of the image sources an upload can arrive as, and the
preprocessing applied before recognition.
"""

from __future__ import annotations

import base64
import binascii
import os
import re
from pathlib import Path
from typing import Any

import cv2
import numpy as np
from PIL import Image

from ..exceptions import ImageLoadError


_DATA_URL_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,", re.IGNORECASE)

SHARPEN_KERNEL = np.array(
    [[0, -1, 0],
     [-1, 5, -1],
     [0, -1, 0]],
    dtype=np.float32,
)


def decode_base64_image(data: str) -> np.ndarray:
    """
    Decode a base64 payload (optionally a ``data:image/...;base64,`` URL).

    Raises:
        ImageLoadError: payload is not valid base64 or not an image
    """
    payload = _DATA_URL_PREFIX.sub("", data.strip())
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageLoadError(f"Invalid base64 image payload: {e}", source=data[:40])
    return decode_image_bytes(raw)


def decode_image_bytes(raw: bytes) -> np.ndarray:
    """Decode encoded image bytes (PNG, JPEG, ...) into a BGR array."""
    if not raw:
        raise ImageLoadError("Empty image buffer")
    img = cv2.imdecode(np.frombuffer(raw, dtype=np.uint8), cv2.IMREAD_COLOR)
    if img is None:
        raise ImageLoadError("Could not decode image bytes")
    return img


def load_image(source: Any) -> np.ndarray:
    """
    Load an image from any supported source.

    Accepts a file path (``str`` or ``Path``), a base64 string or data
    URL, raw encoded bytes, a PIL image or a numpy array. A ``str`` that
    is neither an existing file nor decodable base64 is reported as a
    missing file.

    Returns:
        Image as numpy array (BGR or single channel)

    Raises:
        ImageLoadError: source cannot be read or decoded
    """
    if isinstance(source, np.ndarray):
        if source.size == 0:
            raise ImageLoadError("Empty image array")
        return source

    if isinstance(source, Image.Image):
        rgb = np.array(source.convert("RGB"))
        return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)

    if isinstance(source, (bytes, bytearray, memoryview)):
        return decode_image_bytes(bytes(source))

    if isinstance(source, str) and _DATA_URL_PREFIX.match(source.strip()):
        return decode_base64_image(source)

    if isinstance(source, (str, Path)):
        path = Path(source)
        # os.path.isfile swallows "name too long" errors from base64 payloads
        if not os.path.isfile(path):
            if isinstance(source, str):
                try:
                    return decode_base64_image(source)
                except ImageLoadError:
                    pass
            raise ImageLoadError("Image file not found", source=str(path))
        # np.fromfile + imdecode handles non-ASCII paths
        data = np.fromfile(str(path), dtype=np.uint8)
        img = cv2.imdecode(data, cv2.IMREAD_COLOR)
        if img is None:
            raise ImageLoadError("Could not decode image file", source=str(path))
        return img

    raise ImageLoadError(f"Unsupported image source type: {type(source).__name__}")


def to_grayscale(image: np.ndarray) -> np.ndarray:
    if image.ndim == 3:
        if image.shape[2] == 4:
            return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    return image.copy()


def preprocess_for_ocr(
    image: np.ndarray,
    max_width: int = 2000,
    threshold: int = 128,
    sharpen: bool = True
) -> np.ndarray:
    """
    Preprocess a photographed sheet for OCR.

    Pipeline:
    1. Convert to grayscale
    2. Downscale to fit ``max_width`` (never enlarges)
    3. Normalize contrast
    4. Sharpen
    5. Binary threshold

    Returns:
        Single channel image containing only 0 and 255
    """
    gray = to_grayscale(image)

    h, w = gray.shape[:2]
    if max_width and w > max_width:
        scale = max_width / float(w)
        gray = cv2.resize(
            gray,
            (max_width, max(1, int(round(h * scale)))),
            interpolation=cv2.INTER_AREA
        )

    gray = cv2.normalize(gray, None, 0, 255, cv2.NORM_MINMAX)

    if sharpen:
        gray = cv2.filter2D(gray, -1, SHARPEN_KERNEL)

    _, binary = cv2.threshold(gray, threshold, 255, cv2.THRESH_BINARY)
    return binary


def to_pil(image: np.ndarray) -> Image.Image:
    """Convert an OpenCV array to a PIL image for pytesseract."""
    if image.ndim == 2:
        return Image.fromarray(image)
    return Image.fromarray(cv2.cvtColor(image, cv2.COLOR_BGR2RGB))
