"""
Utility functions for rollscan.
"""

from .image_utils import (
    load_image,
    decode_base64_image,
    decode_image_bytes,
    preprocess_for_ocr,
    to_grayscale,
    to_pil,
)

from .timing import (
    timed_operation,
    format_duration,
    TimingResult,
)

__all__ = [
    # Image utilities
    "load_image",
    "decode_base64_image",
    "decode_image_bytes",
    "preprocess_for_ocr",
    "to_grayscale",
    "to_pil",

    # Timing utilities
    "timed_operation",
    "format_duration",
    "TimingResult",
]
