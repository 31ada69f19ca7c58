import base64

import cv2
import numpy as np
import pytest
from PIL import Image

from rollscan.exceptions import ImageLoadError
from rollscan.utils.image_utils import (
    decode_base64_image,
    load_image,
    preprocess_for_ocr,
    to_grayscale,
    to_pil,
)


@pytest.fixture
def sheet():
    """White page with a black bar, BGR."""
    img = np.full((60, 80, 3), 255, dtype=np.uint8)
    img[20:40, 10:70] = 0
    return img


@pytest.fixture
def png_bytes(sheet):
    ok, buf = cv2.imencode(".png", sheet)
    assert ok
    return buf.tobytes()


def test_load_array_passes_through(sheet):
    assert load_image(sheet) is sheet


def test_load_empty_array_fails():
    with pytest.raises(ImageLoadError):
        load_image(np.zeros((0, 0), dtype=np.uint8))


def test_load_bytes(png_bytes, sheet):
    img = load_image(png_bytes)

    assert img.shape == sheet.shape
    assert np.array_equal(img, sheet)


def test_load_data_url(png_bytes):
    url = "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")

    assert load_image(url).shape == (60, 80, 3)


def test_load_plain_base64(png_bytes, sheet):
    payload = base64.b64encode(png_bytes).decode("ascii")

    assert np.array_equal(load_image(payload), sheet)
    assert decode_base64_image(payload).shape == (60, 80, 3)


def test_long_base64_payload_is_not_treated_as_a_path():
    noisy = np.random.default_rng(7).integers(0, 255, (64, 64, 3), dtype=np.uint8)
    ok, buf = cv2.imencode(".png", noisy)
    assert ok
    payload = base64.b64encode(buf.tobytes()).decode("ascii")
    assert len(payload) > 4096

    assert np.array_equal(load_image(payload), noisy)


def test_missing_path_that_is_not_base64(tmp_path):
    with pytest.raises(ImageLoadError) as exc:
        load_image(str(tmp_path / "scan.png"))
    assert exc.value.message == "Image file not found"


def test_load_path(tmp_path, png_bytes):
    path = tmp_path / "class_list.png"
    path.write_bytes(png_bytes)

    assert load_image(path).shape == (60, 80, 3)
    assert load_image(str(path)).shape == (60, 80, 3)


def test_load_pil_image(sheet):
    pil = Image.fromarray(cv2.cvtColor(sheet, cv2.COLOR_BGR2RGB))

    assert np.array_equal(load_image(pil), sheet)


@pytest.mark.parametrize("source", [
    b"",
    b"not an image",
    "data:image/png;base64,@@@@",
    "/does/not/exist.png",
    12345,
])
def test_load_failures(source):
    with pytest.raises(ImageLoadError):
        load_image(source)


def test_load_undecodable_file(tmp_path):
    path = tmp_path / "broken.jpg"
    path.write_bytes(b"garbage")

    with pytest.raises(ImageLoadError) as exc:
        load_image(path)
    assert exc.value.details["source"] == str(path)


def test_to_grayscale(sheet):
    gray = to_grayscale(sheet)

    assert gray.ndim == 2
    assert to_grayscale(gray) is not gray


def test_preprocess_is_binary(sheet):
    out = preprocess_for_ocr(sheet)

    assert out.ndim == 2
    assert set(np.unique(out)) <= {0, 255}
    assert out[30, 40] == 0
    assert out[5, 5] == 255


def test_preprocess_downscales_wide_images():
    wide = np.full((100, 4000, 3), 200, dtype=np.uint8)

    out = preprocess_for_ocr(wide, max_width=2000)

    assert out.shape == (50, 2000)


def test_preprocess_never_enlarges(sheet):
    assert preprocess_for_ocr(sheet, max_width=2000).shape == (60, 80)


def test_to_pil(sheet):
    assert to_pil(sheet).mode == "RGB"
    assert to_pil(to_grayscale(sheet)).mode == "L"
