"""色彩分类器单元测试。"""

from __future__ import annotations

import numpy as np
import pytest
from PIL import Image

from image_slimmer.core.exceptions import ClassifyError
from image_slimmer.core.models import ColorProfile
from image_slimmer.processing.classifier import (
    colorfulness_ratio,
    colorfulness_threshold,
    native_profile,
    pixel_saturation,
    pixel_value,
)


def test_value_and_saturation_of_reference_pixel() -> None:
    assert pixel_value(100, 150, 200) == 200
    assert pixel_saturation(100, 150, 200) == 127
    assert pixel_value(100, 150, 200) * pixel_saturation(100, 150, 200) == 25400


def test_saturation_handles_black_and_ties() -> None:
    assert pixel_saturation(0, 0, 0) == 0
    assert pixel_value(200, 200, 100) == 200
    assert pixel_saturation(80, 80, 80) == 0


def test_threshold_fraction_is_truncated() -> None:
    assert colorfulness_threshold(0.1) == 6553
    assert colorfulness_threshold(0.0) == 0
    assert colorfulness_threshold(1.0) == 65536


@pytest.mark.parametrize("mode", ["1", "L", "LA", "I", "I;16"])
def test_luma_modes_are_grayscale(mode: str) -> None:
    assert native_profile(Image.new(mode, (4, 4))) is ColorProfile.GRAYSCALE


@pytest.mark.parametrize("mode", ["RGB", "RGBA", "P", "CMYK", "YCbCr"])
def test_color_channel_modes_are_color(mode: str) -> None:
    assert native_profile(Image.new(mode, (4, 4))) is ColorProfile.COLOR


def test_unrecognized_mode_is_an_error() -> None:
    with pytest.raises(ClassifyError):
        native_profile(Image.new("F", (4, 4)))


def test_ratio_is_zero_for_neutral_pixels() -> None:
    image = Image.new("RGB", (8, 8), (120, 120, 120))
    assert colorfulness_ratio(image, 0.1) == 0.0


def test_ratio_counts_saturated_pixels() -> None:
    image = Image.new("RGB", (8, 8), (120, 120, 120))
    image.paste((255, 0, 0), (0, 0, 2, 2))

    assert colorfulness_ratio(image, 0.1) == pytest.approx(4 / 64)


def test_ratio_uses_strict_threshold_comparison() -> None:
    image = Image.new("RGB", (3, 3), (100, 150, 200))

    # saturation*value == 25400
    assert colorfulness_ratio(image, 0.38) == 1.0
    assert colorfulness_ratio(image, 0.4) == 0.0


def test_ratio_is_invariant_to_pixel_order() -> None:
    image = Image.new("RGB", (10, 6), (30, 30, 30))
    image.paste((0, 200, 50), (0, 0, 3, 6))
    image.paste((250, 250, 10), (7, 2, 10, 4))

    ratio = colorfulness_ratio(image, 0.1)
    assert 0.0 < ratio <= 1.0
    assert colorfulness_ratio(image.transpose(Image.Transpose.FLIP_LEFT_RIGHT), 0.1) == ratio
    assert colorfulness_ratio(image.transpose(Image.Transpose.ROTATE_90), 0.1) == ratio


def test_ratio_matches_per_pixel_rule() -> None:
    rng = np.random.default_rng(2024)
    pixels = rng.integers(0, 256, size=(12, 9, 3), dtype=np.uint8)
    image = Image.fromarray(pixels)

    threshold = colorfulness_threshold(0.1)
    expected = sum(
        1
        for r, g, b in pixels.reshape(-1, 3).tolist()
        if pixel_saturation(r, g, b) * pixel_value(r, g, b) > threshold
    )

    assert colorfulness_ratio(image, 0.1) == pytest.approx(expected / (12 * 9))


def test_ratio_ignores_alpha_channel() -> None:
    image = Image.new("RGBA", (4, 4), (90, 90, 90, 0))
    assert colorfulness_ratio(image, 0.1) == 0.0


def test_empty_image_cannot_be_classified() -> None:
    with pytest.raises(ClassifyError):
        colorfulness_ratio(Image.new("RGB", (0, 0)), 0.1)
