"""色彩分类：原生色彩类型判定与彩色像素比例计算。"""

from __future__ import annotations

import numpy as np
from PIL import Image

from image_slimmer.core.exceptions import ClassifyError
from image_slimmer.core.models import ColorProfile

GRAYSCALE_MODES = frozenset({"1", "L", "LA", "La", "I", "I;16", "I;16L", "I;16B", "I;16N"})
COLOR_MODES = frozenset({"RGB", "RGBA", "RGBa", "RGBX", "P", "PA", "CMYK", "YCbCr", "LAB", "HSV"})


def native_profile(image: Image.Image) -> ColorProfile:
    """根据图像原生的通道布局判定色彩类型。

    仅有亮度通道（可带 Alpha）视为灰度，带有独立色彩通道的视为彩色，
    其余未知模式直接报错。
    """

    if image.mode in GRAYSCALE_MODES:
        return ColorProfile.GRAYSCALE
    if image.mode in COLOR_MODES:
        return ColorProfile.COLOR
    raise ClassifyError(f"无法识别的像素格式: {image.mode}")


def pixel_value(r: int, g: int, b: int) -> int:
    return max(r, g, b)


def pixel_saturation(r: int, g: int, b: int) -> int:
    """HSV 风格的饱和度，取值 0~255，小数部分截断。"""

    value = pixel_value(r, g, b)
    if value == 0:
        return 0
    return 255 * (value - min(r, g, b)) // value


def colorfulness_threshold(fraction: float) -> int:
    """将 0~1 的比例换算为 saturation*value 的整数阈值。"""

    return int(65536 * fraction)


def colorfulness_ratio(image: Image.Image, fraction: float) -> float:
    """计算 saturation*value 超过阈值的像素所占比例。"""

    width, height = image.size
    total = width * height
    if total == 0:
        raise ClassifyError("图像不包含任何像素")

    try:
        rgb = image if image.mode == "RGB" else image.convert("RGB")
    except ValueError as exc:
        raise ClassifyError(f"无法转换为 RGB: {image.mode}") from exc

    pixels = np.asarray(rgb, dtype=np.int64).reshape(-1, 3)
    value = pixels.max(axis=1)
    spread = value - pixels.min(axis=1)
    saturation = np.where(value > 0, 255 * spread // np.maximum(value, 1), 0)

    colorful = np.count_nonzero(saturation * value > colorfulness_threshold(fraction))
    return colorful / total
