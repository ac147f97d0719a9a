"""转换决策：缩放、判定输出色彩类型并写出结果。"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
from PIL import Image

from image_slimmer.core.config import ConversionConfig
from image_slimmer.core.exceptions import ClassifyError, ResizeError
from image_slimmer.core.models import ColorProfile, WorkItem
from image_slimmer.core.output_manager import save_image
from image_slimmer.processing.classifier import colorfulness_ratio, native_profile
from image_slimmer.processing.image_loader import load_image

LOGGER = logging.getLogger(__name__)

SIXTEEN_BIT_MODES = frozenset({"I;16", "I;16L", "I;16B", "I;16N"})


def target_size(image: Image.Image, config: ConversionConfig) -> tuple[int, int]:
    """未指定的宽高分别沿用源图尺寸。"""

    width, height = image.size
    return (
        config.target_width if config.target_width is not None else width,
        config.target_height if config.target_height is not None else height,
    )


def resize_image(image: Image.Image, width: int, height: int) -> Image.Image:
    """按目标宽高精确缩放（Lanczos），不保持宽高比。"""

    if width <= 0 or height <= 0:
        raise ResizeError(f"目标尺寸必须大于 0: {width}x{height}")

    if image.size == (width, height):
        return image.copy()

    try:
        return _resizable(image).resize((width, height), Image.LANCZOS)
    except (ValueError, OSError) as exc:
        raise ResizeError(f"缩放失败 ({image.mode} {image.size} -> {width}x{height}): {exc}") from exc


def _resizable(image: Image.Image) -> Image.Image:
    """调色板、二值与 16 位灰度图先转换到可用 Lanczos 滤波的模式，色彩类型不变。"""

    if image.mode == "P":
        return image.convert("RGBA" if "transparency" in image.info else "RGB")
    if image.mode == "PA":
        return image.convert("RGBA")
    if image.mode == "1":
        return image.convert("L")
    if image.mode in SIXTEEN_BIT_MODES:
        return image.convert("I")
    return image


def decide_profile(image: Image.Image, config: ConversionConfig) -> ColorProfile:
    """按优先级决定输出色彩类型：强制灰度 > 原生灰度 > 积极优化判定 > 彩色。"""

    if config.force_monochrome:
        return ColorProfile.GRAYSCALE

    if native_profile(image) is ColorProfile.GRAYSCALE:
        return ColorProfile.GRAYSCALE

    if config.aggressive_optimization:
        ratio = colorfulness_ratio(image, config.colorfulness_threshold)
        LOGGER.debug("彩色像素比例 %.6f", ratio)
        if ratio == 0:
            return ColorProfile.GRAYSCALE

    return ColorProfile.COLOR


def render_profile(image: Image.Image, profile: ColorProfile) -> Image.Image:
    """生成对应色彩类型的像素缓冲：灰度为 L，彩色为 RGB，Alpha 丢弃。"""

    try:
        if profile is ColorProfile.COLOR:
            return image.convert("RGB")
        if image.mode == "I" or image.mode in SIXTEEN_BIT_MODES:
            return _sixteen_bit_to_luma(image)
        return image.convert("L")
    except ValueError as exc:
        raise ClassifyError(f"无法从 {image.mode} 转换为 {profile.value}") from exc


def _sixteen_bit_to_luma(image: Image.Image) -> Image.Image:
    array = np.asarray(image).astype(np.int64)
    scaled = np.clip(array >> 8, 0, 255).astype(np.uint8)
    return Image.fromarray(scaled)


def convert_item(item: WorkItem, config: ConversionConfig) -> ColorProfile:
    """完整执行单个文件的转换流程，返回实际写出的色彩类型。"""

    source = load_image(item.input_path)
    resized: Optional[Image.Image] = None
    rendered: Optional[Image.Image] = None

    try:
        width, height = target_size(source, config)
        resized = resize_image(source, width, height)
        profile = decide_profile(resized, config)
        rendered = render_profile(resized, profile)
        save_image(rendered, item.output_path)
    finally:
        _close_if_needed(source, resized, rendered)

    LOGGER.debug("已写出 %s (%s)", item.output_path, profile.value)
    return profile


def _close_if_needed(*images: Optional[Image.Image]) -> None:
    for img in images:
        if img is not None:
            img.close()
