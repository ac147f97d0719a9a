"""输出格式解析与原子写入。"""

from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path

from PIL import Image

from image_slimmer.core.exceptions import ImageEncodeError, ImageWriteError

LOGGER = logging.getLogger(__name__)

SAVE_PARAMS = {
    "JPEG": {"quality": 95, "optimize": True},
    "PNG": {"optimize": True},
    "WEBP": {"quality": 90},
    "AVIF": {"quality": 80},
}

TEMP_SUFFIX = ".part"


def resolve_output_format(destination: Path) -> str:
    """根据扩展名查找 Pillow 中可用于写入的格式名称。"""

    suffix = destination.suffix.lower()
    image_format = Image.registered_extensions().get(suffix)
    if not image_format or image_format not in Image.SAVE:
        raise ImageEncodeError(f"不支持的输出格式: {suffix or destination.name}")
    return image_format


def save_image(image: Image.Image, destination: Path) -> None:
    """将 PIL Image 写入磁盘。

    先写入同目录下的临时文件，成功后再重命名为目标文件，
    失败时删除临时文件，避免残缺文件被当作已完成的转换。
    临时文件按普通方式创建，最终文件权限遵循 umask。
    """

    image_format = resolve_output_format(destination)
    save_params = SAVE_PARAMS.get(image_format, {})
    temp_path = destination.with_name(f".{destination.name}.{uuid.uuid4().hex}{TEMP_SUFFIX}")

    try:
        image.save(temp_path, format=image_format, **save_params)
        os.replace(temp_path, destination)
    except ValueError as exc:
        _discard(temp_path)
        raise ImageEncodeError(f"编码失败 ({image_format}): {exc}") from exc
    except OSError as exc:
        _discard(temp_path)
        raise ImageWriteError(f"写入文件失败: {destination}: {exc}") from exc


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        LOGGER.warning("无法删除临时文件 %s: %s", path, exc)