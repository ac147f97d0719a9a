"""图片读取与解码。"""

from __future__ import annotations

import io
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from image_slimmer.core.exceptions import ImageDecodeError, ImageReadError

LOGGER = logging.getLogger(__name__)


def read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise ImageReadError(f"无法读取文件: {exc.strerror or exc}") from exc


def decode_image(content: bytes) -> Image.Image:
    """从内存缓冲区解码图片，格式由内容自动识别。

    返回值为完全加载的 Image 对象，调用者负责关闭。
    """

    try:
        with Image.open(io.BytesIO(content)) as img:
            img.load()
            return img.copy()
    except UnidentifiedImageError as exc:
        raise ImageDecodeError("无法识别的图像格式") from exc
    except Image.DecompressionBombError as exc:
        raise ImageDecodeError(f"图像尺寸超出限制: {exc}") from exc
    except (OSError, ValueError, SyntaxError) as exc:
        raise ImageDecodeError(f"图像解码失败: {exc}") from exc


def load_image(path: Path) -> Image.Image:
    content = read_bytes(path)
    LOGGER.debug("读取 %s (%d 字节)", path, len(content))
    return decode_image(content)
