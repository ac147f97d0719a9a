"""处理任务的配置模型。"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from image_slimmer.core.exceptions import InvalidConfigurationError

DEFAULT_OUTPUT_FORMAT = "avif"
DEFAULT_COLORFULNESS_THRESHOLD = 0.1


def normalize_extension(value: str) -> str:
    """去掉扩展名前导的点号，``.webp`` 与 ``webp`` 等价。"""

    return value.strip().lstrip(".")


@dataclass(slots=True)
class ConversionConfig:
    """单张图片的转换参数，整个批次共用一份。"""

    target_width: Optional[int] = None
    target_height: Optional[int] = None
    force_monochrome: bool = False
    aggressive_optimization: bool = False
    output_format: str = DEFAULT_OUTPUT_FORMAT
    colorfulness_threshold: float = DEFAULT_COLORFULNESS_THRESHOLD

    @property
    def extension(self) -> str:
        return normalize_extension(self.output_format)


@dataclass(slots=True)
class JobConfig:
    """单次批处理任务的配置集合。"""

    input_root: Path
    output_root: Path
    conversion: ConversionConfig = field(default_factory=ConversionConfig)
    max_workers: int = 1  # <= 1 时顺序执行

    @property
    def concurrent(self) -> bool:
        return self.max_workers > 1

    def validate(self) -> None:
        """检查配置项是否合法，不合法时抛出 InvalidConfigurationError。"""

        if self.max_workers < 1:
            raise InvalidConfigurationError(f"并发进程数量必须大于 0: {self.max_workers}")
        extension = self.conversion.extension
        if not extension:
            raise InvalidConfigurationError("输出扩展名不能为空")
        if any(sep and sep in extension for sep in (os.sep, os.altsep, "/")):
            raise InvalidConfigurationError(f"输出扩展名不能包含路径分隔符: {extension}")
        try:
            Path("output").with_suffix(f".{extension}")
        except ValueError as exc:
            raise InvalidConfigurationError(f"无效的输出扩展名: {extension}") from exc
        threshold = self.conversion.colorfulness_threshold
        if not 0.0 <= threshold <= 1.0:
            raise InvalidConfigurationError(f"彩色像素阈值必须位于 0~1 之间: {threshold}")
