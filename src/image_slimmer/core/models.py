"""核心数据模型定义。"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

CONVERTED = "converted"


class ColorProfile(str, Enum):
    """图片的色彩表示：灰度（单通道）或彩色（三通道）。"""

    GRAYSCALE = "grayscale"
    COLOR = "color"


@dataclass(frozen=True)
class WorkItem:
    """一个输入文件到输出文件的转换任务。"""

    input_path: Path
    output_path: Path


@dataclass(slots=True)
class WorkPlan:
    """规划阶段的产出：待转换、已存在（跳过）与输出路径重复（丢弃）的任务。"""

    pending: list[WorkItem] = field(default_factory=list)
    existing: list[WorkItem] = field(default_factory=list)
    duplicates: list[WorkItem] = field(default_factory=list)


@dataclass(slots=True)
class ConversionOutcome:
    """记录单个文件的处理结果（用于报告/日志）。"""

    item: WorkItem
    status: str
    output_profile: Optional[ColorProfile] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == CONVERTED


@dataclass(slots=True)
class BatchResult:
    """批处理的最终产出。"""

    converted: list[ConversionOutcome] = field(default_factory=list)
    failed: list[ConversionOutcome] = field(default_factory=list)
    skipped: list[WorkItem] = field(default_factory=list)

    def record(self, outcome: ConversionOutcome) -> None:
        if outcome.ok:
            self.converted.append(outcome)
        else:
            self.failed.append(outcome)

    @property
    def attempted(self) -> int:
        return len(self.converted) + len(self.failed)
