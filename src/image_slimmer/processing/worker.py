"""并发处理的工作单元。"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from image_slimmer.core.config import ConversionConfig
from image_slimmer.core.exceptions import ConversionError
from image_slimmer.core.models import CONVERTED, ConversionOutcome, WorkItem
from image_slimmer.processing.converter import convert_item

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ConversionTask:
    """描述单个图片转换任务。"""

    item: WorkItem
    config: ConversionConfig


def run_task(task: ConversionTask) -> ConversionOutcome:
    """在工作进程中执行完整的转换流程，单个文件的失败只体现在返回结果中。"""

    try:
        profile = convert_item(task.item, task.config)
    except ConversionError as exc:
        LOGGER.debug("转换失败 %s: %s", task.item.input_path, exc)
        return ConversionOutcome(item=task.item, status=exc.status, message=str(exc))

    return ConversionOutcome(item=task.item, status=CONVERTED, output_profile=profile)
