"""文件扫描、输出路径映射与去重规划。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator

from image_slimmer.core.exceptions import PathMappingError, SetupError
from image_slimmer.core.models import WorkItem, WorkPlan

LOGGER = logging.getLogger(__name__)

# 扩展名区分大小写，仅接受小写形式。
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png"}


def walk_input_tree(root: Path) -> Iterator[Path]:
    """递归遍历输入目录下的所有文件，按路径排序以保证发现顺序稳定。"""

    if not root.is_dir():
        LOGGER.warning("输入目录不存在或不是目录：%s", root)
        return

    for candidate in sorted(root.rglob("*")):
        if candidate.is_file():
            yield candidate


def is_supported_image(path: Path) -> bool:
    return path.suffix in IMAGE_EXTENSIONS


def map_output_path(path: Path, input_root: Path, output_root: Path, extension: str) -> Path:
    """将输入路径映射为输出目录下的同结构路径，并替换扩展名。"""

    try:
        relative = path.relative_to(input_root)
    except ValueError as exc:
        raise PathMappingError(f"{path} 不在输入目录 {input_root} 之下") from exc

    return (output_root / relative).with_suffix(f".{extension}")


def plan_work_items(
    paths: Iterable[Path],
    input_root: Path,
    output_root: Path,
    extension: str,
) -> WorkPlan:
    """筛选候选文件并生成转换任务，输出已存在的任务视为已完成。

    输出路径在批次内唯一，后发现的重复项记入 ``duplicates`` 并丢弃。
    """

    plan = WorkPlan()
    claimed: dict[Path, Path] = {}

    for path in paths:
        if not is_supported_image(path):
            continue

        try:
            output_path = map_output_path(path, input_root, output_root, extension)
        except PathMappingError as exc:
            LOGGER.debug("忽略无法映射的文件：%s", exc)
            continue

        item = WorkItem(input_path=path, output_path=output_path)

        # 同名不同扩展名（photo.jpg / photo.png）会映射到同一输出，只保留先发现的一个。
        if output_path in claimed:
            LOGGER.warning("输出路径重复，忽略 %s（已由 %s 占用）：%s", path, claimed[output_path], output_path)
            plan.duplicates.append(item)
            continue
        claimed[output_path] = path

        if output_path.exists():
            plan.existing.append(item)
        else:
            plan.pending.append(item)

    LOGGER.info("待转换 %d 个文件，已存在 %d 个", len(plan.pending), len(plan.existing))
    return plan


def prepare_output_dirs(items: Iterable[WorkItem]) -> set[Path]:
    """在转换开始前一次性创建全部输出目录。"""

    parents = {item.output_path.parent for item in items}
    for parent in sorted(parents):
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise SetupError(f"无法创建输出目录: {parent}") from exc
    return parents
