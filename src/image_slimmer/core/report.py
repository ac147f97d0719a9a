"""失败报告与汇总信息。"""

from __future__ import annotations

from pathlib import Path

from image_slimmer.core.models import BatchResult, ConversionOutcome


def relative_label(path: Path, root: Path) -> str:
    """返回相对输入根目录的路径，无法计算时退回完整路径。"""

    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


def format_failure(outcome: ConversionOutcome, input_root: Path) -> str:
    label = relative_label(outcome.item.input_path, input_root)
    return f"{label}: {outcome.message or outcome.status}"


def failure_lines(result: BatchResult, input_root: Path) -> list[str]:
    """按收集顺序返回每个失败文件的一行描述。"""

    return [format_failure(outcome, input_root) for outcome in result.failed]


def summary_line(result: BatchResult) -> str:
    return (
        f"处理完成：转换 {len(result.converted)} 张，"
        f"跳过 {len(result.skipped)} 张，失败 {len(result.failed)} 张。"
    )
