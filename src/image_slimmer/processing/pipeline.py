"""处理流水线：扫描规划、顺序或并发执行转换、汇总失败。"""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Callable, Optional

from image_slimmer.core.config import JobConfig
from image_slimmer.core.exceptions import SetupError
from image_slimmer.core.models import BatchResult, ConversionOutcome
from image_slimmer.core.planner import plan_work_items, prepare_output_dirs, walk_input_tree
from image_slimmer.core.progress import ProgressUpdate
from image_slimmer.core.report import format_failure
from image_slimmer.processing.worker import ConversionTask, run_task

LOGGER = logging.getLogger(__name__)


ProgressCallback = Optional[Callable[[ProgressUpdate], None]]


def process_batch(job: JobConfig, progress_callback: ProgressCallback = None) -> BatchResult:
    """批量转换入口：规划任务、创建目录，再顺序或并发执行转换。

    单个文件的失败记录在结果中，不会中断批处理；只有启动阶段的
    SetupError 会向上抛出。
    """

    job.validate()

    try:
        job.output_root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise SetupError(f"无法创建输出目录: {job.output_root}") from exc

    LOGGER.info("开始扫描输入目录 %s", job.input_root)
    plan = plan_work_items(
        walk_input_tree(job.input_root),
        job.input_root,
        job.output_root,
        job.conversion.extension,
    )
    prepare_output_dirs(plan.pending)

    result = BatchResult(skipped=list(plan.existing))
    tasks = [ConversionTask(item=item, config=job.conversion) for item in plan.pending]
    total = len(tasks)

    if not tasks:
        _emit_progress(progress_callback, 0, 0, "没有需要转换的图片", status="done")
        return result

    _emit_progress(progress_callback, 0, total, "开始执行转换任务")

    if job.concurrent:
        _run_concurrent(job, tasks, result, progress_callback)
    else:
        _run_sequential(job, tasks, result, progress_callback)

    LOGGER.info("转换完成：成功 %d，失败 %d", len(result.converted), len(result.failed))
    _emit_progress(progress_callback, total, total, "处理完成", status="done")
    return result


def _run_sequential(
    job: JobConfig,
    tasks: list[ConversionTask],
    result: BatchResult,
    callback: ProgressCallback,
) -> None:
    total = len(tasks)
    for completed, task in enumerate(tasks, start=1):
        try:
            outcome = run_task(task)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("任务执行异常：%s", exc)
            outcome = ConversionOutcome(item=task.item, status="error-worker", message=str(exc))
        _collect(job, outcome, result, completed, total, callback)


def _run_concurrent(
    job: JobConfig,
    tasks: list[ConversionTask],
    result: BatchResult,
    callback: ProgressCallback,
) -> None:
    total = len(tasks)
    completed = 0
    with ProcessPoolExecutor(max_workers=job.max_workers) as executor:
        future_map = {executor.submit(run_task, task): task for task in tasks}
        for future in as_completed(future_map):
            task = future_map[future]
            try:
                outcome = future.result()
            except Exception as exc:  # noqa: BLE001
                LOGGER.exception("任务执行异常：%s", exc)
                outcome = ConversionOutcome(item=task.item, status="error-worker", message=str(exc))
            completed += 1
            _collect(job, outcome, result, completed, total, callback)


def _collect(
    job: JobConfig,
    outcome: ConversionOutcome,
    result: BatchResult,
    completed: int,
    total: int,
    callback: ProgressCallback,
) -> None:
    result.record(outcome)
    if outcome.ok:
        _emit_progress(callback, completed, total, outcome=outcome)
    else:
        message = format_failure(outcome, job.input_root)
        _emit_progress(callback, completed, total, message, status="failed", outcome=outcome)


def _emit_progress(
    callback: ProgressCallback,
    completed: int,
    total: int,
    message: Optional[str] = None,
    *,
    status: str = "running",
    outcome: Optional[ConversionOutcome] = None,
) -> None:
    if not callback:
        return
    callback(ProgressUpdate(total=total, completed=completed, message=message, status=status, outcome=outcome))
