"""命令行入口。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)

from image_slimmer.core.config import DEFAULT_COLORFULNESS_THRESHOLD, DEFAULT_OUTPUT_FORMAT, ConversionConfig, JobConfig
from image_slimmer.core.exceptions import SetupError
from image_slimmer.core.progress import ProgressUpdate
from image_slimmer.core.report import failure_lines, summary_line
from image_slimmer.processing.pipeline import process_batch
from image_slimmer.utils.logging import setup_logging

app = typer.Typer(help="批量缩放图片，并按需转换为灰度以减小输出体积。")


def _build_progress_callback(progress: Progress, *, report_failures: bool):
    task_id: Optional[int] = None

    def callback(update: ProgressUpdate) -> None:
        nonlocal task_id
        if update.total == 0:
            return
        if task_id is None:
            task_id = progress.add_task("转换图片", total=update.total)
        progress.update(task_id, completed=update.completed)
        if report_failures and update.status == "failed" and update.message:
            typer.echo(update.message, err=True)

    return callback


@app.command("run")
def run_cli(  # noqa: PLR0913
    input_dir: Path = typer.Option(
        ...,
        "--input",
        "-i",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        help="输入目录",
    ),
    output_dir: Path = typer.Option(..., "--output", "-o", help="输出目录"),
    width: Optional[int] = typer.Option(None, "--width", "-w", min=0, help="输出宽度，默认沿用原图"),
    height: Optional[int] = typer.Option(None, "--height", "-h", min=0, help="输出高度，默认沿用原图"),
    ext: str = typer.Option(DEFAULT_OUTPUT_FORMAT, "--ext", "-e", help="输出扩展名（决定输出格式）"),
    force_monochrome: bool = typer.Option(False, "--force-monochrome", help="强制输出灰度图"),
    aggressive_optimization: bool = typer.Option(
        False, "--aggressive-optimization", help="彩色原图中不含彩色像素时也输出灰度图"
    ),
    colorfulness_threshold: float = typer.Option(
        DEFAULT_COLORFULNESS_THRESHOLD,
        "--colorfulness-threshold",
        min=0.0,
        max=1.0,
        help="判定彩色像素的 saturation*value 阈值比例",
    ),
    max_workers: int = typer.Option(1, "--workers", "-j", min=1, help="并发进程数量，1 为顺序执行"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出调试日志"),
) -> None:
    """执行批量转换。"""

    setup_logging(logging.DEBUG if verbose else logging.INFO)
    logging.getLogger(__name__).debug("CLI 参数解析完成")

    job = JobConfig(
        input_root=input_dir,
        output_root=output_dir.expanduser().resolve(),
        conversion=ConversionConfig(
            target_width=width,
            target_height=height,
            force_monochrome=force_monochrome,
            aggressive_optimization=aggressive_optimization,
            output_format=ext,
            colorfulness_threshold=colorfulness_threshold,
        ),
        max_workers=max_workers,
    )

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        TimeRemainingColumn(),
    )

    try:
        with progress:
            result = process_batch(
                job,
                progress_callback=_build_progress_callback(progress, report_failures=job.concurrent),
            )
    except SetupError as exc:
        typer.echo(f"错误：{exc}", err=True)
        raise typer.Exit(code=1) from exc

    if not job.concurrent:
        for line in failure_lines(result, job.input_root):
            typer.echo(line, err=True)

    typer.echo(summary_line(result))


if __name__ == "__main__":
    app()
