"""日志工具。"""

from __future__ import annotations

import logging


def setup_logging(level: int = logging.INFO) -> None:
    """初始化项目日志配置，进程名用于区分并发工作进程。"""

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(processName)s] %(levelname)s %(name)s: %(message)s",
    )
    # Pillow 的插件加载日志在 DEBUG 级别下过于冗长。
    logging.getLogger("PIL").setLevel(max(level, logging.INFO))
