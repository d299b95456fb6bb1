"""
loguru 日志配置
"""

import sys

from loguru import logger

from .config import Settings, get_settings


def configure_logging(settings: Settings | None = None, level: str | None = None) -> None:
    """配置 loguru 日志（输出到 stderr）"""
    settings = settings or get_settings()

    # 移除默认 handler
    logger.remove()

    # 添加控制台输出
    logger.add(
        sys.stderr,
        format=settings.log_format,
        level=level or settings.log_level,
        colorize=True,
    )
