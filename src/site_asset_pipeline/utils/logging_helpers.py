"""日志工具模块。

提供统一的日志记录功能，标准化日志格式和配置。
"""

import inspect
import logging
from logging.handlers import RotatingFileHandler

from ..config import LoggingDefaults


def get_logger(name: str | None = None) -> logging.Logger:
    """获取标准化配置的日志记录器。

    Args:
        name: 日志记录器名称，默认使用调用模块的 __name__

    Returns:
        logging.Logger: 配置好的日志记录器
    """
    if name is None:
        # 获取调用者的模块名
        frame = inspect.currentframe()
        if frame and frame.f_back:
            name = frame.f_back.f_globals.get("__name__", "unknown")
        else:
            name = "unknown"

    return logging.getLogger(name)


def configure_logging(
    settings: LoggingDefaults | None = None, verbose: bool = False
) -> None:
    """按配置初始化根日志记录器。

    Args:
        settings: 日志配置，默认读取全局配置
        verbose: 为 True 时强制使用 DEBUG 级别
    """
    if settings is None:
        from ..config import get_config

        settings = get_config().logging

    level = logging.DEBUG if verbose else getattr(logging, settings.LOG_LEVEL, None)
    if not isinstance(level, int):
        level = logging.INFO

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.ENABLE_FILE_LOGGING:
        handlers.append(
            RotatingFileHandler(
                settings.LOG_FILE_PATH,
                maxBytes=settings.LOG_FILE_MAX_SIZE,
                backupCount=settings.LOG_FILE_BACKUP_COUNT,
                encoding="utf-8",
            )
        )

    logging.basicConfig(
        level=level, format=settings.LOG_FORMAT, handlers=handlers, force=True
    )
