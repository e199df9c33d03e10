"""工具模块包。

提供纯工具函数，不包含业务逻辑。
"""

from .cleanup_helpers import TempFileManager
from .file_helpers import (
    discover_industry_dirs,
    find_image_files,
    find_template_files,
    read_image_size,
)
from .logging_helpers import configure_logging, get_logger
from .message_formatter import MessageFormatter
from .naming_helpers import FileNamingStrategy


__all__ = [
    "FileNamingStrategy",
    "MessageFormatter",
    "TempFileManager",
    "configure_logging",
    "discover_industry_dirs",
    "find_image_files",
    "find_template_files",
    "get_logger",
    "read_image_size",
]
