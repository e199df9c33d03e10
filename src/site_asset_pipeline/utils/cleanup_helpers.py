"""清理工具模块。

提供临时文件清理和资源管理功能。
"""

from pathlib import Path
from typing import Any

from .logging_helpers import get_logger


logger = get_logger()


class TempFileManager:
    """临时文件管理器

    编码先写入临时文件，成功后原子替换到目标路径；
    退出上下文时清理仍然存在的临时文件。
    """

    def __init__(self):
        self.temp_files: set[Path] = set()

    def temp_path_for(self, target: Path) -> Path:
        """为目标文件生成同目录下的临时路径并登记"""
        temp_path = target.with_name(f".{target.name}.tmp")
        self.register_temp_file(temp_path)
        return temp_path

    def register_temp_file(self, file_path: Path) -> None:
        """注册临时文件"""
        self.temp_files.add(file_path)

    def cleanup_temp_files(self) -> int:
        """清理所有注册的临时文件"""
        cleaned_count = 0
        for file_path in self.temp_files:
            try:
                if file_path.exists():
                    file_path.unlink()
                    cleaned_count += 1
                    logger.debug(f"已清理临时文件: {file_path}")
            except OSError as e:
                logger.warning(f"清理临时文件失败 {file_path}: {e}")

        self.temp_files.clear()
        return cleaned_count

    def __enter__(self):
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        del exc_type, exc_val, exc_tb
        self.cleanup_temp_files()
