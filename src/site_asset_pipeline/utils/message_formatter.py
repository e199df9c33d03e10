"""消息格式化工具模块。

提供统一的错误消息、跳过消息和控制台提示的格式化功能。
"""

from pathlib import Path
from typing import Any


class MessageFormatter:
    """统一的消息格式化器"""

    @staticmethod
    def file_not_found(file_path: str | Path) -> str:
        """文件不存在错误消息"""
        return f"文件不存在: {file_path}"

    @staticmethod
    def directory_not_found(directory: str | Path) -> str:
        """目录不存在错误消息"""
        return f"目录不存在: {directory}"

    @staticmethod
    def path_not_directory(path: str | Path) -> str:
        """路径不是目录错误消息"""
        return f"路径不是目录: {path}"

    @staticmethod
    def permission_error(path: str | Path, operation: str = "访问") -> str:
        """权限错误消息"""
        return f"权限错误，无法{operation}: {path}"

    @staticmethod
    def operation_failed(
        operation: str, target: str | Path, error: Exception | None = None
    ) -> str:
        """操作失败消息"""
        msg = f"{operation}失败: {target}"
        if error:
            msg += f" - {error}"
        return msg

    @staticmethod
    def validation_error(field: str, value: Any, reason: str | None = None) -> str:
        """参数验证错误消息"""
        msg = f"参数验证失败 - {field}: {value}"
        if reason:
            msg += f" ({reason})"
        return msg

    @staticmethod
    def format_error(operation: str, path: str | Path, error: Exception) -> str:
        """格式化通用错误消息"""
        return f"{operation}失败 [{path}]: {error}"

    @staticmethod
    def skipped(name: str | Path, reason: str) -> str:
        """跳过文件消息"""
        return f"跳过 {name}: {reason}"

    @staticmethod
    def written(source: str | Path, output: str | Path) -> str:
        """生成文件消息"""
        return f"已生成 {output} (来源 {source})"

    @staticmethod
    def drop_zone_instructions(drop_zone: Path, industries: tuple[str, ...]) -> str:
        """投放区首次创建时的使用说明"""
        examples = "\n".join(f"  - {industry}-hero-main.jpg" for industry in industries)
        return (
            f"已创建投放区目录: {drop_zone}\n"
            "请将原始图片放入该目录后重新运行，文件名格式为 "
            "<industry>-<section>-<description>.<ext>，例如:\n"
            f"{examples}"
        )
