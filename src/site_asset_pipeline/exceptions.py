"""素材流水线异常处理模块。

定义统一的异常类和错误处理机制，包含图像操作的异常处理装饰器。
"""

from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import TypeVar

from PIL.Image import DecompressionBombError, UnidentifiedImageError

from .models.classification import ImageCategory
from .models.results import AssetStatus, ProcessedAsset
from .utils.logging_helpers import get_logger
from .utils.message_formatter import MessageFormatter


logger = get_logger()
T = TypeVar("T")


# 统一的异常类型
class PipelineError(Exception):
    """流水线错误基类"""

    def __init__(self, message: str, input_path: Path | None = None):
        super().__init__(message)
        self.message = message
        self.input_path = input_path


class ValidationError(PipelineError):
    """参数或配置验证错误"""

    pass


class ProcessingError(PipelineError):
    """单个素材处理过程错误"""

    pass


class DecodeError(ProcessingError):
    """图像解码失败"""

    pass


class EncodeError(ProcessingError):
    """图像编码或写入失败"""

    pass


class UnsupportedFormatError(DecodeError):
    """无法识别的图像格式"""

    pass


def handle_image_errors(
    operation_name: str = "图像处理",
    error_cls: type[ProcessingError] = ProcessingError,
):
    """统一的图像处理异常处理装饰器

    Args:
        operation_name: 操作名称，用于日志记录
        error_cls: OSError、参数错误等映射到的异常类型
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except PipelineError:
                raise
            except UnidentifiedImageError as e:
                logger.debug(f"{operation_name} - 无法识别图像格式: {e}")
                raise UnsupportedFormatError(f"不支持的图像格式: {e}") from e
            except DecompressionBombError as e:
                logger.debug(f"{operation_name} - 图像过大: {e}")
                raise DecodeError(f"图像文件过大，可能存在安全风险: {e}") from e
            except OSError as e:
                logger.debug(f"{operation_name} - 文件操作失败: {e}")
                raise error_cls(f"文件操作失败: {e}") from e
            except (ValueError, TypeError) as e:
                logger.debug(f"{operation_name} - 参数错误: {e}")
                raise error_cls(f"参数错误: {e}") from e
            except Exception as e:
                logger.debug(f"{operation_name} - 未知错误: {e}")
                raise error_cls(f"处理失败: {e}") from e

        return wrapper

    return decorator


class ErrorHandler:
    """统一错误处理器

    把素材级异常转换为失败结果并记录日志，保证批处理继续进行。
    """

    @staticmethod
    def _log_error(
        operation: str, path: Path, error: Exception, level: str = "error"
    ) -> None:
        """标准化的错误日志记录

        Args:
            operation: 操作名称（如"图像解码"、"图像编码"等）
            path: 相关文件路径
            error: 异常对象
            level: 日志级别 ("error", "warning", "debug")
        """
        log_msg = MessageFormatter.format_error(operation, path, error)
        getattr(logger, level, logger.error)(log_msg)

    @staticmethod
    def _create_failed_asset(
        source_path: Path,
        error_msg: str,
        output_path: Path | None = None,
        category: ImageCategory | None = None,
    ) -> ProcessedAsset:
        """创建标准化的失败结果"""
        try:
            original_size = source_path.stat().st_size
        except OSError:
            original_size = 0

        return ProcessedAsset(
            source_path=source_path,
            output_path=output_path or source_path,
            status=AssetStatus.FAILED,
            category=category,
            original_size=original_size,
            success=False,
            error=error_msg,
        )

    @staticmethod
    def handle_with_context(
        error: Exception,
        source_path: Path,
        operation: str = "素材处理",
        output_path: Path | None = None,
        category: ImageCategory | None = None,
        log_level: str = "error",
    ) -> ProcessedAsset:
        """记录错误并返回失败结果

        Returns:
            ProcessedAsset: 状态为 failed 的结果
        """
        ErrorHandler._log_error(operation, source_path, error, log_level)
        return ErrorHandler._create_failed_asset(
            source_path=source_path,
            error_msg=f"{operation}: {error}",
            output_path=output_path,
            category=category,
        )

    @staticmethod
    def handle_asset_error(
        error: Exception,
        source_path: Path,
        operation: str = "素材处理",
        output_path: Path | None = None,
        category: ImageCategory | None = None,
    ) -> ProcessedAsset:
        """素材级错误分发，按异常类型选择日志级别与描述"""
        match error:
            case UnsupportedFormatError() as ufe:
                return ErrorHandler.handle_with_context(
                    ufe, source_path, f"{operation} - 格式无法识别", output_path, category
                )
            case DecodeError() as de:
                return ErrorHandler.handle_with_context(
                    de, source_path, f"{operation} - 解码错误", output_path, category
                )
            case EncodeError() as ee:
                return ErrorHandler.handle_with_context(
                    ee, source_path, f"{operation} - 编码错误", output_path, category
                )
            case FileNotFoundError() as fnfe:
                return ErrorHandler.handle_with_context(
                    fnfe,
                    source_path,
                    operation,
                    output_path,
                    category,
                    log_level="warning",
                )
            case PermissionError() as pe:
                return ErrorHandler.handle_with_context(
                    pe, source_path, f"{operation} - 权限错误", output_path, category
                )
            case OSError() as ose:
                return ErrorHandler.handle_with_context(
                    ose, source_path, f"{operation} - 系统错误", output_path, category
                )
            case _:
                return ErrorHandler.handle_with_context(
                    error, source_path, operation, output_path, category
                )
