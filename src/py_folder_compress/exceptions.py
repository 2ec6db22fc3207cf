"""文件夹压缩异常处理模块。

定义统一的异常类和错误处理机制，包含编解码异常转换装饰器。
除 EnumerationError 与 ValidationError 外，其余异常都只影响单个文件，
在工作线程边界被捕获并转换为 FileResult。
"""

from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import TypeVar

from PIL.Image import DecompressionBombError, UnidentifiedImageError

from .models.compression_result import FileResult
from .utils.logging_helpers import get_logger
from .utils.message_formatter import MessageFormatter


logger = get_logger()
T = TypeVar("T")


# 统一的异常类型
class CompressionError(Exception):
    """压缩相关错误基类"""

    kind: str = "Compression"

    def __init__(self, message: str, input_path: Path | None = None):
        super().__init__(message)
        self.message = message
        self.input_path = input_path


class ValidationError(CompressionError):
    """调用参数无效，在任何处理开始前抛出"""

    kind = "Validation"


class EnumerationError(CompressionError):
    """根目录无法枚举，整个调用失败"""

    def __init__(
        self, message: str, input_path: Path | None = None, kind: str = "IoError"
    ):
        super().__init__(message, input_path)
        self.kind = kind


class AlreadyExistsError(CompressionError):
    """目标位置已存在同名文件，绝不覆盖"""

    kind = "AlreadyExists"


class ConversionError(CompressionError):
    """非 JPEG 文件转换失败，原文件已被原样复制到目标目录"""

    kind = "AbortToCopy"

    def __init__(
        self,
        message: str,
        input_path: Path | None = None,
        copied_path: Path | None = None,
    ):
        super().__init__(message, input_path)
        self.copied_path = copied_path


class DecodeError(CompressionError):
    kind = "DecodeError"


class ResizeError(CompressionError):
    kind = "ResizeError"


class EncodeError(CompressionError):
    kind = "EncodeError"


class FileIOError(CompressionError):
    """目录创建或文件写入失败"""

    kind = "IoError"


class TempCleanupError(CompressionError):
    """转换产生的临时 JPEG 未通过删除前的同名检查，保留原处"""

    kind = "NotFound"


class ChannelSendError(CompressionError):
    """进度通道的接收端已关闭"""

    kind = "ChannelSend"


class ArchiveError(CompressionError):
    """外部归档程序执行失败"""

    kind = "Archive"


def handle_codec_errors(
    operation_name: str, error_cls: type[CompressionError]
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """统一的编解码异常处理装饰器

    将 Pillow / 系统异常转换为指定的单文件异常类型，已是
    CompressionError 的异常原样抛出。

    Args:
        operation_name: 操作名称，用于日志记录
        error_cls: 转换后的异常类型
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except CompressionError:
                raise
            except UnidentifiedImageError as e:
                logger.debug(f"{operation_name} - 无法识别图像格式: {e}")
                raise error_cls(f"{operation_name}失败，无法识别图像格式: {e}") from e
            except DecompressionBombError as e:
                logger.debug(f"{operation_name} - 图像过大: {e}")
                raise error_cls(f"{operation_name}失败，图像文件过大: {e}") from e
            except Exception as e:
                logger.debug(f"{operation_name} - {type(e).__name__}: {e}")
                raise error_cls(f"{operation_name}失败: {e}") from e

        return wrapper

    return decorator


class ErrorHandler:
    """统一错误处理器

    把工作线程中捕获的异常按分类记录日志，并转换为失败结果。
    """

    @staticmethod
    def _log_error(
        operation: str, path: Path, error: Exception, level: str = "error"
    ) -> None:
        """标准化的错误日志记录

        Args:
            operation: 操作名称（如"图像压缩"、"目录归档"等）
            path: 相关文件路径
            error: 异常对象
            level: 日志级别 ("error", "warning", "debug")
        """
        log_msg = MessageFormatter.format_error(operation, path, error)
        getattr(logger, level, logger.error)(log_msg)

    @staticmethod
    def error_kind(error: Exception) -> str:
        """获取异常的分类名称"""
        match error:
            case CompressionError():
                return error.kind
            case FileNotFoundError():
                return "NotFound"
            case OSError():
                return "IoError"
            case _:
                return type(error).__name__

    @staticmethod
    def to_result(
        error: Exception,
        input_path: Path,
        operation: str = "图像压缩",
        output_path: Path | None = None,
    ) -> FileResult:
        """将单文件异常记录日志并转换为失败的 FileResult

        Args:
            error: 异常对象
            input_path: 输入文件路径
            operation: 操作名称
            output_path: 输出文件路径（可选）

        Returns:
            FileResult: 标准化的失败结果
        """
        match error:
            case AlreadyExistsError() | TempCleanupError():
                ErrorHandler._log_error(operation, input_path, error, "warning")
            case ConversionError() as ce:
                ErrorHandler._log_error(operation, input_path, error, "warning")
                output_path = output_path or ce.copied_path
            case CompressionError():
                ErrorHandler._log_error(operation, input_path, error, "error")
            case PermissionError():
                ErrorHandler._log_error(
                    f"{operation} - 权限错误", input_path, error, "error"
                )
            case _:
                ErrorHandler._log_error(operation, input_path, error, "error")

        try:
            original_size = input_path.stat().st_size if input_path.exists() else 0
        except OSError:
            original_size = 0

        return FileResult(
            input_path=input_path,
            output_path=output_path,
            original_size=original_size,
            success=False,
            error=str(error),
            error_kind=ErrorHandler.error_kind(error),
        )
