"""消息格式化工具模块。

提供统一的进度消息、错误消息格式化功能。
进度消息的英文文本是对外约定的格式，消费方依赖其前缀解析。
"""

from pathlib import Path


class MessageFormatter:
    """统一的消息格式化器"""

    # 进度通道消息
    @staticmethod
    def total_file_count(count: int) -> str:
        return f"Total file count: {count}"

    @staticmethod
    def compress_complete(file_name: str) -> str:
        return f"Compress complete! File: {file_name}"

    @staticmethod
    def batch_complete() -> str:
        return "Compress complete!"

    @staticmethod
    def total_archive_count(count: int) -> str:
        return f"Total archive directory count: {count}"

    @staticmethod
    def archive_complete(archive_path: str | Path) -> str:
        return f"7z archiving complete: {archive_path}"

    @staticmethod
    def archiving_complete() -> str:
        return "Archiving Complete!"

    # 错误消息
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
    def file_already_exists(file_name: str) -> str:
        return f"目标文件已存在: {file_name}"

    @staticmethod
    def compressed_file_already_exists(file_name: str) -> str:
        return f"压缩文件已存在: {file_name}"

    @staticmethod
    def conversion_copied(file_name: str, error: Exception) -> str:
        return f"无法将 {file_name} 转换为 JPEG，已原样复制: {error}"

    @staticmethod
    def temp_may_be_original(file_name: str) -> str:
        return f"无法删除 {file_name}，它可能是原始文件"

    @staticmethod
    def archive_already_exists(archive_path: str | Path) -> str:
        return f"归档文件已存在，跳过: {archive_path}"

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
    def format_error(operation: str, path: str | Path, error: Exception) -> str:
        """格式化通用错误消息"""
        return f"{operation}失败 [{path}]: {error}"
