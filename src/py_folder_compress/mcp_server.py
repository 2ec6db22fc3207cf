"""文件夹压缩 MCP 服务器。

把文件夹压缩和目录归档暴露为 MCP 工具，工具返回进度消息和逐文件结果。
"""

from pathlib import Path
from typing import Any

from fastmcp import FastMCP

from .engine.archiver import DirectoryArchiver
from .engine.events import CollectingSink
from .engine.folder_compressor import FolderCompressor
from .engine.progress import create_channel
from .exceptions import CompressionError
from .models.compression_result import BatchResult
from .utils.logging_helpers import configure_logging, get_logger
from .utils.message_formatter import MessageFormatter


# MCP 服务器响应类型定义
MCPResponse = dict[str, Any]

logger = get_logger()

# 创建MCP应用
mcp: FastMCP[Any] = FastMCP("文件夹图像压缩服务")


class MCPResponseBuilder:
    """MCP 服务器响应构建器"""

    @staticmethod
    def error(
        message: str,
        error_type: str = "general",
        details: dict[str, Any] | None = None,
    ) -> MCPResponse:
        """构建错误结果。

        Args:
            message: 错误消息
            error_type: 错误类型
            details: 额外的错误详情

        Returns:
            dict: 标准化的错误响应
        """
        result: MCPResponse = {
            "success": False,
            "error": message,
            "error_type": error_type,
        }
        if details:
            result["details"] = details
        return result

    @staticmethod
    def from_compression_error(error: CompressionError) -> MCPResponse:
        details = {"path": str(error.input_path)} if error.input_path else None
        return MCPResponseBuilder.error(error.message, error.kind, details)

    @staticmethod
    def batch(batch: BatchResult, messages: list[str]) -> MCPResponse:
        """把批量结果格式化为 MCP 响应"""
        return {
            "success": batch.success,
            "input_dir": str(batch.input_dir),
            "output_dir": str(batch.output_dir),
            "total": batch.get_total_count(),
            "successful": batch.get_success_count(),
            "failed": batch.get_failure_count(),
            "errors_by_kind": batch.get_errors_by_kind(),
            "summary": batch.get_summary(),
            "messages": messages,
            "results": [
                {
                    "input_path": str(r.input_path),
                    "output_path": str(r.output_path) if r.output_path else None,
                    "success": r.success,
                    "error_kind": r.error_kind,
                    "error": r.error,
                    "quality": r.quality_used,
                    "scale": r.scale_used,
                }
                for r in batch.results
            ],
        }


def run_compress_folder(
    origin_dir: str,
    dest_dir: str,
    thread_count: int | None = None,
    delete_origin: bool = False,
) -> MCPResponse:
    """执行文件夹压缩并汇总结果"""
    sender, receiver = create_channel()
    sink = CollectingSink()
    try:
        compressor = FolderCompressor(
            origin_dir, dest_dir, thread_count=thread_count, delete_origin=delete_origin
        )
        compressor.compress(sender=sender, sink=sink)
    except CompressionError as e:
        logger.error(MessageFormatter.operation_failed("文件夹压缩", origin_dir, e))
        return MCPResponseBuilder.from_compression_error(e)
    finally:
        messages = receiver.drain()
        receiver.close()

    batch = sink.to_batch_result(Path(origin_dir), Path(dest_dir))
    return MCPResponseBuilder.batch(batch, messages)


def run_archive_folder(
    root_dir: str,
    dest_dir: str,
    thread_count: int | None = None,
    executable: str | None = None,
) -> MCPResponse:
    """执行目录归档并汇总结果"""
    sender, receiver = create_channel()
    sink = CollectingSink()
    try:
        archiver = DirectoryArchiver(
            root_dir, dest_dir, thread_count=thread_count, executable=executable
        )
        archiver.archive(sender=sender, sink=sink)
    except CompressionError as e:
        logger.error(MessageFormatter.operation_failed("目录归档", root_dir, e))
        return MCPResponseBuilder.from_compression_error(e)
    finally:
        messages = receiver.drain()
        receiver.close()

    batch = sink.to_batch_result(Path(root_dir), Path(dest_dir))
    return MCPResponseBuilder.batch(batch, messages)


# ============================================================================
# MCP 工具
# ============================================================================


@mcp.tool()
def compress_folder(
    origin_dir: str,
    dest_dir: str,
    thread_count: int | None = None,
    delete_origin: bool = False,
) -> MCPResponse:
    """把目录树中的图像压缩为 JPEG 副本，目标目录保持相同结构。

    已存在的目标文件不会被覆盖；无法转换的文件会被原样复制。

    Args:
        origin_dir: 源目录
        dest_dir: 目标目录
        thread_count: 工作线程数（默认取配置）
        delete_origin: 压缩成功后删除原文件

    Returns:
        dict: 进度消息、逐文件结果与汇总
    """
    return run_compress_folder(origin_dir, dest_dir, thread_count, delete_origin)


@mcp.tool()
def archive_folder(
    root_dir: str,
    dest_dir: str,
    thread_count: int | None = None,
) -> MCPResponse:
    """把根目录下的每个一级子目录分别打包为 7z 归档。

    Args:
        root_dir: 待归档目录的父目录
        dest_dir: 归档输出目录
        thread_count: 工作线程数（默认取配置）

    Returns:
        dict: 进度消息、逐目录结果与汇总
    """
    return run_archive_folder(root_dir, dest_dir, thread_count)


# ============================================================================
# 应用入口
# ============================================================================


def main() -> None:
    """启动 MCP 服务器"""
    configure_logging()
    logger.info("启动文件夹压缩 MCP 服务器")
    mcp.run()


if __name__ == "__main__":
    main()
