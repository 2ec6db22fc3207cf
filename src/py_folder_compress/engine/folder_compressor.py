"""文件夹压缩器模块。

枚举源目录、填充工作队列、启动固定数量的工作线程，把每个文件压缩到
镜像后的目标目录。单个文件的失败不会中断批处理，只有源目录无法枚举时
整个调用才会失败。
"""

from functools import partial
from pathlib import Path

from ..core.codec import Codec, PillowCodec
from ..core.crawler import get_file_list
from ..core.heuristic import QualityHeuristic, default_quality_heuristic
from ..core.pipeline import compress_to_jpg
from ..core.work_queue import WorkQueue
from ..exceptions import ErrorHandler, FileIOError
from ..models.compression_config import FolderCompressConfig
from ..utils.file_helpers import mirror_destination
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter
from .config import ConfigBuilder
from .events import EventSink, record_event
from .progress import MessageSender, clone_sender, notify
from .worker_pool import WorkerPool


logger = get_logger()


class FolderCompressor:
    """多线程文件夹压缩器

    Examples:
        >>> from py_folder_compress.engine.progress import create_channel
        >>> compressor = FolderCompressor("origin", "dest", thread_count=4)
        >>> sender, receiver = create_channel()
        >>> compressor.compress(sender=sender)
        >>> receiver.drain()[-1]
        'Compress complete!'
    """

    def __init__(
        self,
        origin_root: str | Path,
        dest_root: str | Path,
        thread_count: int | None = None,
        heuristic: QualityHeuristic | None = None,
        codec: Codec | None = None,
        delete_origin: bool | None = None,
        jpeg_extensions: tuple[str, ...] | None = None,
        case_sensitive_extensions: bool | None = None,
        config_builder: ConfigBuilder | None = None,
    ):
        """初始化压缩器

        Args:
            origin_root: 源根目录
            dest_root: 目标根目录
            thread_count: 工作线程数，None 使用配置默认值
            heuristic: 质量/缩放计算函数，None 使用默认质量表
            codec: 编解码器，None 使用 PillowCodec
            delete_origin: 压缩成功后是否删除原文件
            jpeg_extensions: 视为 JPEG 的扩展名
            case_sensitive_extensions: 扩展名判断是否区分大小写
            config_builder: 配置构建器实例

        Raises:
            ValidationError: 参数无效
        """
        self.config_builder = config_builder or ConfigBuilder()
        self.config: FolderCompressConfig = self.config_builder.build(
            origin_root=origin_root,
            dest_root=dest_root,
            thread_count=thread_count,
            delete_origin=delete_origin,
            jpeg_extensions=jpeg_extensions,
            case_sensitive_extensions=case_sensitive_extensions,
        )
        self.heuristic = heuristic or default_quality_heuristic
        self.codec = codec or PillowCodec()

    def compress(
        self, sender: MessageSender | None = None, sink: EventSink | None = None
    ) -> None:
        """压缩整个源目录，阻塞直到所有工作线程结束

        Args:
            sender: 进度消息发送端（可选）
            sink: 单文件结果接收器（可选）

        Raises:
            EnumerationError: 源目录无法枚举
        """
        files = get_file_list(self.config.origin_root)
        logger.info(
            f"开始压缩 {self.config.origin_root} → {self.config.dest_root}，"
            f"共 {len(files)} 个文件，{self.config.thread_count} 个线程"
        )
        notify(sender, MessageFormatter.total_file_count(len(files)))

        work_queue = WorkQueue(files)
        pool = WorkerPool(self.config.thread_count, name="compress")
        pool.run(
            work_queue,
            lambda: partial(self._process_file, sender=clone_sender(sender), sink=sink),
        )

        notify(sender, MessageFormatter.batch_complete())
        logger.info(f"压缩完成: {self.config.origin_root}")

    def _process_file(
        self,
        file_path: Path,
        sender: MessageSender | None,
        sink: EventSink | None,
    ) -> None:
        """处理一个队列元素，所有单文件异常都在这里被捕获"""
        try:
            dest_dir = self._prepare_destination(file_path)
            result = compress_to_jpg(
                file_path,
                dest_dir,
                self.heuristic,
                self.codec,
                jpeg_extensions=self.config.jpeg_extensions,
                case_sensitive=self.config.case_sensitive_extensions,
                delete_origin=self.config.delete_origin,
            )
        except Exception as e:
            result = ErrorHandler.to_result(e, file_path)
            notify(sender, str(e))
        else:
            logger.info(MessageFormatter.compress_complete(file_path.name))
            notify(sender, MessageFormatter.compress_complete(result.output_path.name))

        record_event(sink, result)

    def _prepare_destination(self, file_path: Path) -> Path:
        """计算镜像目录并在缺失时创建"""
        try:
            dest_dir = mirror_destination(
                file_path, self.config.origin_root, self.config.dest_root
            )
        except ValueError as e:
            raise FileIOError(
                MessageFormatter.operation_failed("计算镜像目录", file_path, e),
                file_path,
            ) from e

        if not dest_dir.is_dir():
            try:
                dest_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FileIOError(
                    MessageFormatter.operation_failed("创建目录", dest_dir, e),
                    file_path,
                ) from e
        return dest_dir


def folder_compress(
    origin_root: str | Path,
    dest_root: str | Path,
    thread_count: int | None = None,
    heuristic: QualityHeuristic | None = None,
    sender: MessageSender | None = None,
    sink: EventSink | None = None,
    **kwargs,
) -> None:
    """压缩文件夹的函数式入口

    Args:
        origin_root: 源根目录
        dest_root: 目标根目录
        thread_count: 工作线程数
        heuristic: 质量/缩放计算函数
        sender: 进度消息发送端（可选）
        sink: 单文件结果接收器（可选）
        **kwargs: 传给 FolderCompressor 的其他参数

    Raises:
        ValidationError: 参数无效
        EnumerationError: 源目录无法枚举
    """
    FolderCompressor(
        origin_root, dest_root, thread_count=thread_count, heuristic=heuristic, **kwargs
    ).compress(sender=sender, sink=sink)
