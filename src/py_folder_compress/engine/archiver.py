"""目录归档模块。

与文件夹压缩器相同的线程池模式：每个工作线程取出一个一级子目录，
调用外部 7z 程序把它打包成以目录命名的归档文件。
"""

import subprocess
from functools import partial
from pathlib import Path

from ..config import get_config
from ..core.crawler import get_dir_list
from ..core.work_queue import WorkQueue
from ..exceptions import AlreadyExistsError, ArchiveError, ErrorHandler
from ..models.compression_config import ArchiveConfig
from ..models.compression_result import FileResult
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter
from .config import ConfigBuilder
from .events import EventSink, record_event
from .progress import MessageSender, clone_sender, notify
from .worker_pool import WorkerPool


logger = get_logger()


def archive_path_for(directory: Path, root: Path, dest: Path) -> Path:
    """归档文件路径：目标目录下以源目录相对路径命名"""
    try:
        relative = directory.relative_to(root)
    except ValueError:
        relative = Path(directory.name)
    suffix = get_config().archive.ARCHIVE_FORMAT
    return dest / f"{relative}.{suffix}"


def compress_a_dir_to_7z(
    directory: Path, dest: Path, root: Path, executable: str
) -> Path:
    """把单个目录打包为归档文件

    Returns:
        Path: 生成的归档文件路径

    Raises:
        AlreadyExistsError: 归档文件已存在
        ArchiveError: 外部程序无法启动或返回非零退出码
    """
    archive_path = archive_path_for(directory, root, dest)
    if archive_path.exists():
        raise AlreadyExistsError(
            MessageFormatter.archive_already_exists(archive_path), directory
        )

    archive_path.parent.mkdir(parents=True, exist_ok=True)
    command = [
        executable,
        *get_config().archive.build_arguments(str(archive_path), str(directory)),
    ]
    logger.debug(f"执行归档命令: {' '.join(command)}")

    try:
        completed = subprocess.run(command, capture_output=True, text=True)
    except OSError as e:
        raise ArchiveError(
            MessageFormatter.operation_failed("启动归档程序", executable, e), directory
        ) from e

    if completed.returncode != 0:
        detail = (completed.stderr or completed.stdout or "").strip()
        raise ArchiveError(
            f"归档程序退出码 {completed.returncode}: {detail}", directory
        )

    return archive_path


class DirectoryArchiver:
    """多线程目录归档器"""

    def __init__(
        self,
        root: str | Path,
        dest: str | Path,
        thread_count: int | None = None,
        executable: str | None = None,
        config_builder: ConfigBuilder | None = None,
    ):
        self.config_builder = config_builder or ConfigBuilder()
        self.config: ArchiveConfig = self.config_builder.build_archive(
            root=root, dest=dest, thread_count=thread_count, executable=executable
        )

    def archive(
        self, sender: MessageSender | None = None, sink: EventSink | None = None
    ) -> None:
        """归档根目录下的每个一级子目录，阻塞直到完成

        Raises:
            EnumerationError: 根目录无法枚举
        """
        directories = get_dir_list(self.config.root)
        notify(sender, MessageFormatter.total_archive_count(len(directories)))

        work_queue = WorkQueue(directories)
        pool = WorkerPool(self.config.thread_count, name="archive")
        pool.run(
            work_queue,
            lambda: partial(
                self._process_directory, sender=clone_sender(sender), sink=sink
            ),
        )

        notify(sender, MessageFormatter.archiving_complete())

    def _process_directory(
        self,
        directory: Path,
        sender: MessageSender | None,
        sink: EventSink | None,
    ) -> None:
        try:
            archive_path = compress_a_dir_to_7z(
                directory, self.config.dest, self.config.root, self.config.executable
            )
        except Exception as e:
            result = ErrorHandler.to_result(e, directory, operation="目录归档")
            notify(sender, str(e))
        else:
            result = FileResult(
                input_path=directory,
                output_path=archive_path,
                success=True,
                compressed_size=archive_path.stat().st_size
                if archive_path.exists()
                else 0,
            )
            logger.info(MessageFormatter.archive_complete(archive_path))
            notify(sender, MessageFormatter.archive_complete(archive_path))

        record_event(sink, result)


def archive_root_dir(
    root: str | Path,
    dest: str | Path,
    thread_count: int | None = None,
    sender: MessageSender | None = None,
    sink: EventSink | None = None,
    executable: str | None = None,
) -> None:
    """归档根目录的函数式入口

    Raises:
        ValidationError: 参数无效
        EnumerationError: 根目录无法枚举
    """
    DirectoryArchiver(
        root, dest, thread_count=thread_count, executable=executable
    ).archive(sender=sender, sink=sink)
