"""压缩调度引擎模块。

包含工作线程池、文件夹压缩器、目录归档器和进度通道。
"""

from .archiver import DirectoryArchiver, archive_root_dir
from .config import ConfigBuilder
from .events import CollectingSink, EventSink, LoggingSink
from .folder_compressor import FolderCompressor, folder_compress
from .progress import ProgressReceiver, ProgressSender, create_channel
from .worker_pool import WorkerPool


__all__ = [
    "CollectingSink",
    "ConfigBuilder",
    "DirectoryArchiver",
    "EventSink",
    "FolderCompressor",
    "LoggingSink",
    "ProgressReceiver",
    "ProgressSender",
    "WorkerPool",
    "archive_root_dir",
    "create_channel",
    "folder_compress",
]
