"""多线程文件夹图像压缩库。

把目录树中的图像批量压缩为 JPEG 副本，并在目标目录中保持原有目录结构。
"""

__version__ = "0.1.0"
__description__ = "多线程文件夹图像压缩库，基于 Pillow"

# 核心功能导出
from .core.heuristic import default_quality_heuristic
from .engine.archiver import archive_root_dir
from .engine.events import CollectingSink
from .engine.folder_compressor import FolderCompressor, folder_compress
from .engine.progress import create_channel
from .models.compression_config import Factor
from .models.compression_result import BatchResult, FileResult


__all__ = [
    "BatchResult",
    "CollectingSink",
    "Factor",
    "FileResult",
    "FolderCompressor",
    "archive_root_dir",
    "create_channel",
    "default_quality_heuristic",
    "folder_compress",
    "get_version",
]


def get_version() -> str:
    """获取版本号。"""
    return __version__
