"""数据模型包。

定义文件夹压缩相关的数据结构和模型。
"""

from .compression_config import ArchiveConfig, Factor, FolderCompressConfig
from .compression_result import BatchResult, FileResult
from .constants import (
    DEFAULT_FALLBACK_QUALITY,
    DEFAULT_FALLBACK_SCALE,
    DEFAULT_QUALITY_TIERS,
    QualityTier,
)


__all__ = [
    "DEFAULT_FALLBACK_QUALITY",
    "DEFAULT_FALLBACK_SCALE",
    "DEFAULT_QUALITY_TIERS",
    "ArchiveConfig",
    "BatchResult",
    "Factor",
    "FileResult",
    "FolderCompressConfig",
    "QualityTier",
]
