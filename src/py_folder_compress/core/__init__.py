"""核心模块包。

目录爬取、工作队列、质量启发式、编解码与单文件流水线。
"""

from .codec import Codec, PillowCodec
from .crawler import get_dir_list, get_file_list
from .heuristic import (
    QualityHeuristic,
    default_quality_heuristic,
    fixed_quality_heuristic,
    make_tiered_heuristic,
)
from .pipeline import compress_to_jpg, convert_to_jpg, delete_converted_file
from .work_queue import WorkQueue


__all__ = [
    "Codec",
    "PillowCodec",
    "QualityHeuristic",
    "WorkQueue",
    "compress_to_jpg",
    "convert_to_jpg",
    "default_quality_heuristic",
    "delete_converted_file",
    "fixed_quality_heuristic",
    "get_dir_list",
    "get_file_list",
    "make_tiered_heuristic",
]
