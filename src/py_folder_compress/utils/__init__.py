"""工具模块包。

提供纯工具函数，不包含业务逻辑。
"""

from .file_helpers import (
    is_jpeg_extension,
    jpeg_output_name,
    mirror_destination,
    sibling_stems,
)
from .logging_helpers import configure_logging, get_logger
from .message_formatter import MessageFormatter


__all__ = [
    "MessageFormatter",
    "configure_logging",
    "get_logger",
    "is_jpeg_extension",
    "jpeg_output_name",
    "mirror_destination",
    "sibling_stems",
]
