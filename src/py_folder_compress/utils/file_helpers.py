"""文件路径工具模块。

提供目录镜像、输出命名等纯路径计算函数。
"""

from collections.abc import Iterable
from pathlib import Path


JPEG_SUFFIX = ".jpg"


def mirror_destination(file_path: Path, origin_root: Path, dest_root: Path) -> Path:
    """计算文件在目标根目录下的镜像目录

    Args:
        file_path: 源文件路径
        origin_root: 源根目录
        dest_root: 目标根目录

    Returns:
        Path: ``dest_root / file_path.parent.relative_to(origin_root)``

    Raises:
        ValueError: 文件不在源根目录之下
    """
    return dest_root / file_path.parent.relative_to(origin_root)


def jpeg_output_name(file_path: Path) -> str:
    """压缩后的输出文件名：原文件名主干 + .jpg"""
    return f"{file_path.stem}{JPEG_SUFFIX}"


def is_jpeg_extension(
    file_path: Path, extensions: Iterable[str], case_sensitive: bool = True
) -> bool:
    """判断扩展名是否属于 JPEG 扩展名集合（不含点）"""
    suffix = file_path.suffix[1:]
    if case_sensitive:
        return suffix in set(extensions)
    return suffix.lower() in {ext.lower() for ext in extensions}


def sibling_stems(file_path: Path) -> list[str]:
    """列出同目录下除自身之外的所有条目的文件名主干"""
    return [
        entry.stem for entry in file_path.parent.iterdir() if entry != file_path
    ]
