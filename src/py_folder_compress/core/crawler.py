"""目录爬取模块。

枚举根目录下的全部文件（递归）或一级子目录。返回顺序取决于文件系统，
调用方不应依赖顺序。
"""

import os
from pathlib import Path

from ..exceptions import EnumerationError
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter


logger = get_logger()


def _check_root(root: Path) -> Path:
    """校验根目录可读，返回绝对路径"""
    root = Path(root).absolute()
    if not root.exists():
        raise EnumerationError(
            MessageFormatter.directory_not_found(root), root, kind="NotFound"
        )
    if not root.is_dir():
        raise EnumerationError(
            MessageFormatter.path_not_directory(root), root, kind="NotFound"
        )
    return root


def get_file_list(root: str | Path) -> list[Path]:
    """递归获取根目录下所有普通文件的绝对路径

    Args:
        root: 根目录

    Returns:
        list[Path]: 文件路径列表

    Raises:
        EnumerationError: 根目录不存在或无法读取
    """
    root = _check_root(Path(root))

    def _on_error(error: OSError) -> None:
        # 子目录不可读只跳过，根目录不可读则整体失败
        if error.filename is None or Path(error.filename) == root:
            raise error
        logger.warning(
            MessageFormatter.operation_failed("读取子目录", error.filename, error)
        )

    files: list[Path] = []
    try:
        for dirpath, _dirnames, filenames in os.walk(root, onerror=_on_error):
            parent = Path(dirpath)
            files.extend(
                parent / name for name in filenames if (parent / name).is_file()
            )
    except PermissionError as e:
        raise EnumerationError(
            MessageFormatter.permission_error(root, "读取目录"), root
        ) from e
    except OSError as e:
        raise EnumerationError(
            MessageFormatter.operation_failed("枚举文件", root, e), root
        ) from e

    logger.debug(f"在 {root} 下找到 {len(files)} 个文件")
    return files


def get_dir_list(root: str | Path) -> list[Path]:
    """获取根目录下的一级子目录

    Args:
        root: 根目录

    Returns:
        list[Path]: 子目录绝对路径列表

    Raises:
        EnumerationError: 根目录不存在或无法读取
    """
    root = _check_root(Path(root))
    try:
        dirs = [entry for entry in root.iterdir() if entry.is_dir()]
    except PermissionError as e:
        raise EnumerationError(
            MessageFormatter.permission_error(root, "读取目录"), root
        ) from e
    except OSError as e:
        raise EnumerationError(
            MessageFormatter.operation_failed("枚举目录", root, e), root
        ) from e

    logger.debug(f"在 {root} 下找到 {len(dirs)} 个子目录")
    return dirs
