"""配置构建器模块。

把松散的调用参数与全局默认值合并为经过验证的 pydantic 配置。
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..config import get_config
from ..exceptions import ValidationError as CustomValidationError
from ..models.compression_config import ArchiveConfig, FolderCompressConfig


logger = logging.getLogger(__name__)


class ConfigBuilder:
    """压缩配置构建器

    未显式传入的参数使用 AppConfig 中的默认值。
    """

    def build(
        self,
        origin_root: str | Path,
        dest_root: str | Path,
        thread_count: int | None = None,
        delete_origin: bool | None = None,
        jpeg_extensions: tuple[str, ...] | list[str] | None = None,
        case_sensitive_extensions: bool | None = None,
    ) -> FolderCompressConfig:
        """构建文件夹压缩配置

        Raises:
            CustomValidationError: 参数验证失败
        """
        defaults = get_config().compression
        return self._create(
            FolderCompressConfig,
            Path(origin_root),
            origin_root=Path(origin_root),
            dest_root=Path(dest_root),
            thread_count=defaults.THREAD_COUNT if thread_count is None else thread_count,
            delete_origin=(
                defaults.DELETE_ORIGIN if delete_origin is None else delete_origin
            ),
            jpeg_extensions=tuple(jpeg_extensions or defaults.JPEG_EXTENSIONS),
            case_sensitive_extensions=(
                defaults.CASE_SENSITIVE_EXTENSIONS
                if case_sensitive_extensions is None
                else case_sensitive_extensions
            ),
        )

    def build_archive(
        self,
        root: str | Path,
        dest: str | Path,
        thread_count: int | None = None,
        executable: str | None = None,
    ) -> ArchiveConfig:
        """构建归档配置

        Raises:
            CustomValidationError: 参数验证失败
        """
        app_config = get_config()
        return self._create(
            ArchiveConfig,
            Path(root),
            root=Path(root),
            dest=Path(dest),
            thread_count=(
                app_config.compression.THREAD_COUNT
                if thread_count is None
                else thread_count
            ),
            executable=executable or app_config.archive.EXECUTABLE,
        )

    def _create(self, model: type, input_path: Path, **fields: Any) -> Any:
        try:
            return model(**fields)
        except PydanticValidationError as e:
            error_msg = self._format_validation_error(e)
            logger.debug(f"配置验证失败: {error_msg}")
            raise CustomValidationError(error_msg, input_path) from e

    @staticmethod
    def _format_validation_error(error: PydanticValidationError) -> str:
        """把 pydantic 错误列表格式化为一行"""
        parts = []
        for item in error.errors():
            field = ".".join(str(loc) for loc in item.get("loc", ())) or "配置"
            parts.append(f"{field}: {item.get('msg', '无效值')}")
        return "参数验证失败 - " + "; ".join(parts)
