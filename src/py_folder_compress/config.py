"""统一配置管理模块。

压缩、归档和日志的默认值，可由 PFC_ 前缀的环境变量覆盖。
"""

import os
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CompressionDefaults:
    """压缩相关的默认配置"""

    # 并发设置
    THREAD_COUNT: int = 4

    # 扩展名判断（不含点），默认大小写敏感
    JPEG_EXTENSIONS: tuple[str, ...] = field(default=("jpg", "jpeg"))
    CASE_SENSITIVE_EXTENSIONS: bool = True

    # 非 JPEG 输入转换时的保存质量，尽量接近无损
    CONVERT_QUALITY: int = 100

    # 压缩成功后是否删除原文件
    DELETE_ORIGIN: bool = False


@dataclass(frozen=True)
class ArchiveDefaults:
    """归档相关的默认配置"""

    EXECUTABLE: str = "7z"
    COMPRESSION_LEVEL: int = 9
    ARCHIVE_FORMAT: str = "7z"

    def build_arguments(self, archive_path: str, source_dir: str) -> list[str]:
        """生成外部归档程序的参数列表"""
        return [
            "a",
            f"-mx={self.COMPRESSION_LEVEL}",
            f"-t{self.ARCHIVE_FORMAT}",
            archive_path,
            source_dir,
        ]


@dataclass(frozen=True)
class LoggingDefaults:
    """日志相关的默认配置"""

    # 日志级别
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # 文件日志
    ENABLE_FILE_LOGGING: bool = False
    LOG_FILE_PATH: str = "py_folder_compress.log"
    LOG_FILE_MAX_SIZE: int = 10 * 1024 * 1024  # 10MB
    LOG_FILE_BACKUP_COUNT: int = 5


class AppConfig:
    """全局配置

    构造时读取一次环境变量；测试中用 reset_config() 重新读取。
    """

    def __init__(self):
        self.compression = CompressionDefaults()
        self.archive = ArchiveDefaults()
        self.logging = LoggingDefaults()

        # 从环境变量加载配置
        self._load_from_env()

    def _load_from_env(self):
        """从环境变量加载配置"""
        # 压缩配置
        if thread_count := os.getenv("PFC_THREAD_COUNT"):
            object.__setattr__(self.compression, "THREAD_COUNT", int(thread_count))

        if delete_origin := os.getenv("PFC_DELETE_ORIGIN"):
            object.__setattr__(
                self.compression,
                "DELETE_ORIGIN",
                delete_origin.lower() in ("true", "1", "yes"),
            )

        # 归档配置
        if executable := os.getenv("PFC_ARCHIVE_EXECUTABLE"):
            object.__setattr__(self.archive, "EXECUTABLE", executable)

        # 日志配置
        if log_level := os.getenv("PFC_LOG_LEVEL"):
            object.__setattr__(self.logging, "LOG_LEVEL", log_level.upper())

        if enable_file_log := os.getenv("PFC_ENABLE_FILE_LOGGING"):
            object.__setattr__(
                self.logging,
                "ENABLE_FILE_LOGGING",
                enable_file_log.lower() in ("true", "1", "yes"),
            )


# 全局配置实例
config = AppConfig()


def get_config() -> AppConfig:
    """获取全局配置实例"""
    return config


def reset_config():
    """按当前环境变量重建全局配置"""
    global config
    config = AppConfig()
