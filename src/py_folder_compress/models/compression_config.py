"""压缩配置模型。

定义质量/缩放因子与文件夹压缩、归档的配置参数。
"""

from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Factor(BaseModel):
    """单个文件的 JPEG 质量与线性缩放比例"""

    model_config = ConfigDict(frozen=True)

    quality: float = Field(ge=0, le=100, description="JPEG 质量")
    scale: float = Field(ge=0.0, le=1.0, description="线性缩放比例")

    @classmethod
    def coerce(cls, value: Any) -> "Factor":
        """接受 Factor 或 (quality, scale) 二元组"""
        if isinstance(value, Factor):
            return value
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return cls(quality=value[0], scale=value[1])
        raise TypeError(f"质量计算函数必须返回 Factor 或 (quality, scale)，得到: {value!r}")

    def target_size(self, width: int, height: int) -> tuple[int, int]:
        """按比例计算目标尺寸（向下取整）

        按比例的十进制值相乘，0.7 这类比例不会因二进制舍入少一个像素。
        """
        scale = Decimal(str(self.scale))
        return int(width * scale), int(height * scale)


class FolderCompressConfig(BaseModel):
    """文件夹压缩配置"""

    origin_root: Path = Field(description="源根目录")
    dest_root: Path = Field(description="目标根目录")
    thread_count: int = Field(gt=0, description="工作线程数")

    # 扩展名判断
    jpeg_extensions: tuple[str, ...] = Field(
        ("jpg", "jpeg"), description="视为 JPEG 的扩展名（不含点）"
    )
    case_sensitive_extensions: bool = Field(True, description="扩展名大小写敏感")

    # 处理选项
    delete_origin: bool = Field(False, description="压缩成功后删除原文件")

    @field_validator("jpeg_extensions")
    @classmethod
    def validate_extensions(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("JPEG 扩展名列表不能为空")
        return tuple(ext.lstrip(".") for ext in v)

    @field_validator("origin_root", "dest_root")
    @classmethod
    def make_absolute(cls, v: Path) -> Path:
        return v.absolute()


class ArchiveConfig(BaseModel):
    """目录归档配置"""

    root: Path = Field(description="待归档目录的父目录")
    dest: Path = Field(description="归档文件输出目录")
    thread_count: int = Field(gt=0, description="工作线程数")
    executable: str = Field(min_length=1, description="外部归档程序")

    @field_validator("root", "dest")
    @classmethod
    def make_absolute(cls, v: Path) -> Path:
        return v.absolute()
