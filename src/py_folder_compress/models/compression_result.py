"""处理结果模型。

FileResult 是工作线程推送给事件接收器的单文件事件，BatchResult 是
一次文件夹压缩或目录归档的汇总。
"""

from collections import Counter
from pathlib import Path

from humanize import naturalsize
from pydantic import BaseModel, Field


def format_size(size_bytes: int) -> str:
    """字节数转为人类可读格式"""
    return naturalsize(size_bytes, binary=True)


class FileResult(BaseModel):
    """单个队列元素（文件或目录）的处理结果"""

    input_path: Path = Field(description="输入路径")
    success: bool = Field(description="是否成功")
    output_path: Path | None = Field(None, description="输出路径，复制回退时为副本路径")
    error: str | None = Field(None, description="错误信息")
    error_kind: str | None = Field(None, description="错误分类")

    original_size: int = Field(0, description="原始文件字节数")
    compressed_size: int = Field(0, description="输出文件字节数")
    quality_used: float | None = Field(None, description="JPEG 质量")
    scale_used: float | None = Field(None, description="缩放比例")
    original_dimensions: tuple[int, int] | None = Field(None, description="解码尺寸")
    final_dimensions: tuple[int, int] | None = Field(None, description="输出尺寸")

    @property
    def bytes_saved(self) -> int:
        return max(0, self.original_size - self.compressed_size)

    def get_summary(self) -> str:
        if not self.success:
            return f"失败 [{self.error_kind}]: {self.error}"

        summary = f"{format_size(self.original_size)} → {format_size(self.compressed_size)}"
        if self.final_dimensions:
            width, height = self.final_dimensions
            summary += f", {width}x{height}, quality={self.quality_used:g}"
        return summary


class BatchResult(BaseModel):
    """一次批处理的全部结果"""

    input_dir: Path = Field(description="源根目录")
    output_dir: Path | None = Field(None, description="目标根目录")
    results: list[FileResult] = Field(default_factory=list)
    success: bool = Field(True, description="至少一个元素成功，或没有元素")
    error: str | None = Field(None, description="整体失败原因")

    def get_total_count(self) -> int:
        return len(self.results)

    def get_success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    def get_failure_count(self) -> int:
        return self.get_total_count() - self.get_success_count()

    def get_errors_by_kind(self) -> dict[str, int]:
        """按错误分类统计失败数量"""
        return dict(
            Counter(r.error_kind or "Unknown" for r in self.results if not r.success)
        )

    def get_summary(self) -> str:
        if not self.success:
            return f"批处理失败: {self.error}"

        saved = sum(r.bytes_saved for r in self.results if r.success)
        summary = (
            f"成功 {self.get_success_count()}/{self.get_total_count()}，"
            f"共节省 {format_size(saved)}"
        )
        if errors := self.get_errors_by_kind():
            detail = ", ".join(f"{kind}={count}" for kind, count in sorted(errors.items()))
            summary += f"，失败分类: {detail}"
        return summary
