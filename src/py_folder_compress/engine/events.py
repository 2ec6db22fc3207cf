"""事件接收器模块。

每个队列元素处理完毕后产生一个 FileResult，交给事件接收器。
接收器会被多个工作线程同时调用，实现必须线程安全。
"""

import threading
from pathlib import Path
from typing import Protocol

from ..models.compression_result import BatchResult, FileResult
from ..utils.logging_helpers import get_logger


logger = get_logger()


class EventSink(Protocol):
    """单文件结果接收器协议"""

    def record(self, result: FileResult) -> None: ...


class CollectingSink:
    """收集所有结果，便于测试断言和汇总"""

    def __init__(self) -> None:
        self._results: list[FileResult] = []
        self._lock = threading.Lock()

    def record(self, result: FileResult) -> None:
        with self._lock:
            self._results.append(result)

    @property
    def results(self) -> list[FileResult]:
        with self._lock:
            return list(self._results)

    def successes(self) -> list[FileResult]:
        return [r for r in self.results if r.success]

    def failures(self, kind: str | None = None) -> list[FileResult]:
        """失败结果，可按错误分类过滤"""
        return [
            r
            for r in self.results
            if not r.success and (kind is None or r.error_kind == kind)
        ]

    def to_batch_result(
        self, input_dir: Path, output_dir: Path | None = None
    ) -> BatchResult:
        """汇总为 BatchResult"""
        results = self.results
        success = not results or any(r.success for r in results)
        return BatchResult(
            input_dir=input_dir,
            output_dir=output_dir,
            results=results,
            success=success,
            error=None if success else "所有文件处理都失败",
        )


class LoggingSink:
    """仅记录日志的接收器"""

    def record(self, result: FileResult) -> None:
        if result.success:
            logger.info(f"{result.input_path}: {result.get_summary()}")
        else:
            logger.info(f"{result.input_path}: [{result.error_kind}] {result.error}")


def record_event(sink: EventSink | None, result: FileResult) -> None:
    """推送结果，接收器自身的异常只记录日志"""
    if sink is None:
        return
    try:
        sink.record(result)
    except Exception as e:
        logger.error(f"事件接收器处理失败 {result.input_path}: {e}")
