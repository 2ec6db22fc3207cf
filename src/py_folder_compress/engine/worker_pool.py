"""工作线程池模块。

启动固定数量的线程，每个线程循环从预填充的队列中取出元素处理，
队列为空即退出；调用方阻塞直到所有线程结束。
"""

import threading
from collections.abc import Callable
from pathlib import Path

from ..core.work_queue import WorkQueue
from ..exceptions import ValidationError
from ..utils.logging_helpers import get_logger


logger = get_logger()

ItemHandler = Callable[[Path], None]
HandlerFactory = Callable[[], ItemHandler]


class WorkerPool:
    """固定大小的工作线程池

    不做动态扩缩，不支持取消；一次 ``run`` 会把队列中的每个元素处理完。
    """

    def __init__(self, thread_count: int, name: str = "worker"):
        """初始化工作线程池

        Args:
            thread_count: 线程数量，必须为正整数
            name: 线程名前缀
        """
        if thread_count <= 0:
            raise ValidationError(f"线程数必须大于 0，得到: {thread_count}")
        self.thread_count = thread_count
        self.name = name

    def run(self, work_queue: WorkQueue, handler_factory: HandlerFactory) -> None:
        """冻结队列并运行所有工作线程，直到全部退出

        Args:
            work_queue: 已填充的队列
            handler_factory: 每个线程启动前调用一次，返回该线程专用的处理函数，
                处理函数应自行处理业务异常
        """
        work_queue.freeze()
        threads = [
            threading.Thread(
                target=self._worker_loop,
                args=(work_queue, handler_factory()),
                name=f"{self.name}-{index}",
            )
            for index in range(self.thread_count)
        ]

        logger.debug(f"启动 {self.thread_count} 个工作线程，队列长度 {len(work_queue)}")
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    @staticmethod
    def _worker_loop(work_queue: WorkQueue, handler: ItemHandler) -> None:
        """取出-处理循环，单个元素的异常不会终止线程"""
        while (item := work_queue.try_pop()) is not None:
            try:
                handler(item)
            except Exception:
                logger.exception(f"处理 {item} 时发生未预期的错误")
