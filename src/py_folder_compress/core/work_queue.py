"""工作队列模块。

启动前一次性填充、启动后只出不进的线程安全队列。
"""

import threading
from collections import deque
from collections.abc import Iterable
from pathlib import Path


class WorkQueue:
    """预填充的多消费者路径队列

    ``try_pop`` 从不阻塞：队列为空时立即返回 None，工作线程据此退出。
    每个元素只会交给一个线程。
    """

    def __init__(self, items: Iterable[Path] = ()):
        self._items: deque[Path] = deque()
        self._lock = threading.Lock()
        self._frozen = False
        for item in items:
            self.push(item)

    def push(self, item: Path) -> None:
        """填充阶段加入元素，冻结后调用会抛出 RuntimeError"""
        with self._lock:
            if self._frozen:
                raise RuntimeError("队列已冻结，不能再加入元素")
            self._items.append(item)

    def freeze(self) -> None:
        """结束填充阶段"""
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def try_pop(self) -> Path | None:
        with self._lock:
            if not self._items:
                return None
            return self._items.popleft()

    def is_empty(self) -> bool:
        with self._lock:
            return not self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
