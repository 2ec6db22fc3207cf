"""进度通道模块。

多生产者、单消费者的字符串消息通道。每个工作线程持有一个发送端副本，
消费方以非阻塞方式轮询。接收端关闭后发送会失败，但发送失败从不影响压缩。
"""

import queue
import threading
from typing import Protocol

from ..exceptions import ChannelSendError
from ..utils.logging_helpers import get_logger


logger = get_logger()


class MessageSender(Protocol):
    """进度消息发送端协议"""

    def send(self, message: str) -> None: ...


class _ChannelState:
    def __init__(self) -> None:
        self.messages: queue.SimpleQueue[str] = queue.SimpleQueue()
        self.closed = threading.Event()


class ProgressSender:
    """发送端，可以按线程复制"""

    def __init__(self, state: _ChannelState):
        self._state = state

    def send(self, message: str) -> None:
        """发送一条消息

        Raises:
            ChannelSendError: 接收端已关闭
        """
        if self._state.closed.is_set():
            raise ChannelSendError(f"接收端已关闭，消息未送达: {message}")
        self._state.messages.put(message)

    def clone(self) -> "ProgressSender":
        return ProgressSender(self._state)


class ProgressReceiver:
    """接收端，只应由一个消费者使用"""

    def __init__(self, state: _ChannelState):
        self._state = state

    def try_recv(self) -> str | None:
        """非阻塞读取一条消息，没有消息时返回 None"""
        try:
            return self._state.messages.get_nowait()
        except queue.Empty:
            return None

    def recv(self, timeout: float | None = None) -> str | None:
        """阻塞读取一条消息，超时返回 None"""
        try:
            return self._state.messages.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> list[str]:
        """取出当前已到达的全部消息"""
        messages = []
        while (message := self.try_recv()) is not None:
            messages.append(message)
        return messages

    def close(self) -> None:
        """关闭接收端，之后的发送都会失败"""
        self._state.closed.set()

    @property
    def closed(self) -> bool:
        return self._state.closed.is_set()


def create_channel() -> tuple[ProgressSender, ProgressReceiver]:
    """创建一对发送端和接收端"""
    state = _ChannelState()
    return ProgressSender(state), ProgressReceiver(state)


def clone_sender(sender: MessageSender | None) -> MessageSender | None:
    """为工作线程复制发送端，不支持复制的发送端原样共享"""
    if sender is None:
        return None
    clone = getattr(sender, "clone", None)
    return clone() if callable(clone) else sender


def notify(sender: MessageSender | None, message: str) -> bool:
    """发送进度消息，失败只记录日志

    Returns:
        bool: 是否发送成功
    """
    if sender is None:
        return False
    try:
        sender.send(message)
        return True
    except ChannelSendError as e:
        logger.warning(f"进度消息发送失败: {e}")
    except Exception as e:
        logger.warning(f"进度消息发送失败 ({type(e).__name__}): {e}")
    return False
