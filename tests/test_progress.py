"""进度通道与事件接收器测试。"""

import threading
from pathlib import Path

import pytest

from py_folder_compress.engine.events import CollectingSink, LoggingSink, record_event
from py_folder_compress.engine.progress import clone_sender, create_channel, notify
from py_folder_compress.exceptions import ChannelSendError
from py_folder_compress.models import FileResult


class TestChannel:
    """多生产者单消费者通道"""

    def test_try_recv_is_non_blocking(self):
        sender, receiver = create_channel()

        assert receiver.try_recv() is None
        sender.send("hello")
        assert receiver.try_recv() == "hello"
        assert receiver.try_recv() is None

    def test_recv_timeout(self):
        _sender, receiver = create_channel()

        assert receiver.recv(timeout=0.01) is None

    def test_messages_from_one_sender_keep_order(self):
        sender, receiver = create_channel()
        for i in range(5):
            sender.send(str(i))

        assert receiver.drain() == ["0", "1", "2", "3", "4"]

    def test_many_producers(self):
        sender, receiver = create_channel()

        def produce(worker: int) -> None:
            own = sender.clone()
            for i in range(50):
                own.send(f"{worker}-{i}")

        threads = [threading.Thread(target=produce, args=(w,)) for w in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        messages = receiver.drain()
        assert len(messages) == 200
        for worker in range(4):
            own = [m for m in messages if m.startswith(f"{worker}-")]
            assert own == [f"{worker}-{i}" for i in range(50)]

    def test_send_after_close_fails(self):
        sender, receiver = create_channel()
        receiver.close()

        assert receiver.closed
        with pytest.raises(ChannelSendError) as exc_info:
            sender.clone().send("late")
        assert exc_info.value.kind == "ChannelSend"


class TestNotify:
    """发送失败不向上传播"""

    def test_without_sender(self):
        assert notify(None, "ignored") is False

    def test_closed_channel(self):
        sender, receiver = create_channel()
        receiver.close()

        assert notify(sender, "late") is False

    def test_foreign_sender_errors_are_swallowed(self):
        class Broken:
            def send(self, message: str) -> None:
                raise RuntimeError("boom")

        assert notify(Broken(), "x") is False

    def test_clone_sender_shares_plain_senders(self):
        class Plain:
            def send(self, message: str) -> None:
                pass

        plain = Plain()
        assert clone_sender(plain) is plain
        assert clone_sender(None) is None


class TestSinks:
    """结果接收器"""

    def test_collecting_sink_summary(self, tmp_path: Path):
        sink = CollectingSink()
        sink.record(FileResult(input_path=tmp_path / "a.jpg", success=True))
        sink.record(
            FileResult(
                input_path=tmp_path / "b.png",
                success=False,
                error="exists",
                error_kind="AlreadyExists",
            )
        )

        batch = sink.to_batch_result(tmp_path)

        assert batch.success
        assert batch.get_total_count() == 2
        assert batch.get_errors_by_kind() == {"AlreadyExists": 1}
        assert [r.input_path.name for r in sink.failures("AlreadyExists")] == ["b.png"]

    def test_all_failed_batch(self, tmp_path: Path):
        sink = CollectingSink()
        sink.record(
            FileResult(input_path=tmp_path / "x", success=False, error_kind="IoError")
        )

        assert not sink.to_batch_result(tmp_path).success

    def test_broken_sink_is_contained(self, tmp_path: Path):
        class Broken:
            def record(self, result: FileResult) -> None:
                raise RuntimeError("boom")

        record_event(Broken(), FileResult(input_path=tmp_path, success=True))
        record_event(None, FileResult(input_path=tmp_path, success=True))

    def test_logging_sink(self, tmp_path: Path, caplog: pytest.LogCaptureFixture):
        caplog.set_level("INFO", logger="py_folder_compress")

        LoggingSink().record(
            FileResult(
                input_path=tmp_path / "c.jpg",
                success=False,
                error="bad",
                error_kind="DecodeError",
            )
        )

        assert "[DecodeError] bad" in caplog.text
