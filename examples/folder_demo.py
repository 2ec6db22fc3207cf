#!/usr/bin/env python3
"""文件夹压缩演示脚本。

在临时目录中生成一棵图像目录树，压缩到镜像目录，并在压缩进行时
轮询进度通道。
"""

import tempfile
import threading
from pathlib import Path

from PIL import Image

from py_folder_compress import CollectingSink, create_channel, folder_compress
from py_folder_compress.utils.logging_helpers import configure_logging


def create_sample_tree(root: Path) -> None:
    """生成 JPEG、PNG 和嵌套目录"""
    samples = {
        "cover.jpg": (1600, 1200),
        "trip/day1.jpg": (800, 600),
        "trip/day2.png": (640, 480),
        "trip/raw/map.bmp": (320, 240),
    }
    for relative, size in samples.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", size, color=(40, 120, 200)).save(path)
    (root / "trip" / "notes.txt").write_text("不是图片，会被原样复制")


def main() -> None:
    configure_logging("WARNING")

    with tempfile.TemporaryDirectory() as tmp:
        origin = Path(tmp) / "origin"
        dest = Path(tmp) / "dest"
        create_sample_tree(origin)

        sender, receiver = create_channel()
        sink = CollectingSink()
        worker = threading.Thread(
            target=folder_compress,
            args=(origin, dest),
            kwargs={"thread_count": 2, "sender": sender, "sink": sink},
        )
        worker.start()

        print("📨 进度消息:")
        while worker.is_alive():
            if (message := receiver.recv(timeout=0.1)) is not None:
                print(f"  {message}")
        worker.join()
        for message in receiver.drain():
            print(f"  {message}")
        receiver.close()

        print("\n📊 处理结果:")
        for result in sink.results:
            print(f"  {result.input_path.relative_to(origin)}: {result.get_summary()}")

        batch = sink.to_batch_result(origin, dest)
        print(f"\n✅ {batch.get_summary()}")
        print(f"错误分类: {batch.get_errors_by_kind() or '无'}")


if __name__ == "__main__":
    main()
