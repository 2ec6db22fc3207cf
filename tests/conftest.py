"""测试配置文件。

提供测试所需的fixtures和图像生成工具。
"""

from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image, ImageDraw

from py_folder_compress.config import reset_config


def make_image(
    path: Path,
    size: tuple[int, int] = (200, 100),
    format: str | None = None,
    pad_to: int | None = None,
    mode: str = "RGB",
) -> Path:
    """生成带图案的测试图片，可在文件尾部填充到指定字节数"""
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new(mode, size, color="white")
    draw = ImageDraw.Draw(img)
    for i in range(10):
        x, y = (i * 17) % size[0], (i * 11) % size[1]
        color = (i * 25 % 256, i * 40 % 256, i * 60 % 256)
        draw.rectangle([x, y, x + size[0] // 4, y + size[1] // 4], fill=color)
    img.save(path, format=format)

    if pad_to is not None:
        current = path.stat().st_size
        assert current <= pad_to, f"{path} 已有 {current} 字节，无法填充到 {pad_to}"
        # 解码器在结束标记后停止读取，尾部填充不影响图像内容
        with path.open("ab") as f:
            f.write(b"\0" * (pad_to - current))
    return path


@pytest.fixture(autouse=True)
def fresh_config():
    """每个测试使用新的全局配置"""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def image_factory() -> Callable[..., Path]:
    return make_image


@pytest.fixture
def origin_dir(tmp_path: Path) -> Path:
    path = tmp_path / "origin"
    path.mkdir()
    return path


@pytest.fixture
def dest_dir(tmp_path: Path) -> Path:
    path = tmp_path / "dest"
    path.mkdir()
    return path


@pytest.fixture
def sample_tree(origin_dir: Path) -> Path:
    """包含 JPEG、PNG、嵌套目录的源目录"""
    make_image(origin_dir / "top.jpg", (120, 80))
    make_image(origin_dir / "a" / "1.jpg", (200, 100))
    make_image(origin_dir / "a" / "deep" / "3.jpeg", (64, 64))
    make_image(origin_dir / "b" / "2.png", (200, 100))
    make_image(origin_dir / "b" / "4.bmp", (50, 40))
    return origin_dir


def relative_files(root: Path) -> set[str]:
    """root 下全部文件的相对路径集合"""
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}
