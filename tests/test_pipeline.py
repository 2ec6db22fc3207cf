"""单文件压缩流水线测试。"""

from pathlib import Path

import pytest
from PIL import Image

from py_folder_compress.core import pipeline
from py_folder_compress.core.codec import PillowCodec
from py_folder_compress.core.heuristic import fixed_quality_heuristic
from py_folder_compress.core.pipeline import compress_to_jpg, delete_converted_file
from py_folder_compress.exceptions import (
    AlreadyExistsError,
    ConversionError,
    DecodeError,
    EncodeError,
    ResizeError,
    TempCleanupError,
)
from py_folder_compress.models import Factor
from py_folder_compress.utils.file_helpers import is_jpeg_extension
from tests.conftest import make_image


HALF = fixed_quality_heuristic(75, 0.5)


class TestDirectCompress:
    """JPEG 输入直接压缩"""

    def test_jpeg_is_resized_and_written(self, origin_dir: Path, dest_dir: Path):
        source = make_image(origin_dir / "photo.jpg", (200, 100))

        result = compress_to_jpg(source, dest_dir, HALF)

        assert result.success
        assert result.output_path == dest_dir / "photo.jpg"
        assert result.quality_used == 75
        assert result.scale_used == 0.5
        assert result.original_dimensions == (200, 100)
        assert result.final_dimensions == (100, 50)
        assert result.compressed_size == result.output_path.stat().st_size
        with Image.open(result.output_path) as img:
            assert img.format == "JPEG"
            assert img.size == (100, 50)
        assert source.exists()

    def test_scale_floors_dimensions(self, origin_dir: Path, dest_dir: Path):
        source = make_image(origin_dir / "odd.jpeg", (101, 33))

        result = compress_to_jpg(source, dest_dir, fixed_quality_heuristic(80, 0.9))

        assert result.output_path == dest_dir / "odd.jpg"
        with Image.open(result.output_path) as img:
            assert img.size == (90, 29)

    def test_seventy_percent_scale_keeps_exact_pixels(
        self, origin_dir: Path, dest_dir: Path
    ):
        source = make_image(origin_dir / "tall.jpg", (90, 180))

        result = compress_to_jpg(source, dest_dir, fixed_quality_heuristic(60, 0.70))

        assert result.final_dimensions == (63, 126)
        with Image.open(result.output_path) as img:
            assert img.size == (63, 126)

    def test_heuristic_receives_original_byte_size(
        self, origin_dir: Path, dest_dir: Path
    ):
        source = make_image(origin_dir / "pic.png", (80, 60), pad_to=150_000)
        calls = []

        def spy(width: int, height: int, byte_size: int) -> Factor:
            calls.append((width, height, byte_size))
            return Factor(quality=80, scale=1.0)

        compress_to_jpg(source, dest_dir, spy)

        assert calls == [(80, 60, 150_000)]

    def test_tuple_heuristic_is_accepted(self, origin_dir: Path, dest_dir: Path):
        source = make_image(origin_dir / "photo.jpg", (40, 40))

        result = compress_to_jpg(source, dest_dir, lambda w, h, s: (60, 0.5))

        assert result.final_dimensions == (20, 20)

    def test_creates_missing_destination(self, origin_dir: Path, tmp_path: Path):
        source = make_image(origin_dir / "photo.jpg", (40, 40))
        target_dir = tmp_path / "not" / "yet"

        result = compress_to_jpg(source, target_dir, HALF)

        assert result.output_path.parent == target_dir
        assert result.output_path.is_file()

    def test_delete_origin(self, origin_dir: Path, dest_dir: Path):
        source = make_image(origin_dir / "photo.jpg", (40, 40))

        compress_to_jpg(source, dest_dir, HALF, delete_origin=True)

        assert not source.exists()
        assert (dest_dir / "photo.jpg").is_file()


class TestConvertThenCompress:
    """非 JPEG 输入先转换再压缩"""

    def test_png_is_converted_and_temp_removed(self, origin_dir: Path, dest_dir: Path):
        source = make_image(origin_dir / "diagram.png", (200, 100))

        result = compress_to_jpg(source, dest_dir, HALF)

        assert result.output_path == dest_dir / "diagram.jpg"
        with Image.open(result.output_path) as img:
            assert img.format == "JPEG"
            assert img.size == (100, 50)
        assert not (origin_dir / "diagram.jpg").exists()
        assert source.exists()

    def test_rgba_png_is_converted(self, origin_dir: Path, dest_dir: Path):
        source = make_image(origin_dir / "alpha.png", (60, 40), mode="RGBA")

        result = compress_to_jpg(source, dest_dir, HALF)

        with Image.open(result.output_path) as img:
            assert img.mode == "RGB"
            assert img.size == (30, 20)

    def test_uppercase_extension_is_not_jpeg_when_case_sensitive(self):
        assert not is_jpeg_extension(Path("a.JPG"), ("jpg", "jpeg"))
        assert is_jpeg_extension(Path("a.JPG"), ("jpg", "jpeg"), case_sensitive=False)
        assert is_jpeg_extension(Path("a.jpeg"), ("jpg", "jpeg"))
        assert not is_jpeg_extension(Path("README"), ("jpg", "jpeg"))

    def test_unconvertible_file_is_copied(self, origin_dir: Path, dest_dir: Path):
        source = origin_dir / "notes.txt"
        source.write_text("not an image")

        with pytest.raises(ConversionError) as exc_info:
            compress_to_jpg(source, dest_dir, HALF)

        assert exc_info.value.kind == "AbortToCopy"
        assert exc_info.value.copied_path == dest_dir / "notes.txt"
        assert (dest_dir / "notes.txt").read_text() == "not an image"
        assert not (dest_dir / "notes.jpg").exists()
        assert not (origin_dir / "notes.jpg").exists()

    def test_copy_fallback_never_overwrites(
        self, origin_dir: Path, dest_dir: Path, monkeypatch: pytest.MonkeyPatch
    ):
        """目标副本在检查之后才出现时，复制回退同样不覆盖"""
        monkeypatch.setattr(pipeline, "_check_destination", lambda *args: None)
        source = origin_dir / "notes.txt"
        source.write_text("not an image")
        existing = dest_dir / "notes.txt"
        existing.write_text("written by someone else")

        with pytest.raises(AlreadyExistsError):
            compress_to_jpg(source, dest_dir, HALF)

        assert existing.read_text() == "written by someone else"

    def test_existing_sibling_jpeg_is_not_overwritten(
        self, origin_dir: Path, dest_dir: Path
    ):
        """同目录已有同名 .jpg 时转换失败，原文件被复制"""
        source = make_image(origin_dir / "shot.png", (40, 40))
        sibling = origin_dir / "shot.jpg"
        sibling.write_bytes(b"user data")

        with pytest.raises(ConversionError):
            compress_to_jpg(source, dest_dir, HALF)

        assert sibling.read_bytes() == b"user data"
        assert (dest_dir / "shot.png").is_file()


class TestSkipPaths:
    """跳过并记录的失败路径"""

    def test_existing_compressed_file(self, origin_dir: Path, dest_dir: Path):
        source = make_image(origin_dir / "photo.png", (40, 40))
        existing = dest_dir / "photo.jpg"
        existing.write_bytes(b"keep me")

        with pytest.raises(AlreadyExistsError) as exc_info:
            compress_to_jpg(source, dest_dir, HALF)

        assert exc_info.value.kind == "AlreadyExists"
        assert existing.read_bytes() == b"keep me"
        assert not (origin_dir / "photo.jpg").exists()

    def test_existing_same_named_file(self, origin_dir: Path, dest_dir: Path):
        source = make_image(origin_dir / "photo.png", (40, 40))
        (dest_dir / "photo.png").write_bytes(b"copy")

        with pytest.raises(AlreadyExistsError):
            compress_to_jpg(source, dest_dir, HALF)

        assert not (dest_dir / "photo.jpg").exists()

    def test_corrupt_jpeg(self, origin_dir: Path, dest_dir: Path):
        source = origin_dir / "broken.jpg"
        source.write_bytes(b"\xff\xd8 definitely not a jpeg")

        with pytest.raises(DecodeError):
            compress_to_jpg(source, dest_dir, HALF)

        assert list(dest_dir.iterdir()) == []

    def test_zero_scale(self, origin_dir: Path, dest_dir: Path):
        source = make_image(origin_dir / "photo.jpg", (40, 40))

        with pytest.raises(ResizeError):
            compress_to_jpg(source, dest_dir, fixed_quality_heuristic(80, 0.0))

        assert list(dest_dir.iterdir()) == []

    def test_failed_compress_leaves_temp(self, origin_dir: Path, dest_dir: Path):
        """转换成功但后续失败时临时文件保留"""
        source = make_image(origin_dir / "photo.png", (40, 40))

        with pytest.raises(ResizeError):
            compress_to_jpg(source, dest_dir, fixed_quality_heuristic(80, 0.0))

        assert (origin_dir / "photo.jpg").is_file()


class TestEncodeScanlines:
    """JPEG 编码缓冲区边界"""

    def test_exact_buffer(self):
        codec = PillowCodec()
        raw = bytes(range(256)) * (30 * 20 * 3 // 256) + bytes(30 * 20 * 3 % 256)

        encoded = codec.encode_jpeg(raw, 30, 20, 80)

        decoded = codec.decode(encoded)
        assert decoded.size == (30, 20)

    def test_last_scanline_is_included(self):
        """最后一条扫描线（下标 height-1）的内容会被编码"""
        codec = PillowCodec()
        width, height = 16, 16
        raw = bytearray(width * height * 3)
        raw[(height - 1) * width * 3 :] = b"\xff" * (width * 3)

        decoded = codec.decode(codec.encode_jpeg(bytes(raw), width, height, 100))

        assert decoded.getpixel((width // 2, height - 1))[0] > 200
        assert decoded.getpixel((width // 2, 0))[0] < 50

    def test_missing_scanline(self):
        with pytest.raises(EncodeError):
            PillowCodec().encode_jpeg(bytes(30 * 19 * 3), 30, 20, 80)

    def test_extra_byte(self):
        with pytest.raises(EncodeError):
            PillowCodec().encode_jpeg(bytes(30 * 20 * 3 + 1), 30, 20, 80)


class TestDeleteConvertedFile:
    """临时文件删除检查"""

    def test_deletes_when_original_sibling_exists(self, tmp_path: Path):
        (tmp_path / "a.png").write_bytes(b"original")
        temp = tmp_path / "a.jpg"
        temp.write_bytes(b"temp")

        assert delete_converted_file(temp) == temp
        assert not temp.exists()
        assert (tmp_path / "a.png").exists()

    def test_keeps_file_without_sibling(self, tmp_path: Path):
        lonely = tmp_path / "a.jpg"
        lonely.write_bytes(b"maybe the original")
        (tmp_path / "b.png").write_bytes(b"other")

        with pytest.raises(TempCleanupError) as exc_info:
            delete_converted_file(lonely)

        assert exc_info.value.kind == "NotFound"
        assert lonely.exists()

    def test_unrelated_same_stem_sibling_allows_delete(self, tmp_path: Path):
        """检查只比较文件名主干：无关的同名文件也会放行删除"""
        unrelated = tmp_path / "report.txt"
        unrelated.write_text("unrelated")
        temp = tmp_path / "report.jpg"
        temp.write_bytes(b"jpeg")

        delete_converted_file(temp)

        assert not temp.exists()
        assert unrelated.exists()
