"""单文件压缩流水线。

状态流转：格式检查 → (直接压缩 | 先转换再压缩) → 缩放 → 编码 → 写入 →
(清理临时文件) → 完成。转换失败时原样复制原文件；缩放、编码、写入失败时
只记录错误，既不写入也不复制。
"""

import shutil
from pathlib import Path

from ..exceptions import (
    AlreadyExistsError,
    CompressionError,
    ConversionError,
    DecodeError,
    FileIOError,
    ResizeError,
    TempCleanupError,
)
from ..models.compression_config import Factor
from ..models.compression_result import FileResult
from ..utils.file_helpers import is_jpeg_extension, jpeg_output_name, sibling_stems
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter
from .codec import Codec, PillowCodec
from .heuristic import QualityHeuristic, default_quality_heuristic


logger = get_logger()


def compress_to_jpg(
    input_path: Path,
    dest_dir: Path,
    heuristic: QualityHeuristic = default_quality_heuristic,
    codec: Codec | None = None,
    *,
    jpeg_extensions: tuple[str, ...] = ("jpg", "jpeg"),
    case_sensitive: bool = True,
    delete_origin: bool = False,
) -> FileResult:
    """压缩单个图像文件到目标目录。

    非 JPEG 输入会先在原目录旁生成同名 ``.jpg`` 临时文件，压缩成功后删除。
    如果转换失败，原文件会被原样复制到目标目录，并抛出 ConversionError。

    Args:
        input_path: 输入文件路径
        dest_dir: 输出目录（已完成镜像计算）
        heuristic: 质量/缩放计算函数
        codec: 编解码器，默认 PillowCodec
        jpeg_extensions: 视为 JPEG 的扩展名（不含点）
        case_sensitive: 扩展名判断是否区分大小写
        delete_origin: 成功后是否删除原文件

    Returns:
        FileResult: 成功的处理结果

    Raises:
        AlreadyExistsError: 目标目录已存在同名文件
        ConversionError: 转换失败，原文件已复制
        DecodeError / ResizeError / EncodeError: 编解码失败
        FileIOError: 读写失败
        TempCleanupError: 临时文件未通过删除检查
    """
    codec = codec or PillowCodec()
    input_path = Path(input_path)
    dest_dir = Path(dest_dir)

    target_file = dest_dir / jpeg_output_name(input_path)
    _check_destination(input_path, dest_dir, target_file)

    converted_file: Path | None = None
    if is_jpeg_extension(input_path, jpeg_extensions, case_sensitive):
        current_file = input_path
    else:
        converted_file = _convert_or_copy(input_path, dest_dir, codec)
        current_file = converted_file

    original_size = _file_size(input_path)
    image = codec.decode(_read_bytes(current_file))
    width, height = image.size

    try:
        factor = Factor.coerce(heuristic(width, height, original_size))
    except (TypeError, ValueError) as e:
        raise ResizeError(
            MessageFormatter.operation_failed("计算质量因子", input_path, e), input_path
        ) from e

    target_width, target_height = factor.target_size(width, height)
    resized = codec.resize(image, target_width, target_height)
    raw = codec.to_rgb8(resized)
    encoded = codec.encode_jpeg(raw, target_width, target_height, factor.quality)

    _write_output(target_file, encoded, input_path)

    if converted_file is not None:
        delete_converted_file(converted_file)

    if delete_origin:
        _delete_origin(input_path)

    logger.debug(
        f"压缩完成: {input_path} → {target_file} "
        f"(quality={factor.quality}, scale={factor.scale})"
    )
    return FileResult(
        input_path=input_path,
        output_path=target_file,
        success=True,
        original_size=original_size,
        compressed_size=len(encoded),
        quality_used=factor.quality,
        scale_used=factor.scale,
        original_dimensions=(width, height),
        final_dimensions=(target_width, target_height),
    )


def _check_destination(input_path: Path, dest_dir: Path, target_file: Path) -> None:
    """目标目录已有同名原文件或同名压缩文件时拒绝处理"""
    if (dest_dir / input_path.name).is_file():
        raise AlreadyExistsError(
            MessageFormatter.file_already_exists(input_path.name), input_path
        )
    if target_file.is_file():
        raise AlreadyExistsError(
            MessageFormatter.compressed_file_already_exists(target_file.name),
            input_path,
        )


def _convert_or_copy(input_path: Path, dest_dir: Path, codec: Codec) -> Path:
    """转换为同目录下的 JPEG，失败时原样复制到目标目录"""
    try:
        return convert_to_jpg(input_path, codec)
    except (CompressionError, OSError) as e:
        message = MessageFormatter.conversion_copied(input_path.name, e)
        copied_path = dest_dir / input_path.name
        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
            _copy_exclusive(input_path, copied_path)
        except FileExistsError as copy_error:
            raise AlreadyExistsError(
                MessageFormatter.file_already_exists(input_path.name), input_path
            ) from copy_error
        except OSError as copy_error:
            raise FileIOError(
                MessageFormatter.operation_failed("复制原文件", input_path, copy_error),
                input_path,
            ) from copy_error
        raise ConversionError(message, input_path, copied_path) from e


def _copy_exclusive(source: Path, target: Path) -> None:
    """独占创建目标文件后复制内容和元数据，目标已存在时抛出 FileExistsError"""
    with source.open("rb") as src, target.open("xb") as dst:
        try:
            shutil.copyfileobj(src, dst)
        except OSError:
            dst.close()
            target.unlink(missing_ok=True)
            raise
    shutil.copystat(source, target)


def convert_to_jpg(input_path: Path, codec: Codec | None = None) -> Path:
    """在输入文件所在目录生成同名 .jpg 文件

    Returns:
        Path: 生成的临时 JPEG 路径
    """
    codec = codec or PillowCodec()
    target = input_path.parent / jpeg_output_name(input_path)
    image = codec.decode(_read_bytes(input_path))
    codec.save_jpeg_copy(image, target)
    return target


def delete_converted_file(file_path: Path) -> Path:
    """删除转换产生的临时 JPEG

    只有当同目录下仍存在另一个同名主干的文件时才删除，否则认为它可能
    就是原始文件而保留。该检查只比较文件名主干。

    Raises:
        TempCleanupError: 没有同名主干的兄弟文件
        FileIOError: 读取目录或删除失败
    """
    try:
        stems = sibling_stems(file_path)
    except OSError as e:
        raise FileIOError(
            MessageFormatter.operation_failed("读取目录", file_path.parent, e),
            file_path,
        ) from e

    if file_path.stem not in stems:
        raise TempCleanupError(
            MessageFormatter.temp_may_be_original(file_path.name), file_path
        )

    try:
        file_path.unlink()
    except OSError as e:
        raise FileIOError(
            MessageFormatter.operation_failed("删除临时文件", file_path, e), file_path
        ) from e
    return file_path


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise DecodeError(
            MessageFormatter.operation_failed("读取文件", path, e), path
        ) from e


def _file_size(path: Path) -> int:
    try:
        return path.stat().st_size
    except OSError:
        return 0


def _write_output(target_file: Path, data: bytes, input_path: Path) -> None:
    """以独占方式写入，绝不覆盖已有文件"""
    try:
        target_file.parent.mkdir(parents=True, exist_ok=True)
        with target_file.open("xb") as f:
            f.write(data)
    except FileExistsError as e:
        raise AlreadyExistsError(
            MessageFormatter.compressed_file_already_exists(target_file.name),
            input_path,
        ) from e
    except OSError as e:
        raise FileIOError(
            MessageFormatter.operation_failed("写入文件", target_file, e), input_path
        ) from e


def _delete_origin(input_path: Path) -> None:
    try:
        input_path.unlink()
        logger.debug(f"已删除原文件: {input_path}")
    except OSError as e:
        raise FileIOError(
            MessageFormatter.operation_failed("删除原文件", input_path, e), input_path
        ) from e
