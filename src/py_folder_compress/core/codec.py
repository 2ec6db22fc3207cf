"""图像编解码模块。

流水线只依赖 ``Codec`` 协议，默认实现基于 Pillow。
"""

from io import BytesIO
from pathlib import Path
from typing import Protocol

import numpy as np
from PIL import Image

from ..config import get_config
from ..exceptions import DecodeError, EncodeError, ResizeError, handle_codec_errors
from ..models.constants import RGB_CHANNELS
from ..utils.logging_helpers import get_logger


logger = get_logger()


class Codec(Protocol):
    """编解码器协议"""

    def decode(self, data: bytes) -> Image.Image: ...

    def resize(self, image: Image.Image, width: int, height: int) -> Image.Image: ...

    def to_rgb8(self, image: Image.Image) -> bytes: ...

    def encode_jpeg(self, raw: bytes, width: int, height: int, quality: float) -> bytes: ...

    def save_jpeg_copy(self, image: Image.Image, target: Path) -> None: ...


class PillowCodec:
    """基于 Pillow 的编解码器"""

    def __init__(self, convert_quality: int | None = None):
        self.convert_quality = (
            convert_quality
            if convert_quality is not None
            else get_config().compression.CONVERT_QUALITY
        )

    @handle_codec_errors("图像解码", DecodeError)
    def decode(self, data: bytes) -> Image.Image:
        image = Image.open(BytesIO(data))
        image.load()
        return image

    @handle_codec_errors("图像缩放", ResizeError)
    def resize(self, image: Image.Image, width: int, height: int) -> Image.Image:
        """三角（双线性）滤波缩放"""
        if width <= 0 or height <= 0:
            raise ResizeError(f"目标尺寸无效: {width}x{height}")
        return image.convert("RGB").resize((width, height), Image.Resampling.BILINEAR)

    @handle_codec_errors("像素导出", ResizeError)
    def to_rgb8(self, image: Image.Image) -> bytes:
        return image.convert("RGB").tobytes()

    @handle_codec_errors("JPEG 编码", EncodeError)
    def encode_jpeg(self, raw: bytes, width: int, height: int, quality: float) -> bytes:
        """逐扫描线编码 RGB8 缓冲区

        缓冲区必须恰好是 ``height`` 条扫描线，每条 ``width * 3`` 字节，
        最后一条扫描线的下标为 ``height - 1``。
        """
        stride = width * RGB_CHANNELS
        if width <= 0 or height <= 0 or len(raw) != stride * height:
            raise EncodeError(
                f"像素缓冲区长度 {len(raw)} 与尺寸 {width}x{height} 不匹配"
            )

        scanlines = np.frombuffer(raw, dtype=np.uint8).reshape(height, stride)
        pixels = scanlines.reshape(height, width, RGB_CHANNELS)

        buffer = BytesIO()
        Image.fromarray(pixels).save(
            buffer, format="JPEG", quality=round(quality), optimize=True
        )
        return buffer.getvalue()

    @handle_codec_errors("JPEG 转换", DecodeError)
    def save_jpeg_copy(self, image: Image.Image, target: Path) -> None:
        """以接近无损的参数另存为 JPEG，目标已存在时抛出 FileExistsError"""
        rgb = image.convert("RGB")
        with target.open("xb") as f:
            try:
                rgb.save(f, format="JPEG", quality=self.convert_quality, subsampling=0)
            except Exception:
                f.close()
                target.unlink(missing_ok=True)
                raise
        logger.debug(f"已转换为 JPEG: {target}")
