"""压缩相关常量定义。"""

from typing import Final, NamedTuple


class QualityTier(NamedTuple):
    """按原始文件大小划分的质量档位"""

    min_size_exclusive: int
    quality: float
    scale: float


# 默认质量/缩放表，按阈值从大到小排列，第一个满足 size > 阈值 的档位生效
DEFAULT_QUALITY_TIERS: Final[tuple[QualityTier, ...]] = (
    QualityTier(5_000_000, 60.0, 0.70),
    QualityTier(1_000_000, 65.0, 0.75),
    QualityTier(500_000, 70.0, 0.80),
    QualityTier(300_000, 75.0, 0.85),
    QualityTier(100_000, 80.0, 0.90),
)

# 小于等于最低阈值时使用
DEFAULT_FALLBACK_QUALITY: Final[float] = 85.0
DEFAULT_FALLBACK_SCALE: Final[float] = 1.0

# RGB8 每像素字节数
RGB_CHANNELS: Final[int] = 3
