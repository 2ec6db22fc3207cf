"""质量/缩放启发式模块。

根据原始文件大小选择 JPEG 质量和缩放比例。任何签名为
``(width, height, byte_size) -> Factor`` 的可调用对象都可以替代默认实现。
"""

from collections.abc import Callable
from functools import partial

from ..models.compression_config import Factor
from ..models.constants import (
    DEFAULT_FALLBACK_QUALITY,
    DEFAULT_FALLBACK_SCALE,
    DEFAULT_QUALITY_TIERS,
    QualityTier,
)


QualityHeuristic = Callable[[int, int, int], Factor]


def tiered_quality_heuristic(
    width: int,
    height: int,
    byte_size: int,
    tiers: tuple[QualityTier, ...] = DEFAULT_QUALITY_TIERS,
    fallback: Factor | None = None,
) -> Factor:
    """按大小档位计算因子

    Args:
        width: 解码后的宽度（默认实现不使用）
        height: 解码后的高度（默认实现不使用）
        byte_size: 原始文件字节数
        tiers: 档位表，阈值从大到小排列
        fallback: 不满足任何档位时的因子

    Returns:
        Factor: 质量与缩放比例
    """
    del width, height
    for tier in tiers:
        if byte_size > tier.min_size_exclusive:
            return Factor(quality=tier.quality, scale=tier.scale)
    return fallback or Factor(
        quality=DEFAULT_FALLBACK_QUALITY, scale=DEFAULT_FALLBACK_SCALE
    )


def default_quality_heuristic(width: int, height: int, byte_size: int) -> Factor:
    """默认质量表"""
    return tiered_quality_heuristic(width, height, byte_size)


def make_tiered_heuristic(
    tiers: tuple[QualityTier, ...], fallback: Factor
) -> QualityHeuristic:
    """用自定义档位表构造启发式函数"""
    ordered = tuple(sorted(tiers, key=lambda t: t.min_size_exclusive, reverse=True))
    return partial(tiered_quality_heuristic, tiers=ordered, fallback=fallback)


def fixed_quality_heuristic(quality: float, scale: float) -> QualityHeuristic:
    """对所有文件返回同一个因子"""
    factor = Factor(quality=quality, scale=scale)

    def _fixed(width: int, height: int, byte_size: int) -> Factor:
        return factor

    return _fixed
