# -*- coding: utf-8 -*-
"""
分层降级组合器

功能：
- 按顺序尝试一组 tier 函数，第一个成功的结果胜出
- 目录获取（document -> cache -> static）和访问状态解析（live -> heuristic）共用
"""

import logging
from typing import Any, Callable, NamedTuple, Sequence, Tuple

from provider.bedrock.errors import TiersExhausted

logger = logging.getLogger(__name__)


class TierOutcome(NamedTuple):
    """成功的 tier 名称及其结果"""
    source: str
    value: Any


def attempt_tiers(tiers: Sequence[Tuple[str, Callable[[], Any]]], label: str = 'tiers') -> TierOutcome:
    """
    依次执行 tier，返回第一个不抛异常的结果

    Args:
        tiers: (名称, 无参函数) 列表
        label: 日志前缀

    Returns:
        TierOutcome(source, value)

    Raises:
        TiersExhausted: 所有 tier 都失败
    """
    errors = []
    for name, tier in tiers:
        try:
            value = tier()
        except Exception as e:
            # 单个 tier 失败不影响后续 tier
            logger.warning(f"[{label}] tier '{name}' 失败（{type(e).__name__}）: {e}")
            errors.append((name, e))
            continue

        if errors:
            logger.info(f"[{label}] 降级到 tier '{name}'")
        else:
            logger.debug(f"[{label}] tier '{name}' 成功")
        return TierOutcome(name, value)

    raise TiersExhausted(f"[{label}] 所有 tier 均失败: {[name for name, _ in errors]}")
