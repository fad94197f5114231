# -*- coding: utf-8 -*-
"""
受限模型族判定模块

功能：
- 根据配置的模式列表判断模型是否需要申请访问权限
- 从 model_id 中推导发布日期
- 对任意来源的目录统一重新计算这两个派生字段
"""

import logging
import re
from dataclasses import replace
from datetime import date
from typing import Iterable, List, Optional, Sequence

from provider.bedrock.models import ResourceDescriptor

logger = logging.getLogger(__name__)

# 默认受限模型族（第 4 代 Claude、Nova Premier / Pro）
DEFAULT_GATED_PATTERNS = [
    r'claude-4',
    r'opus-4',
    r'sonnet-4',
    r'haiku-4',
    r'nova-premier',
    r'nova-pro',
]

# 恰好 8 位的连续数字（前后不能再有数字）
_DATE_TOKEN = re.compile(r'(?<!\d)(\d{8})(?!\d)')


class GatedFamilyMatcher:
    """
    受限模型族匹配器

    模式列表来自配置，更新模式不需要改动控制流程
    """

    def __init__(self, patterns: Optional[Sequence[str]] = None):
        self.patterns = list(patterns) if patterns is not None else list(DEFAULT_GATED_PATTERNS)
        self._compiled = [re.compile(pattern, re.IGNORECASE) for pattern in self.patterns]

    def requires_access(self, model_id: str, provider: str = '') -> bool:
        """
        判断模型是否属于受限模型族

        Args:
            model_id: 模型 ID
            provider: 提供商名称（可选）

        Returns:
            model_id 或 provider 匹配任意模式时返回 True
        """
        for pattern in self._compiled:
            if pattern.search(model_id or '') or pattern.search(provider or ''):
                return True
        return False

    def __repr__(self):
        return f"GatedFamilyMatcher(patterns={self.patterns!r})"


def infer_release_date(model_id: str) -> Optional[date]:
    """
    从 model_id 推导发布日期

    取第一个恰好 8 位的连续数字，按 YYYYMMDD 解析；
    没有这样的数字或不是合法日期时返回 None
    """
    match = _DATE_TOKEN.search(model_id or '')
    if not match:
        return None

    token = match.group(1)
    try:
        return date(int(token[0:4]), int(token[4:6]), int(token[6:8]))
    except ValueError:
        logger.debug(f"[Model Discovery] {model_id} 中的日期 {token} 无效，忽略")
        return None


def enrich_catalog(models: Iterable[ResourceDescriptor],
                   matcher: GatedFamilyMatcher) -> List[ResourceDescriptor]:
    """
    重新计算 requires_access 和 release_date（不信任上游提供的值）

    Args:
        models: 任意来源的模型目录
        matcher: 受限模型族匹配器

    Returns:
        派生字段已重新计算的新目录（原对象不变）
    """
    return [
        replace(
            model,
            requires_access=matcher.requires_access(model.model_id, model.provider),
            release_date=infer_release_date(model.model_id),
        )
        for model in models
    ]
