# -*- coding: utf-8 -*-
"""
配置验证模块

功能：
- 验证发现配置的完整性和正确性
- 验证字段格式和取值范围
"""

import re
from typing import Optional, Tuple

_REGION_PATTERN = re.compile(r'^[a-z]{2}(-gov)?-[a-z]+-\d$')


def validate_config(config) -> Tuple[bool, Optional[str]]:
    """
    验证配置对象

    Args:
        config: DiscoveryConfig 对象

    Returns:
        (is_valid, error_message) 元组
    """
    if not config.known_regions:
        return False, "known_regions 不能为空"

    for region in config.known_regions:
        if not isinstance(region, str) or not _REGION_PATTERN.match(region):
            return False, f"known_regions 中的区域无效: {region!r}"

    if not _REGION_PATTERN.match(config.primary_region or ''):
        return False, f"primary_region 无效: {config.primary_region!r}"

    if config.multi_region_sentinel in config.known_regions:
        return False, "multi_region_sentinel 不能与区域代码相同"

    if not config.catalog_url.startswith(('http://', 'https://')):
        return False, f"catalog_url 必须是 http(s) 地址: {config.catalog_url!r}"

    for pattern in config.gated_patterns:
        if not isinstance(pattern, str) or not pattern:
            return False, f"gated_patterns 必须是非空字符串: {pattern!r}"
        try:
            re.compile(pattern)
        except re.error as e:
            return False, f"gated_patterns 中的正则无效 {pattern!r}: {e}"

    if config.request_timeout <= 0 or config.connect_timeout <= 0:
        return False, "request_timeout / connect_timeout 必须大于 0"

    if config.max_retries < 0:
        return False, "max_retries 不能为负数"

    if config.refresh_interval <= 0 or config.catalog_cache_ttl <= 0:
        return False, "refresh_interval / catalog_cache_ttl 必须是正整数"

    if not config.access_request_reason.strip():
        return False, "access_request_reason 不能为空"

    return True, None
