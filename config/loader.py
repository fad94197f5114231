# -*- coding: utf-8 -*-
"""
模型发现配置加载模块

功能：
- 从 YAML 文件加载发现配置
- 定义清晰的数据结构（DiscoveryConfig）
- 环境变量覆盖部分配置
- 读取失败时给出明确错误
"""

import os
from dataclasses import dataclass, field
from typing import List

import yaml

from config.validator import validate_config
from provider.bedrock.gating import DEFAULT_GATED_PATTERNS
from provider.bedrock.region_query import DEFAULT_KNOWN_REGIONS, MULTI_REGION

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'discovery.yaml')


@dataclass
class DiscoveryConfig:
    """模型发现配置"""
    known_regions: List[str] = field(default_factory=lambda: list(DEFAULT_KNOWN_REGIONS))
    primary_region: str = 'us-west-2'                 # 单区域发现和 multi-region 降级时使用
    multi_region_sentinel: str = MULTI_REGION
    catalog_url: str = 'https://docs.aws.amazon.com/bedrock/latest/userguide/model-ids.html'
    gated_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_GATED_PATTERNS))
    request_timeout: float = 10.0                     # 读取超时（秒）
    connect_timeout: float = 5.0                      # 连接超时（秒）
    max_retries: int = 2                              # botocore 重试次数
    access_request_reason: str = 'Automated access request for Bedrock model discovery'
    refresh_interval: int = 3600                      # exporter 刷新间隔（秒），默认 1 小时
    catalog_cache_ttl: int = 86400                    # 目录缓存时间（秒），默认 24 小时
    catalog_cache_dir: str = '.bedrock_catalog_cache'


# YAML 键 -> (字段名, 类型)
_FIELDS = {
    'known_regions': list,
    'primary_region': str,
    'multi_region_sentinel': str,
    'catalog_url': str,
    'gated_patterns': list,
    'request_timeout': (int, float),
    'connect_timeout': (int, float),
    'max_retries': int,
    'access_request_reason': str,
    'refresh_interval': int,
    'catalog_cache_ttl': int,
    'catalog_cache_dir': str,
}

# 环境变量 -> (字段名, 转换函数)
_ENV_OVERRIDES = {
    'BEDROCK_REGION': ('primary_region', str),
    'DISCOVERY_REFRESH_INTERVAL': ('refresh_interval', int),
    'CATALOG_CACHE_DIR': ('catalog_cache_dir', str),
    'CATALOG_CACHE_TTL': ('catalog_cache_ttl', int),
}


def load_discovery_config(config_path: str = None, use_env: bool = True) -> DiscoveryConfig:
    """
    从 YAML 文件加载模型发现配置

    Args:
        config_path: 配置文件路径（默认：环境变量 DISCOVERY_CONFIG_PATH 或 config/discovery.yaml）
        use_env: 是否应用环境变量覆盖

    Returns:
        DiscoveryConfig 对象；文件不存在时使用默认配置

    Raises:
        yaml.YAMLError: YAML 解析错误
        ValueError: 配置格式错误
    """
    config_path = config_path or os.getenv('DISCOVERY_CONFIG_PATH', DEFAULT_CONFIG_PATH)

    data = {}
    if os.path.exists(config_path):
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except IOError as e:
            raise IOError(f"无法读取配置文件 {config_path}: {e}")

        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"YAML 解析失败: {e}")

    if not isinstance(data, dict):
        raise ValueError("配置格式错误: 根节点必须是字典类型")

    # 支持 {bedrock: {...}} 和平铺两种写法
    section = data.get('bedrock', data)
    if not isinstance(section, dict):
        raise ValueError("配置格式错误: 'bedrock' 必须是字典类型")

    values = {}
    for key, expected_type in _FIELDS.items():
        if key not in section:
            continue
        value = section[key]
        if isinstance(value, bool) or not isinstance(value, expected_type):
            raise ValueError(f"配置格式错误: '{key}' 类型无效: {value!r}")
        values[key] = value

    config = DiscoveryConfig(**values)

    if use_env:
        for env_name, (field_name, convert) in _ENV_OVERRIDES.items():
            env_value = os.getenv(env_name)
            if env_value:
                try:
                    setattr(config, field_name, convert(env_value))
                except ValueError:
                    raise ValueError(f"环境变量 {env_name} 的值无效: {env_value!r}")

    is_valid, error_message = validate_config(config)
    if not is_valid:
        raise ValueError(f"配置格式错误: {error_message}")

    return config
