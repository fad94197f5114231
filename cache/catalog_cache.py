# -*- coding: utf-8 -*-
"""
模型目录缓存模块

功能：
- 定义 CatalogCache 接口（read / write / invalidate）
- 内存实现和文件实现，均按 TTL 失效
- 作为目录获取的 "last known good" tier，由调用方显式注入
"""

import json
import logging
import os
import tempfile
import time
from abc import ABC, abstractmethod
from typing import List, Optional

from cache.cache import MemoryCache
from provider.bedrock.models import ResourceDescriptor

logger = logging.getLogger(__name__)


class CatalogCache(ABC):
    """
    模型目录缓存接口
    """

    @abstractmethod
    def read(self) -> Optional[List[ResourceDescriptor]]:
        """
        读取缓存的目录

        Returns:
            未过期的目录，没有或已过期返回 None
        """
        pass

    @abstractmethod
    def write(self, catalog: List[ResourceDescriptor]):
        """写入目录（覆盖旧值并重置 TTL）"""
        pass

    @abstractmethod
    def invalidate(self):
        """立即失效"""
        pass


class MemoryCatalogCache(CatalogCache):
    """
    内存目录缓存（进程内有效）
    """

    KEY = 'bedrock:catalog'

    def __init__(self, ttl: int = 86400, cache: Optional[MemoryCache] = None):
        """
        Args:
            ttl: 缓存时间（秒，默认 24 小时）
            cache: 底层 MemoryCache（可与其他组件共享）
        """
        self.ttl = ttl
        self._cache = cache or MemoryCache()

    def read(self) -> Optional[List[ResourceDescriptor]]:
        value, exists = self._cache.get(self.KEY)
        return list(value) if exists else None

    def write(self, catalog: List[ResourceDescriptor]):
        self._cache.set(self.KEY, tuple(catalog), ttl=self.ttl)

    def invalidate(self):
        self._cache.delete(self.KEY)


class FileCatalogCache(CatalogCache):
    """
    文件目录缓存

    缓存文件：{cache_dir}/catalog.json，内容包含 timestamp 和 models
    """

    def __init__(self, cache_dir: str = None, ttl: int = None):
        """
        Args:
            cache_dir: 缓存目录（默认：环境变量 CATALOG_CACHE_DIR 或 .bedrock_catalog_cache）
            ttl: 缓存时间（秒，默认：环境变量 CATALOG_CACHE_TTL 或 86400）
        """
        self.cache_dir = cache_dir or os.getenv('CATALOG_CACHE_DIR', '.bedrock_catalog_cache')
        self.ttl = ttl or int(os.getenv('CATALOG_CACHE_TTL', '86400'))
        self.cache_file = os.path.join(self.cache_dir, 'catalog.json')

        os.makedirs(self.cache_dir, exist_ok=True)

        logger.info(f"初始化目录文件缓存: {self.cache_file}, TTL: {self.ttl} 秒 ({self.ttl // 3600} 小时)")

    def read(self) -> Optional[List[ResourceDescriptor]]:
        if not os.path.exists(self.cache_file):
            return None

        try:
            with open(self.cache_file, 'r', encoding='utf-8') as f:
                cache_data = json.load(f)

            cache_time = cache_data.get('timestamp', 0)
            if time.time() - cache_time > self.ttl:
                logger.debug(f"目录缓存已过期: {self.cache_file}")
                return None

            models = [ResourceDescriptor.from_dict(item) for item in cache_data.get('models', [])]
            logger.debug(f"从缓存加载目录: {len(models)} 个模型")
            return models

        except (OSError, ValueError, KeyError) as e:
            logger.warning(f"读取目录缓存失败: {self.cache_file}, 错误: {e}")
            return None

    def write(self, catalog: List[ResourceDescriptor]):
        cache_data = {
            'timestamp': time.time(),
            'models': [model.to_dict() for model in catalog],
        }
        # 先写临时文件再替换，读方只会看到旧文件或完整的新文件
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.cache_dir, prefix='catalog.', suffix='.tmp')
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(cache_data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.cache_file)
            logger.debug(f"目录已保存到缓存: {self.cache_file}")
        except OSError as e:
            logger.warning(f"保存目录缓存失败: {self.cache_file}, 错误: {e}")
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)

    def invalidate(self):
        if os.path.exists(self.cache_file):
            os.remove(self.cache_file)
            logger.info(f"已清除目录缓存: {self.cache_file}")
