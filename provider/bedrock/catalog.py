# -*- coding: utf-8 -*-
"""
模型目录获取服务

功能：
- document: 获取 AWS 文档页面并解析模型表格
- cache: 文档不可用时使用注入的 last known good 目录
- static: 最后使用静态兜底目录（不会失败）
- 所有来源的目录统一重新计算 requires_access / release_date
"""

import logging
from typing import Callable, List, Optional

from api.http.document import MODEL_IDS_URL, fetch_document
from cache.catalog_cache import CatalogCache
from provider.bedrock.catalog_parser import parse_model_catalog
from provider.bedrock.errors import EmptyResult
from provider.bedrock.fallback_catalog import get_fallback_catalog
from provider.bedrock.gating import GatedFamilyMatcher, enrich_catalog
from provider.bedrock.models import ResourceDescriptor
from provider.bedrock.tiers import TierOutcome, attempt_tiers

logger = logging.getLogger(__name__)


class CatalogAcquisitionService:
    """
    模型目录获取服务

    不涉及账号级别的访问权限，requires_access 是目录级元数据
    """

    def __init__(self,
                 matcher: Optional[GatedFamilyMatcher] = None,
                 catalog_url: str = MODEL_IDS_URL,
                 timeout: float = 15.0,
                 fetcher: Callable[..., str] = fetch_document,
                 catalog_cache: Optional[CatalogCache] = None):
        """
        初始化目录获取服务

        Args:
            matcher: 受限模型族匹配器
            catalog_url: 文档页面 URL
            timeout: 文档请求超时（秒）
            fetcher: 文档获取函数 fetcher(url, timeout=...) -> str
            catalog_cache: 目录缓存（可选）
        """
        self.matcher = matcher or GatedFamilyMatcher()
        self.catalog_url = catalog_url
        self.timeout = timeout
        self.fetcher = fetcher
        self.catalog_cache = catalog_cache

    def _from_document(self) -> List[ResourceDescriptor]:
        html = self.fetcher(self.catalog_url, timeout=self.timeout)
        models = parse_model_catalog(html)
        if not models:
            raise EmptyResult("文档中的模型表格没有可用的行")

        if self.catalog_cache is not None:
            self.catalog_cache.write(models)
        return models

    def _from_cache(self) -> List[ResourceDescriptor]:
        models = self.catalog_cache.read()
        if not models:
            raise EmptyResult("目录缓存为空或已过期")
        return models

    def acquire_with_source(self) -> TierOutcome:
        """
        获取目录并返回来源

        Returns:
            TierOutcome(source, catalog)，source 为 document / cache / static
        """
        logger.info(f"[Model Discovery] 从 AWS 文档获取最新模型目录: {self.catalog_url}")

        tiers = [('document', self._from_document)]
        if self.catalog_cache is not None:
            tiers.append(('cache', self._from_cache))
        tiers.append(('static', get_fallback_catalog))

        source, models = attempt_tiers(tiers, label='Model Discovery')
        catalog = enrich_catalog(models, self.matcher)

        logger.info(f"[Model Discovery] 目录中共 {len(catalog)} 个模型（来源: {source}）")
        return TierOutcome(source, catalog)

    def acquire_catalog(self) -> List[ResourceDescriptor]:
        """获取目录（不会失败）"""
        return self.acquire_with_source().value
