# -*- coding: utf-8 -*-
"""
多区域模型查询模块

功能：
- 在多个区域并发查询基础模型和跨区域推理 profile
- 单个区域 / 单个查询失败只记录日志，不影响其他查询
- 合并去重后按字典序返回
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from threading import Lock
from typing import Callable, Dict, Iterable, List, Optional, Union

from api.aws.bedrock import BedrockClient

logger = logging.getLogger(__name__)

MULTI_REGION = 'multi-region'
DEFAULT_KNOWN_REGIONS = ['us-west-2', 'us-east-1', 'eu-west-1', 'ap-northeast-1']

QUERY_FOUNDATION_MODELS = 'foundation-models'
QUERY_INFERENCE_PROFILES = 'inference-profiles'


class RegionFanoutQuery:
    """
    多区域模型查询引擎

    每个 (区域, 查询类型) 是一个独立的任务，并发数由任务数决定
    """

    def __init__(self,
                 known_regions: Optional[List[str]] = None,
                 client_factory: Callable[..., BedrockClient] = BedrockClient,
                 multi_region_sentinel: str = MULTI_REGION,
                 metrics=None):
        """
        初始化多区域查询引擎

        Args:
            known_regions: "multi-region" 展开后的区域列表
            client_factory: 客户端工厂 client_factory(region, credentials) -> BedrockClient
            multi_region_sentinel: 代表所有已知区域的标记
            metrics: DiscoveryMetrics（可选，用于记录区域查询失败）
        """
        self.known_regions = list(known_regions or DEFAULT_KNOWN_REGIONS)
        self.client_factory = client_factory
        self.multi_region_sentinel = multi_region_sentinel
        self.metrics = metrics

    def resolve_regions(self, regions: Union[str, Iterable[str], None]) -> List[str]:
        """展开区域参数（None 或 sentinel 表示所有已知区域），保持顺序去重"""
        if regions is None or regions == self.multi_region_sentinel:
            return list(self.known_regions)
        if isinstance(regions, str):
            regions = [regions]

        resolved = []
        for region in regions:
            if region == self.multi_region_sentinel:
                candidates = self.known_regions
            else:
                candidates = [region]
            for candidate in candidates:
                if candidate and candidate not in resolved:
                    resolved.append(candidate)
        return resolved

    def _query(self, region: str, kind: str, credentials, filters) -> List[str]:
        client = self.client_factory(region, credentials)
        if kind == QUERY_FOUNDATION_MODELS:
            return client.list_foundation_models(filters)
        return client.list_inference_profiles()

    def query_available(self,
                        credentials: Optional[Dict[str, str]] = None,
                        regions: Union[str, Iterable[str], None] = MULTI_REGION,
                        filters: Optional[Dict[str, str]] = None) -> List[str]:
        """
        查询在至少一个区域可以立即调用的模型 ID

        Args:
            credentials: 凭证字典（可选，为空时使用默认凭证链）
            regions: 区域列表、单个区域或 "multi-region"
            filters: 过滤条件（provider / output_modality / inference_type / customization_type）

        Returns:
            去重并按字典序排序的模型 ID 列表（可能为空，空结果不是错误）
        """
        filters = filters or {}
        region_list = self.resolve_regions(regions)

        filter_str = ', '.join(f"{key}={value}" for key, value in filters.items() if value)
        logger.info(f"[Region Query] 查询 {len(region_list)} 个区域: {region_list}"
                    f"{f' (filters: {filter_str})' if filter_str else ''}")

        tasks = [(region, kind) for region in region_list
                 for kind in (QUERY_FOUNDATION_MODELS, QUERY_INFERENCE_PROFILES)]
        if not tasks:
            return []

        all_models = set()
        models_lock = Lock()

        with ThreadPoolExecutor(max_workers=len(tasks)) as executor:
            future_to_task = {
                executor.submit(self._query, region, kind, credentials, filters): (region, kind)
                for region, kind in tasks
            }

            for future in as_completed(future_to_task):
                region, kind = future_to_task[future]
                try:
                    model_ids = future.result()
                except Exception as e:
                    # 不同区域开放的模型不同，部分失败是常态
                    logger.warning(f"[Region Query] 区域 {region} 查询 {kind} 失败: {e}")
                    if self.metrics is not None:
                        self.metrics.record_region_error(region, kind)
                    continue

                with models_lock:
                    all_models.update(model_ids)
                logger.debug(f"[Region Query] 区域 {region} {kind}: {len(model_ids)} 个")

        model_ids = sorted(all_models)
        logger.info(f"[Region Query] 共找到 {len(model_ids)} 个唯一模型")
        return model_ids
