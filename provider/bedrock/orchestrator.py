# -*- coding: utf-8 -*-
"""
模型发现编排模块

功能：
- discover: 获取目录 -> 解析访问状态 -> 查询实际可用模型 -> 生成申请命令
- fetch_models: 先多区域查询，查询为空时降级到完整发现，最后使用静态列表
- 配置了 result_cache 时，每次发现后同步缺口模型的申请命令
- generate_provisioning_files: 为缺口模型生成申请文件

discover 不会抛异常：每个步骤都有自己的降级路径，全部失败时返回空的 DiscoveryResult
"""

import logging
import time
from typing import Dict, List, Optional

from cache.cache import MemoryCache
from cache.catalog_cache import CatalogCache
from provider.bedrock.access import AccessStatusResolver
from provider.bedrock.catalog import CatalogAcquisitionService
from provider.bedrock.commands import DEFAULT_ACCESS_REQUEST_REASON, DEFAULT_REGION, synthesize_commands
from provider.bedrock.fallback_catalog import STATIC_MODEL_IDS
from provider.bedrock.gating import GatedFamilyMatcher
from provider.bedrock.models import DiscoveryResult
from provider.bedrock.provisioning import ProvisioningArtifactGenerator, ProvisioningOptions
from provider.bedrock.region_query import MULTI_REGION, RegionFanoutQuery

logger = logging.getLogger(__name__)

# fetch_models 写入 result_cache 的键
PROVISIONING_COMMANDS_KEY = 'bedrock-provisioning-commands'
MODELS_NEEDING_ACCESS_KEY = 'bedrock-models-needing-access'


class DiscoveryOrchestrator:
    """
    模型发现编排器

    每次调用都是独立的，不在调用之间共享可变状态（result_cache 由调用方注入）
    """

    def __init__(self,
                 catalog_service: Optional[CatalogAcquisitionService] = None,
                 access_resolver: Optional[AccessStatusResolver] = None,
                 fanout: Optional[RegionFanoutQuery] = None,
                 default_region: str = DEFAULT_REGION,
                 access_request_reason: str = DEFAULT_ACCESS_REQUEST_REASON,
                 result_cache: Optional[MemoryCache] = None,
                 metrics=None):
        """
        Args:
            catalog_service: 目录获取服务
            access_resolver: 访问状态解析器
            fanout: 多区域查询引擎
            default_region: 默认区域，也是 multi-region 时的主区域
            access_request_reason: 申请命令中的理由文本
            result_cache: 保存待申请命令的缓存（可选）
            metrics: DiscoveryMetrics（可选）
        """
        self.catalog_service = catalog_service or CatalogAcquisitionService()
        self.access_resolver = access_resolver or AccessStatusResolver()
        self.fanout = fanout or RegionFanoutQuery()
        self.default_region = default_region
        self.access_request_reason = access_request_reason
        self.result_cache = result_cache
        self.metrics = metrics

    @classmethod
    def from_config(cls,
                    config,
                    catalog_cache: Optional[CatalogCache] = None,
                    result_cache: Optional[MemoryCache] = None,
                    metrics=None) -> 'DiscoveryOrchestrator':
        """
        根据 DiscoveryConfig 组装各组件

        Args:
            config: config.loader.DiscoveryConfig
            catalog_cache: 目录缓存（可选）
            result_cache: 结果缓存（可选）
            metrics: DiscoveryMetrics（可选）
        """
        from api.aws.bedrock import BedrockClient
        from api.aws.signed_http import SignedHttpClient

        matcher = GatedFamilyMatcher(config.gated_patterns)

        def bedrock_client(region, credentials):
            return BedrockClient(
                region,
                credentials,
                connect_timeout=config.connect_timeout,
                read_timeout=config.request_timeout,
                max_retries=config.max_retries,
            )

        return cls(
            catalog_service=CatalogAcquisitionService(
                matcher=matcher,
                catalog_url=config.catalog_url,
                timeout=config.request_timeout,
                catalog_cache=catalog_cache,
            ),
            access_resolver=AccessStatusResolver(
                matcher=matcher,
                http_client_factory=SignedHttpClient,
                timeout=config.request_timeout,
            ),
            fanout=RegionFanoutQuery(
                known_regions=config.known_regions,
                client_factory=bedrock_client,
                multi_region_sentinel=config.multi_region_sentinel,
                metrics=metrics,
            ),
            default_region=config.primary_region,
            access_request_reason=config.access_request_reason,
            result_cache=result_cache,
            metrics=metrics,
        )

    def discover(self, credentials: Optional[Dict[str, str]] = None, region: Optional[str] = None) -> DiscoveryResult:
        """
        完整的模型发现

        Args:
            credentials: 凭证字典（可选，为空时使用默认凭证链）
            region: 区域（默认 default_region）

        Returns:
            DiscoveryResult（不会抛异常）
        """
        region = region or self.default_region
        start_time = time.time()
        logger.info(f"[Smart Model Discovery] 开始模型发现，区域: {region}")

        # 1. 获取目录
        try:
            catalog_source, catalog = self.catalog_service.acquire_with_source()
        except Exception as e:
            logger.error(f"[Smart Model Discovery] 获取目录失败: {e}", exc_info=True)
            catalog_source, catalog = 'none', []

        # 2. 解析目录中每个模型的访问状态
        model_ids = [model.model_id for model in catalog]
        try:
            access_source, statuses = self.access_resolver.check_with_source(credentials, region, model_ids)
        except Exception as e:
            logger.error(f"[Smart Model Discovery] 解析访问状态失败: {e}", exc_info=True)
            access_source, statuses = 'none', []

        # 3. 查询实际可用的模型（不按目录过滤）
        try:
            available_models = self.fanout.query_available(credentials, [region])
        except Exception as e:
            logger.error(f"[Smart Model Discovery] 查询可用模型失败: {e}", exc_info=True)
            available_models = []

        # 4. 为缺口生成申请命令
        try:
            commands = synthesize_commands(statuses, region, self.access_request_reason)
        except Exception as e:
            logger.error(f"[Smart Model Discovery] 生成申请命令失败: {e}", exc_info=True)
            commands = []

        result = DiscoveryResult(
            available_models=tuple(sorted(set(available_models))),
            catalog_models=tuple(catalog),
            access_statuses=tuple(statuses),
            request_commands=tuple(commands),
            catalog_source=catalog_source,
            access_source=access_source,
            region=region,
            generated_at=time.time(),
        )

        duration = time.time() - start_time
        logger.info(f"[Smart Model Discovery] 找到 {len(result.available_models)} 个可用模型，"
                    f"{len(result.models_needing_access)} 个需要申请访问权限（耗时 {duration:.2f} 秒）")

        self._remember_commands(result)
        if self.metrics is not None:
            self.metrics.observe(result, duration)
        return result

    def _remember_commands(self, result: DiscoveryResult):
        """每次发现后同步 result_cache 中的申请命令，缺口全部关闭时删除旧命令"""
        if self.result_cache is None:
            return
        if result.request_commands:
            logger.info("[Smart Model Discovery] 已保存缺口模型的申请命令")
            self.result_cache.set(PROVISIONING_COMMANDS_KEY,
                                  [group.render() for group in result.request_commands])
            self.result_cache.set(MODELS_NEEDING_ACCESS_KEY, result.models_needing_access)
        else:
            self.result_cache.delete(PROVISIONING_COMMANDS_KEY)
            self.result_cache.delete(MODELS_NEEDING_ACCESS_KEY)

    def fetch_models(self,
                     credentials: Optional[Dict[str, str]] = None,
                     selected_region: str = MULTI_REGION,
                     filters: Optional[Dict[str, str]] = None) -> List[str]:
        """
        获取可用的模型 ID 列表

        策略：
        - 先做多区域查询，有结果直接返回
        - 没有结果时在主区域做完整发现，返回可用模型，没有可用模型时返回目录模型
        - 发现流程异常时返回静态模型列表

        Args:
            credentials: 凭证字典
            selected_region: 区域或 "multi-region"
            filters: 过滤条件（原样传给 ListFoundationModels）
        """
        model_ids = self.fanout.query_available(credentials, selected_region, filters)
        if model_ids:
            return model_ids

        logger.info("[fetchBedrockModels] 多区域查询没有找到模型，使用完整发现...")
        primary_region = self.default_region if selected_region == self.fanout.multi_region_sentinel else selected_region

        try:
            discovery = self.discover(credentials, primary_region)
        except Exception as e:
            logger.error(f"[fetchBedrockModels] 完整发现失败: {e}", exc_info=True)
            logger.info("[fetchBedrockModels] 使用静态模型列表")
            return list(STATIC_MODEL_IDS)

        logger.info(f"[fetchBedrockModels] 目录中 {len(discovery.catalog_models)} 个模型，"
                    f"{len(discovery.models_needing_access)} 个需要申请访问权限")

        if discovery.available_models:
            return list(discovery.available_models)
        return [model.model_id for model in discovery.catalog_models]

    def generate_provisioning_files(self,
                                    generator: ProvisioningArtifactGenerator,
                                    credentials: Optional[Dict[str, str]] = None,
                                    region: Optional[str] = None) -> Dict[str, str]:
        """
        为缺口模型生成申请文件

        Returns:
            {文件名: 文件内容}，没有缺口或生成失败时返回空字典
        """
        region = region or self.default_region
        try:
            discovery = self.discover(credentials, region)
            models_needing_access = discovery.models_needing_access

            if not models_needing_access:
                logger.info("[Provisioning] 没有需要申请访问权限的模型")
                return {}

            options = ProvisioningOptions(region=region, reason=self.access_request_reason)
            files = generator.create_files(models_needing_access, options)

            logger.info(f"[Provisioning] 为 {len(models_needing_access)} 个模型生成了 {len(files)} 个申请文件")
            return files
        except Exception as e:
            logger.error(f"[Provisioning] 生成申请文件失败: {e}", exc_info=True)
            return {}
