# -*- coding: utf-8 -*-
"""
模型发现 Prometheus 指标模块

功能：
- 记录每次发现的可用模型数、目录大小、缺口数量
- 记录区域查询失败次数和发现耗时
- 提供指标数据供 /metrics 端点使用
"""

import logging
from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram, generate_latest

logger = logging.getLogger(__name__)


class DiscoveryMetrics:
    """
    模型发现指标

    registry 可注入，测试中每个用例使用独立的 CollectorRegistry
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or REGISTRY

        self.available_models = Gauge(
            'bedrock_available_models',
            'Number of Bedrock model ids invokable right now',
            ['region'],
            registry=self.registry
        )

        self.catalog_models = Gauge(
            'bedrock_catalog_models',
            'Number of models in the acquired catalog',
            ['source'],
            registry=self.registry
        )

        self.models_needing_access = Gauge(
            'bedrock_models_needing_access',
            'Number of catalog models without access that can be requested',
            ['region'],
            registry=self.registry
        )

        self.discovery_runs_total = Counter(
            'bedrock_discovery_runs_total',
            'Total number of discovery runs',
            ['catalog_source', 'access_source'],
            registry=self.registry
        )

        self.region_query_errors_total = Counter(
            'bedrock_region_query_errors_total',
            'Total number of failed per-region queries',
            ['region', 'query'],
            registry=self.registry
        )

        self.discovery_duration_seconds = Histogram(
            'bedrock_discovery_duration_seconds',
            'Duration of a discovery run in seconds',
            buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
            registry=self.registry
        )

    def observe(self, result, duration: float):
        """
        记录一次发现结果

        Args:
            result: DiscoveryResult
            duration: 耗时（秒）
        """
        region = result.region or 'unknown'

        self.available_models.labels(region=region).set(len(result.available_models))
        self.catalog_models.clear()
        self.catalog_models.labels(source=result.catalog_source).set(len(result.catalog_models))
        self.models_needing_access.labels(region=region).set(len(result.models_needing_access))
        self.discovery_runs_total.labels(
            catalog_source=result.catalog_source,
            access_source=result.access_source
        ).inc()
        self.discovery_duration_seconds.observe(duration)

        if result.catalog_source != 'document':
            logger.warning(f"[Metrics] 本次发现使用降级目录（来源: {result.catalog_source}）")

    def record_region_error(self, region: str, query: str):
        """记录一次区域查询失败"""
        self.region_query_errors_total.labels(region=region, query=query).inc()

    def get_metrics(self) -> str:
        """
        获取 Prometheus 格式的指标数据

        Returns:
            Prometheus text format 字符串
        """
        return generate_latest(self.registry).decode('utf-8')
