# -*- coding: utf-8 -*-
"""
Prometheus Collector 模块

功能：
- 记录模型发现结果相关的 Prometheus 指标
- 暴露 Prometheus 格式的指标
"""

from .discovery_metrics import DiscoveryMetrics
