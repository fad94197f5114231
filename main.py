#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Bedrock Model Discovery Exporter 主程序入口

功能：
- 启动 Flask HTTP 服务器
- 定时执行模型发现并缓存最新结果
- 暴露 /metrics 端点供 Prometheus 抓取
- 暴露 /discovery、/models 查询发现结果，/health 健康检查
"""

from flask import Flask, jsonify, request
from prometheus_client import CONTENT_TYPE_LATEST
import logging
import os
import sys
from typing import Optional

from config.loader import load_discovery_config
from cache.cache import MemoryCache
from cache.catalog_cache import FileCatalogCache
from collector import DiscoveryMetrics
from provider.bedrock.models import DiscoveryResult
from provider.bedrock.orchestrator import (
    DiscoveryOrchestrator,
    MODELS_NEEDING_ACCESS_KEY,
    PROVISIONING_COMMANDS_KEY,
)
from provider.discovery import CredentialProvider, EnvCredentialProvider
from scheduler import DiscoveryScheduler

# 配置日志
logging.basicConfig(
    level=getattr(logging, os.getenv('LOG_LEVEL', 'INFO').upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# 减少 Flask / botocore 日志
logging.getLogger('werkzeug').setLevel(logging.WARNING)
logging.getLogger('botocore').setLevel(logging.WARNING)

LATEST_RESULT_KEY = 'bedrock-discovery-result'

# 创建 Flask 应用
app = Flask(__name__)

# 全局变量（在 main 函数中初始化）
scheduler: Optional[DiscoveryScheduler] = None
_orchestrator: Optional[DiscoveryOrchestrator] = None
_credential_provider: Optional[CredentialProvider] = None
_metrics: Optional[DiscoveryMetrics] = None
_result_cache: Optional[MemoryCache] = None


def _get_credentials():
    if _credential_provider is None:
        return None
    try:
        return _credential_provider.get_credentials()
    except Exception as e:
        logger.warning(f"[Exporter] 获取凭证失败: {e}，使用默认凭证链")
        return None


def run_discovery(region: str = None) -> Optional[DiscoveryResult]:
    """
    执行一次模型发现并缓存结果

    供 Scheduler 和 /trigger/discovery 调用
    """
    if _orchestrator is None or _result_cache is None:
        logger.error("[Exporter] 发现组件未初始化，无法执行模型发现")
        return None

    result = _orchestrator.discover(_get_credentials(), region)
    _result_cache.set(LATEST_RESULT_KEY, result)
    return result


@app.route('/metrics')
def metrics():
    """
    Prometheus metrics 端点
    """
    if _metrics is None:
        return "# Exporter not initialized\n", 200, {'Content-Type': CONTENT_TYPE_LATEST}

    return _metrics.get_metrics(), 200, {'Content-Type': CONTENT_TYPE_LATEST}


@app.route('/health')
def health():
    """
    健康检查端点
    """
    status = {'status': 'healthy'}

    if scheduler:
        status['scheduler'] = scheduler.get_status()

    if _result_cache is not None:
        result, exists = _result_cache.get(LATEST_RESULT_KEY)
        status['last_discovery'] = result.generated_at if exists else None

    return status, 200


@app.route('/discovery')
def discovery():
    """
    返回最近一次的发现结果（JSON）
    """
    if _result_cache is None:
        return jsonify({'success': False, 'error': 'Exporter 未初始化'}), 503

    result, exists = _result_cache.get(LATEST_RESULT_KEY)
    if not exists:
        return jsonify({'success': False, 'error': '还没有完成过模型发现'}), 503

    return jsonify(result.to_dict()), 200


@app.route('/trigger/discovery', methods=['POST'])
def trigger_discovery():
    """
    手动触发模型发现

    可选参数 ?region=us-east-1
    """
    if _orchestrator is None:
        return jsonify({'success': False, 'error': 'Exporter 未初始化，无法执行发现'}), 503

    region = request.args.get('region')
    logger.info(f"[手动触发] 开始模型发现（区域: {region or '默认'}）...")

    result = run_discovery(region)
    if result is None:
        return jsonify({'success': False, 'error': '模型发现未执行'}), 503

    return jsonify({
        'success': True,
        'region': result.region,
        'available_count': len(result.available_models),
        'catalog_count': len(result.catalog_models),
        'models_needing_access': result.models_needing_access,
        'catalog_source': result.catalog_source,
        'access_source': result.access_source,
    }), 200


@app.route('/models')
def models():
    """
    查询可用模型 ID（多区域查询，查询为空时降级到完整发现）

    可选参数：region, provider, output_modality, inference_type, customization_type
    """
    if _orchestrator is None:
        return jsonify({'success': False, 'error': 'Exporter 未初始化'}), 503

    region = request.args.get('region') or _orchestrator.fanout.multi_region_sentinel
    filters = {
        key: request.args.get(key)
        for key in ('provider', 'output_modality', 'inference_type', 'customization_type')
        if request.args.get(key)
    }

    model_ids = _orchestrator.fetch_models(_get_credentials(), region, filters)

    body = {'success': True, 'region': region, 'models': model_ids}
    if _result_cache is not None:
        commands, exists = _result_cache.get(PROVISIONING_COMMANDS_KEY)
        if exists:
            body['provisioning_commands'] = commands
            body['models_needing_access'] = _result_cache.get(MODELS_NEEDING_ACCESS_KEY)[0]
    return jsonify(body), 200


def main():
    """
    主函数

    1. 加载配置
    2. 初始化发现组件
    3. 执行初始发现
    4. 启动定时任务和 HTTP 服务器
    """
    global scheduler, _orchestrator, _credential_provider, _metrics, _result_cache

    logger.info("=" * 60)
    logger.info("Bedrock Model Discovery Exporter 启动")
    logger.info("=" * 60)

    try:
        config = load_discovery_config()
    except Exception as e:
        logger.error(f"加载配置失败: {e}")
        sys.exit(1)

    logger.info(f"主区域: {config.primary_region}")
    logger.info(f"已知区域: {config.known_regions}")
    logger.info(f"受限模型族: {config.gated_patterns}")
    logger.info(f"刷新间隔: {config.refresh_interval} 秒")

    _metrics = DiscoveryMetrics()
    _result_cache = MemoryCache()
    _credential_provider = EnvCredentialProvider()
    catalog_cache = FileCatalogCache(cache_dir=config.catalog_cache_dir, ttl=config.catalog_cache_ttl)

    _orchestrator = DiscoveryOrchestrator.from_config(
        config,
        catalog_cache=catalog_cache,
        result_cache=_result_cache,
        metrics=_metrics,
    )

    # 初始发现（discover 不会抛异常，降级情况体现在结果内容中）
    logger.info("=" * 60)
    logger.info("执行初始模型发现")
    logger.info("=" * 60)
    result = run_discovery()
    if result is not None:
        logger.info(f"初始发现完成: 可用={len(result.available_models)}, 目录={len(result.catalog_models)}"
                    f"（{result.catalog_source}）, 待申请={len(result.models_needing_access)}")
        for group in result.request_commands:
            logger.info(f"申请命令:\n{group.render()}")

    scheduler = DiscoveryScheduler(refresh_func=run_discovery, refresh_interval=config.refresh_interval)
    scheduler.start()

    port = int(os.getenv('EXPORTER_PORT', '8000'))
    logger.info(f"Starting HTTP server on port {port}")
    print(f"\n{'=' * 60}")
    print("Exporter 已启动")
    print(f"访问 http://localhost:{port}/metrics 查看指标")
    print(f"访问 http://localhost:{port}/discovery 查看最新发现结果")
    print(f"访问 http://localhost:{port}/health 查看健康状态")
    print(f"{'=' * 60}\n")
    app.run(host='0.0.0.0', port=port, debug=False)


if __name__ == '__main__':
    main()
