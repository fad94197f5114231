# -*- coding: utf-8 -*-
"""
文档页面获取模块
"""

import logging

import requests

from provider.bedrock.errors import TransportFailure

logger = logging.getLogger(__name__)

MODEL_IDS_URL = 'https://docs.aws.amazon.com/bedrock/latest/userguide/model-ids.html'

HEADERS = {
    'User-Agent': 'bedrock-model-discovery/1.0',
    'Accept': 'text/html',
}


def fetch_document(url: str = MODEL_IDS_URL, timeout: float = 15.0) -> str:
    """
    GET 文档页面并返回文本

    Raises:
        TransportFailure: 网络错误、超时或非 2xx 响应
    """
    logger.debug(f"获取文档页面: {url}")
    try:
        response = requests.get(url, headers=HEADERS, timeout=timeout)
    except requests.RequestException as e:
        raise TransportFailure(f"获取文档失败: {url}: {e}") from e

    if not response.ok:
        raise TransportFailure(f"获取文档失败: {url} 返回 HTTP {response.status_code}")

    return response.text
