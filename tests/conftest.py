"""
tests/conftest.py - pytest 公共 fixture

提供文档页面样例、假的 Bedrock 客户端、假的签名客户端和独立的 Prometheus registry

Usage:
    def test_something(model_ids_html, fake_bedrock_factory):
        factory = fake_bedrock_factory({'us-west-2': {'foundation': [...], 'profiles': [...]}})
"""

import os
from typing import Dict, List
from unittest.mock import MagicMock

import pytest
from prometheus_client import CollectorRegistry

from provider.bedrock.errors import TransportFailure


# =============================================================================
# 环境设置
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """清除会影响配置加载和凭证的环境变量"""
    for name in (
        'DISCOVERY_CONFIG_PATH',
        'BEDROCK_REGION',
        'DISCOVERY_REFRESH_INTERVAL',
        'CATALOG_CACHE_DIR',
        'CATALOG_CACHE_TTL',
        'BEDROCK_ACCESS_KEY_ID',
        'BEDROCK_SECRET_ACCESS_KEY',
        'BEDROCK_SESSION_TOKEN',
    ):
        monkeypatch.delenv(name, raising=False)
    os.environ.setdefault('AWS_DEFAULT_REGION', 'us-west-2')
    yield


# =============================================================================
# 文档页面样例
# =============================================================================


MODEL_IDS_HTML = """
<html>
<body>
  <h1>Supported foundation models in Amazon Bedrock</h1>
  <table>
    <tr><th>Region</th><th>Endpoint</th></tr>
    <tr><td>us-east-1</td><td>bedrock.us-east-1.amazonaws.com</td></tr>
  </table>
  <table>
    <thead>
      <tr>
        <th>Provider</th>
        <th>Model name</th>
        <th>Model ID</th>
        <th>Regions supported</th>
        <th>Input modalities</th>
        <th>Output modalities</th>
        <th>Streaming supported</th>
      </tr>
    </thead>
    <tbody>
      <tr>
        <td>Anthropic</td>
        <td>Claude 3.5 Sonnet v2</td>
        <td><code>anthropic.claude-3-5-sonnet-20241022-v2:0</code></td>
        <td><p>us-east-1</p><p>us-west-2</p><p>*</p></td>
        <td>Text, Image</td>
        <td>Text, Chat</td>
        <td>Yes</td>
      </tr>
      <tr>
        <td>Anthropic</td>
        <td>Claude Sonnet 4.5</td>
        <td><code>anthropic.claude-sonnet-4-5-20250929-v1:0</code></td>
        <td>us-east-1 us-east-2 us-west-2</td>
        <td>Text, Image</td>
        <td>Text, Chat</td>
        <td>Yes</td>
      </tr>
      <tr>
        <td>Amazon</td>
        <td>Nova Lite</td>
        <td><code>amazon.nova-lite-v1:0</code></td>
        <td>us-east-1</td>
        <td>Text, Image, Video</td>
        <td>Text</td>
        <td>No</td>
      </tr>
      <tr>
        <td>Anthropic</td>
        <td>Claude 3.5 Sonnet v2 (duplicate)</td>
        <td><code>anthropic.claude-3-5-sonnet-20241022-v2:0</code></td>
        <td>eu-west-1</td>
        <td>Text</td>
        <td>Text</td>
        <td>Yes</td>
      </tr>
      <tr>
        <td>Broken</td>
        <td>Too few cells</td>
      </tr>
      <tr>
        <td></td>
        <td>No provider</td>
        <td>someone.model-v1:0</td>
        <td>us-east-1</td>
        <td>Text</td>
        <td>Text</td>
        <td>No</td>
      </tr>
    </tbody>
  </table>
</body>
</html>
"""

NO_MODEL_TABLE_HTML = """
<html>
<body>
  <table>
    <tr><th>Name</th><th>Description</th></tr>
    <tr><td>foo</td><td>bar</td></tr>
  </table>
</body>
</html>
"""

HEADERS_ONLY_HTML = """
<html>
<body>
  <table>
    <tr><th>Provider</th><th>Model name</th><th>Model ID</th><th>Regions supported</th></tr>
  </table>
</body>
</html>
"""


@pytest.fixture
def model_ids_html():
    """包含一个模型表格的文档页面"""
    return MODEL_IDS_HTML


@pytest.fixture
def no_model_table_html():
    """没有模型表格的文档页面"""
    return NO_MODEL_TABLE_HTML


@pytest.fixture
def headers_only_html():
    """只有表头没有数据行的文档页面"""
    return HEADERS_ONLY_HTML


# =============================================================================
# 假的 AWS 客户端
# =============================================================================


class FakeBedrockClient:
    """
    按区域返回预设结果的 Bedrock 客户端

    预设值为 Exception 实例时抛出该异常
    """

    def __init__(self, region: str, responses: Dict[str, Dict], calls: List):
        self.region = region
        self._responses = responses.get(region, {})
        self._calls = calls

    def _result(self, key: str):
        value = self._responses.get(key, [])
        if isinstance(value, Exception):
            raise value
        return list(value)

    def list_foundation_models(self, filters=None):
        self._calls.append((self.region, 'foundation', dict(filters or {})))
        return self._result('foundation')

    def list_inference_profiles(self):
        self._calls.append((self.region, 'profiles', None))
        return self._result('profiles')


@pytest.fixture
def fake_bedrock_factory():
    """
    构造 client_factory(region, credentials)

    返回的工厂带有 calls 属性，记录每次查询的 (region, kind, filters)
    """

    def build(responses: Dict[str, Dict]):
        calls = []

        def factory(region, credentials=None):
            return FakeBedrockClient(region, responses, calls)

        factory.calls = calls
        return factory

    return build


@pytest.fixture
def fake_signed_factory():
    """
    构造 http_client_factory(region, credentials, timeout=...)

    payload 为 Exception 实例时 get_json 抛出该异常
    """

    def build(payload):
        client = MagicMock()
        if isinstance(payload, Exception):
            client.get_json.side_effect = payload
        else:
            client.get_json.return_value = payload
        factory = MagicMock(return_value=client)
        return factory

    return build


@pytest.fixture
def transport_failure():
    return TransportFailure("connection reset")


# =============================================================================
# Prometheus
# =============================================================================


@pytest.fixture
def registry():
    """每个用例独立的 CollectorRegistry"""
    return CollectorRegistry()
