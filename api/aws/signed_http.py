# -*- coding: utf-8 -*-
"""
AWS SigV4 签名 HTTP 客户端模块

功能：
- 为没有 boto3 操作封装的 Bedrock 端点发送 SigV4 签名请求
- 网络错误、超时和非 2xx 响应统一转换为 TransportFailure
"""

import logging
from typing import Any, Dict, Optional

import requests
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from api.aws.bedrock import create_session
from provider.bedrock.errors import TransportFailure

logger = logging.getLogger(__name__)


def resolve_credentials(credentials: Optional[Dict[str, str]] = None):
    """
    获取用于签名的凭证

    Args:
        credentials: 凭证字典（可选，为空时使用默认凭证链）
    """
    if credentials and credentials.get('access_key') and credentials.get('secret_key'):
        return Credentials(
            credentials['access_key'],
            credentials['secret_key'],
            credentials.get('session_token'),
        )
    return create_session().get_credentials()


class SignedHttpClient:
    """
    SigV4 签名 HTTP 客户端（单区域、单服务）
    """

    def __init__(self,
                 region: str,
                 credentials: Optional[Dict[str, str]] = None,
                 service: str = 'bedrock',
                 timeout: float = 10.0,
                 http_session: Optional[requests.Session] = None):
        """
        初始化签名客户端

        Args:
            region: AWS 区域
            credentials: 凭证字典（可选）
            service: 签名服务名
            timeout: 请求超时（秒）
            http_session: requests Session（可选，便于测试注入）
        """
        self.region = region
        self.service = service
        self.timeout = timeout
        self.endpoint = f"https://{service}.{region}.amazonaws.com"
        self._credentials = resolve_credentials(credentials)
        self._owns_session = http_session is None
        self._http = http_session or requests.Session()

    def close(self):
        """关闭自己创建的 requests Session（注入的 Session 由调用方管理）"""
        if self._owns_session:
            self._http.close()

    def request(self, method: str, path: str, params: Optional[Dict[str, str]] = None) -> requests.Response:
        """
        发送签名请求

        Raises:
            TransportFailure: 没有可用凭证或网络错误（含超时）
        """
        if self._credentials is None:
            raise TransportFailure("没有可用的 AWS 凭证，无法签名请求")

        aws_request = AWSRequest(
            method=method,
            url=f"{self.endpoint}{path}",
            params=params,
            headers={'Content-Type': 'application/x-amz-json-1.1'},
        )
        SigV4Auth(self._credentials, self.service, self.region).add_auth(aws_request)
        prepared = aws_request.prepare()

        try:
            return self._http.request(
                method,
                prepared.url,
                headers=dict(prepared.headers),
                data=prepared.body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportFailure(f"{method} {path} 请求失败（区域 {self.region}）: {e}") from e

    def get_json(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        """
        发送签名 GET 请求并解析 JSON

        Raises:
            TransportFailure: 网络错误、非 2xx 响应或响应不是合法 JSON
        """
        response = self.request('GET', path, params=params)
        if not response.ok:
            raise TransportFailure(f"GET {path} 返回 HTTP {response.status_code}（区域 {self.region}）")

        try:
            return response.json()
        except ValueError as e:
            raise TransportFailure(f"GET {path} 响应不是合法 JSON（区域 {self.region}）: {e}") from e
