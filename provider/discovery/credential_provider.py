# -*- coding: utf-8 -*-
"""
Credential Provider 实现

功能：
- 为模型发现提供 AWS Access Key 和 Secret Key
- 支持从环境变量读取凭证
- 未配置凭证时返回 None，由 boto3 默认凭证链接管
"""

import logging
import os
import time
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class CredentialProvider(ABC):
    """
    凭证 Provider 接口
    """

    @abstractmethod
    def get_credentials(self) -> Optional[Dict[str, str]]:
        """
        获取凭证

        Returns:
            凭证字典，包含 'access_key'、'secret_key'，可选 'session_token'；
            返回 None 表示使用 boto3 默认凭证链
        """
        pass

    @abstractmethod
    def get_provider_type(self) -> str:
        """
        获取 Provider 类型

        Returns:
            Provider 类型名称，如 "env", "static"
        """
        pass


class StaticCredentialProvider(CredentialProvider):
    """固定凭证（调用方已经持有凭证时使用）"""

    def __init__(self, access_key: str, secret_key: str, session_token: str = None):
        if not access_key or not secret_key:
            raise ValueError("access_key 和 secret_key 不能为空")
        self._credentials = {'access_key': access_key, 'secret_key': secret_key}
        if session_token:
            self._credentials['session_token'] = session_token

    def get_credentials(self) -> Optional[Dict[str, str]]:
        return self._credentials.copy()

    def get_provider_type(self) -> str:
        return "static"


class EnvCredentialProvider(CredentialProvider):
    """
    环境变量凭证 Provider

    读取 BEDROCK_ACCESS_KEY_ID / BEDROCK_SECRET_ACCESS_KEY（可选 BEDROCK_SESSION_TOKEN），
    结果缓存 cache_ttl 秒，便于轮换凭证
    """

    def __init__(self, prefix: str = 'BEDROCK', cache_ttl: int = 3600):
        """
        Args:
            prefix: 环境变量前缀
            cache_ttl: 缓存时间（秒，默认 1 小时）
        """
        self.prefix = prefix
        self.cache_ttl = cache_ttl
        self._cache: Optional[Tuple[Optional[Dict[str, str]], float]] = None  # (credentials, expiration_time)
        logger.info(f"初始化环境变量 Credential Provider（前缀: {prefix}）")

    def get_credentials(self) -> Optional[Dict[str, str]]:
        if self._cache is not None:
            credentials, expiration_time = self._cache
            if time.time() < expiration_time:
                return credentials.copy() if credentials else None
            self._cache = None

        access_key = os.getenv(f'{self.prefix}_ACCESS_KEY_ID')
        secret_key = os.getenv(f'{self.prefix}_SECRET_ACCESS_KEY')
        session_token = os.getenv(f'{self.prefix}_SESSION_TOKEN')

        credentials = None
        if access_key and secret_key:
            credentials = {'access_key': access_key, 'secret_key': secret_key}
            if session_token:
                credentials['session_token'] = session_token
            logger.debug(f"使用指定凭证（{access_key[:8]}...）")
        elif access_key or secret_key:
            logger.warning(f"{self.prefix} 凭证不完整，使用默认凭证链")
        else:
            logger.debug("未配置凭证，使用默认凭证链")

        self._cache = (credentials, time.time() + self.cache_ttl)
        return credentials.copy() if credentials else None

    def get_provider_type(self) -> str:
        return "env"

    def clear_cache(self):
        """清除缓存"""
        self._cache = None
