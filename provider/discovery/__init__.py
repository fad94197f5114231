# -*- coding: utf-8 -*-
"""
Provider Discovery 模块

功能：
- 抽象 CredentialProvider 接口
- 提供环境变量和固定凭证实现
"""

from .credential_provider import CredentialProvider, EnvCredentialProvider, StaticCredentialProvider

__all__ = [
    'CredentialProvider',
    'EnvCredentialProvider',
    'StaticCredentialProvider',
]
