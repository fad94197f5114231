# -*- coding: utf-8 -*-
"""
AWS API 客户端

功能：
- BedrockClient: ListFoundationModels / ListInferenceProfiles
- SignedHttpClient: SigV4 签名的 HTTP 请求
"""
