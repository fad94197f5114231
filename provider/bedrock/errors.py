# -*- coding: utf-8 -*-
"""
模型发现异常定义

功能：
- TransportFailure: 上游网络 / HTTP 错误
- ParseFailure: 文档结构无法识别
- EmptyResult: 查询成功但没有结果

说明：这些异常只在各个 tier 内部抛出，由 tier 组合器处理，不会传播给 discover 的调用方
"""


class DiscoveryError(Exception):
    """模型发现异常基类"""
    pass


class TransportFailure(DiscoveryError):
    """网络错误或非 2xx 响应"""
    pass


class ParseFailure(DiscoveryError):
    """文档结构无法识别（如找不到模型表格）"""
    pass


class EmptyResult(DiscoveryError):
    """查询成功但结果为空"""
    pass


class TiersExhausted(DiscoveryError):
    """所有 tier 都失败"""
    pass
