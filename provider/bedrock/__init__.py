# -*- coding: utf-8 -*-
"""
Bedrock 模型发现模块

功能：
- 多区域查询可用模型
- 获取模型目录（文档 -> 缓存 -> 静态兜底）
- 解析访问状态并为缺口生成申请命令
"""
