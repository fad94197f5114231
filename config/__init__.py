# -*- coding: utf-8 -*-
"""
配置模块

功能：
- 从 YAML 加载模型发现配置
- 验证配置
"""
