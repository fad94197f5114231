# -*- coding: utf-8 -*-
"""
缓存模块

功能：
- MemoryCache: 带 TTL 的线程安全内存缓存
- CatalogCache: 模型目录的 last known good 缓存（内存 / 文件）
"""
