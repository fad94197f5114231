# -*- coding: utf-8 -*-
"""
外部 API 访问模块（AWS SDK、签名 HTTP、文档页面）
"""
