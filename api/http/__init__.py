# -*- coding: utf-8 -*-
"""
普通 HTTP 文档获取
"""
