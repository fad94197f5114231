# -*- coding: utf-8 -*-
"""
Provider 模块
"""
