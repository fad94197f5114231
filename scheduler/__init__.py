# -*- coding: utf-8 -*-
"""
定时任务模块

功能：
- 按 refresh_interval 定时重新执行模型发现
- 在后台线程中运行，不阻塞主程序
"""

from scheduler.scheduler import DiscoveryScheduler

__all__ = ['DiscoveryScheduler']
