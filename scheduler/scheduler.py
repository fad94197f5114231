# -*- coding: utf-8 -*-
"""
定时任务实现模块

功能：
- 定时调用发现函数刷新结果
- 不关心凭证、区域、目录细节
- 只负责"什么时候刷新"
"""

import threading
import time
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class DiscoveryScheduler:
    """
    模型发现定时任务调度器

    职责：
    1. 每 refresh_interval 秒调用一次刷新函数
    2. 刷新函数异常只记录日志，不退出线程
    """

    def __init__(self, refresh_func: Callable, refresh_interval: int = 3600):
        """
        初始化定时任务调度器

        Args:
            refresh_func: 刷新函数（无参数）
            refresh_interval: 刷新间隔（秒），默认 3600（1 小时）
        """
        self.refresh_func = refresh_func
        self.refresh_interval = refresh_interval

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._last_run: Optional[float] = None
        self._last_error: Optional[str] = None

        logger.info(f"DiscoveryScheduler 初始化完成: refresh_interval={refresh_interval}s")

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def start(self):
        """启动后台刷新线程"""
        if self.running:
            logger.warning("定时任务已在运行")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._refresh_loop,
            name="DiscoveryRefreshThread",
            daemon=True
        )
        self._thread.start()
        logger.info("定时任务调度器已启动")

    def stop(self, timeout: float = 5.0):
        """停止定时任务（最多等待 timeout 秒）"""
        if self._thread is None:
            return

        logger.info("停止定时任务调度器...")
        self._stop_event.set()
        if self._thread.is_alive():
            self._thread.join(timeout=timeout)
        logger.info("定时任务调度器已停止")

    def run_once(self):
        """立即执行一次刷新"""
        logger.info("[Scheduler] discovery refresh triggered")
        try:
            self.refresh_func()
            self._last_error = None
            logger.info("[Scheduler] discovery refresh completed")
        except Exception as e:
            self._last_error = str(e)
            logger.error(f"[Scheduler] 发现刷新异常: {e}", exc_info=True)
        finally:
            self._last_run = time.time()

    def _refresh_loop(self):
        logger.info(f"[Scheduler] 刷新循环启动，间隔: {self.refresh_interval} 秒")

        # wait() 返回 True 表示收到停止信号
        while not self._stop_event.wait(self.refresh_interval):
            self.run_once()

        logger.info("[Scheduler] 刷新循环已退出")

    def get_status(self) -> dict:
        """
        获取定时任务状态

        Returns:
            状态信息字典
        """
        return {
            'running': self.running,
            'refresh_interval': self.refresh_interval,
            'last_run': self._last_run,
            'last_error': self._last_error,
        }
