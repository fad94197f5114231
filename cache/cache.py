# -*- coding: utf-8 -*-
"""
内存缓存模块

功能：
- 带 TTL 的线程安全键值缓存
- exporter 用它保存最近一次发现结果和待申请命令，MemoryCatalogCache 用它保存目录
"""

import threading
import time
from typing import Any, Dict, Optional, Tuple

# (value, expires_at)，expires_at 为 None 表示不过期
_Entry = Tuple[Any, Optional[float]]


class MemoryCache:
    """
    进程内缓存

    调度线程写入、HTTP 线程读取，所有访问都在同一把锁内完成
    """

    def __init__(self, default_ttl: Optional[int] = None):
        """
        Args:
            default_ttl: set() 未指定 ttl 时使用的生存时间（秒），None 表示不过期
        """
        self.default_ttl = default_ttl
        self._entries: Dict[str, _Entry] = {}
        self._lock = threading.RLock()

    @staticmethod
    def _expired(entry: _Entry, now: float) -> bool:
        expires_at = entry[1]
        return expires_at is not None and now > expires_at

    def get(self, key: str) -> Tuple[Optional[Any], bool]:
        """
        读取缓存

        Returns:
            (value, found)；值本身可以是 None 或空列表，是否命中以 found 为准
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None, False
            if self._expired(entry, time.time()):
                self._entries.pop(key, None)
                return None, False
            return entry[0], True

    def set(self, key: str, value: Any, ttl: Optional[int] = None):
        """
        写入缓存（覆盖旧值并重新计时）

        Args:
            key: 缓存键
            value: 任意值
            ttl: 生存时间（秒），None 时使用 default_ttl
        """
        if ttl is None:
            ttl = self.default_ttl
        expires_at = None if ttl is None else time.time() + ttl
        with self._lock:
            self._entries[key] = (value, expires_at)

    def delete(self, key: str):
        with self._lock:
            self._entries.pop(key, None)

    def clear(self):
        with self._lock:
            self._entries.clear()
