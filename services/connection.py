# services/connection.py
"""
持久存储连接的进程级缓存。

- 第一次调用时探测一次连接（SELECT 1），成功后缓存结果，之后直接复用
- 并发请求在同一把锁上等待同一次探测，不会各自去连
- 失败不会被永久缓存：进入退避窗口（指数增长，有上限），窗口过后下一次调用重新探测
- 查询过程中出现基础设施错误时由调用方 invalidate()，下一次重新探测
"""
from __future__ import annotations

import logging
import threading
import time

from flask import current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from extensions import db

logger = logging.getLogger(__name__)


class DurableConnection:
    def __init__(self):
        self._lock = threading.Lock()
        self._ready = False
        self._failures = 0
        self._retry_at = 0.0
        self.last_error: str | None = None

    @property
    def ready(self) -> bool:
        return self._ready

    def _probe(self):
        with db.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        if current_app.config.get("DURABLE_AUTO_CREATE", True):
            db.create_all()

    def _backoff(self) -> float:
        base = float(current_app.config.get("DURABLE_RETRY_BACKOFF", 2))
        cap = float(current_app.config.get("DURABLE_RETRY_BACKOFF_MAX", 60))
        return min(cap, base * (2 ** max(self._failures - 1, 0)))

    def acquire(self) -> bool:
        """返回持久存储当前是否可用；需要在 app context 内调用"""
        if not current_app.config.get("DURABLE_STORE_ENABLED", False):
            self.last_error = "durable store not configured"
            return False
        if self._ready:
            return True

        with self._lock:
            if self._ready:
                return True
            if time.monotonic() < self._retry_at:
                return False
            try:
                self._probe()
            except SQLAlchemyError as e:
                self._failures += 1
                self._retry_at = time.monotonic() + self._backoff()
                self.last_error = str(e)
                logger.warning(f"⚠️ [持久存储] 连接失败（第 {self._failures} 次），{self._backoff():.1f}s 内走内存存储: {e}")
                return False

            self._ready = True
            self._failures = 0
            self._retry_at = 0.0
            self.last_error = None
            logger.info("✅ [持久存储] 连接成功")
            return True

    def invalidate(self, reason: str = ""):
        with self._lock:
            if self._ready:
                logger.warning(f"⚠️ [持久存储] 连接失效，下次调用重新探测: {reason}")
            self._ready = False
            self.last_error = reason or self.last_error

    def reset(self):
        with self._lock:
            self._ready = False
            self._failures = 0
            self._retry_at = 0.0
            self.last_error = None
