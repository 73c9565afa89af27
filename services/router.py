# services/router.py
"""
可用性路由器：业务层唯一的存储入口。

每个操作先在持久存储上执行，抛出 BackendUnavailable 时改在内存存储上执行同一个操作，
并记一条 WARNING（类型 / 操作 / 原因）。校验失败、冲突等数据层面的错误原样抛给调用方。
写操作在触达任何存储之前先过 schemas 校验。
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from flask import current_app

from schemas import (
    ActiveUserIn,
    ActiveUserPatch,
    CommentIn,
    UserIn,
    parse,
    validate,
    validate_patch,
)
from services.connection import DurableConnection
from services.errors import BackendUnavailable, ConflictError, ValidationFailure
from services.memory_storage import MemoryStorage
from services.search import search as fan_out_search
from services.sql_storage import SqlStorage
from services.storage_base import CONTENT_KINDS, Storage

logger = logging.getLogger(__name__)


def _with_fallback(name: str, op: Callable) -> Callable:
    """
    把 op(backend, *args) 包成统一操作：
    持久存储不可用 -> 同一个 op 在内存存储上重跑
    """
    def unified(self, *args):
        try:
            return op(self.durable, *args)
        except BackendUnavailable as e:
            kind = next((a for a in args if isinstance(a, str) and a in CONTENT_KINDS), "-")
            logger.warning(f"⚠️ [存储路由] {kind}.{name} 改走内存存储: {e.msg}")
            return op(self.ephemeral, *args)

    unified.__name__ = name
    return unified


def _delegate(name: str) -> Callable:
    return _with_fallback(name, lambda backend, *args: getattr(backend, name)(*args))


def _require_kind(kind: str):
    if kind not in CONTENT_KINDS:
        raise ValidationFailure(f"Unknown content kind: {kind}")


# ---- 需要在单个后端内完成“读-校验-写”的组合操作 ----

def _update_op(backend: Storage, kind: str, item_id: Any, patch: dict) -> Optional[dict]:
    current = backend.get_by_id(kind, item_id)
    if current is None:
        return None
    return backend.update(kind, item_id, validate_patch(kind, current, patch))


def _create_user_op(backend: Storage, data: dict) -> dict:
    if backend.get_user_by_username(data["username"]):
        raise ConflictError("Username already exists", [{"field": "username", "message": "already taken"}])
    return backend.create_user(data)


def _create_active_user_op(backend: Storage, data: dict) -> dict:
    if backend.get_active_user_by_email(data["email"]):
        raise ConflictError("User already exists", [{"field": "email", "message": "already registered"}])
    return backend.create_active_user(data)


class AvailabilityRouter:
    def __init__(self, durable: Storage, ephemeral: Storage):
        self.durable = durable
        self.ephemeral = ephemeral

    def durable_available(self) -> bool:
        conn = getattr(self.durable, "connection", None)
        return bool(conn and conn.acquire())

    # ========== 内容 ==========
    get_all = _delegate("get_all")
    get_by_id = _delegate("get_by_id")
    get_by_slug = _delegate("get_by_slug")
    delete = _delegate("delete")
    get_featured_news = _delegate("get_featured_news")
    search_kind = _delegate("search_kind")
    _create = _delegate("create")
    _update = _with_fallback("update", _update_op)

    def create(self, kind: str, payload: Any) -> dict:
        _require_kind(kind)
        return self._create(kind, validate(kind, payload))

    def update(self, kind: str, item_id: Any, patch: Any) -> Optional[dict]:
        _require_kind(kind)
        if not isinstance(patch, dict):
            raise ValidationFailure("Request body must be a JSON object")
        return self._update(kind, item_id, patch)

    def search(self, query: str, limit: int | None = None) -> dict:
        return fan_out_search(self, query, limit)

    # ========== 管理员账号 ==========
    get_user = _delegate("get_user")
    get_user_by_username = _delegate("get_user_by_username")
    _create_user = _with_fallback("create_user", _create_user_op)

    def create_user(self, payload: Any) -> dict:
        return self._create_user(parse(UserIn, payload))

    # ========== 前台用户 ==========
    get_active_user = _delegate("get_active_user")
    get_active_user_by_email = _delegate("get_active_user_by_email")
    _create_active_user = _with_fallback("create_active_user", _create_active_user_op)
    _update_active_user = _delegate("update_active_user")

    def create_active_user(self, payload: Any) -> dict:
        return self._create_active_user(parse(ActiveUserIn, payload))

    def update_active_user(self, user_id: Any, payload: Any) -> Optional[dict]:
        data = {k: v for k, v in parse(ActiveUserPatch, payload).items() if v is not None}
        return self._update_active_user(user_id, data)

    # ========== 点赞 / 收藏 ==========
    like_article = _delegate("like_article")
    unlike_article = _delegate("unlike_article")
    has_liked = _delegate("has_liked")
    save_item = _delegate("save_item")
    unsave_item = _delegate("unsave_item")

    # ========== 评论 ==========
    get_comment = _delegate("get_comment")
    delete_comment = _delegate("delete_comment")
    comments_by_user = _delegate("comments_by_user")
    comments_by_article = _delegate("comments_by_article")
    _add_comment = _delegate("add_comment")
    _update_comment = _delegate("update_comment")

    def add_comment(self, user_id: Any, article_id: Any, content: Any) -> Optional[dict]:
        data = parse(CommentIn, {"content": content})
        return self._add_comment(user_id, article_id, data["content"])

    def update_comment(self, comment_id: Any, content: Any) -> Optional[dict]:
        data = parse(CommentIn, {"content": content})
        return self._update_comment(comment_id, data["content"])


def init_storage(app) -> AvailabilityRouter:
    router = AvailabilityRouter(SqlStorage(DurableConnection()), MemoryStorage())
    app.extensions["storage"] = router
    return router


def get_storage() -> AvailabilityRouter:
    return current_app.extensions["storage"]
