# services/storage_base.py
"""
统一的存储接口。

持久存储（SqlStorage）与内存存储（MemoryStorage）都实现这一套方法，
可用性路由器（router.AvailabilityRouter）在两者之间切换，业务层只认这个接口。

约定：
- 查不到返回 None / False，不抛异常
- create / update 接收的是已经过 schemas 校验的字典
- 持久存储不可用时抛 BackendUnavailable，由路由器兜底
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

CONTENT_KINDS = ("scholarships", "articles", "countries", "universities", "news", "menu")
SLUG_KINDS = ("scholarships", "articles", "countries", "universities", "news")
SEARCH_KINDS = SLUG_KINDS
SAVABLE_KINDS = ("articles", "scholarships")

# 子串匹配的字段集合：持久存储的 ilike 兜底与内存存储共用一份，保证两边结果一致
SEARCH_FIELDS = {
    "scholarships": ("title", "description", "country"),
    "articles": ("title", "content", "summary"),
    "countries": ("name", "description"),
    "universities": ("name", "description", "country"),
    "news": ("title", "content", "summary"),
}


def _ranking_key(row: dict):
    r = row.get("ranking")
    return (r is None, r or 0)


def sort_entities(kind: str, rows: list[dict]) -> list[dict]:
    """内存存储的排序规则，对齐持久存储的 order_by"""
    if kind == "countries":
        return sorted(rows, key=lambda r: (r.get("name") or "").lower())
    if kind == "universities":
        return sorted(rows, key=_ranking_key)
    if kind == "news":
        return sorted(rows, key=lambda r: r.get("publishDate") or "", reverse=True)
    if kind in ("scholarships", "articles"):
        # 最新创建的在前
        return sorted(rows, key=lambda r: r["id"], reverse=True)
    return sorted(rows, key=lambda r: r["id"])


def matches(row: dict, kind: str, query: str) -> bool:
    q = query.lower()
    for f in SEARCH_FIELDS[kind]:
        v = row.get(f)
        if isinstance(v, str) and q in v.lower():
            return True
    return False


def unique_slug(base: str, taken) -> str:
    """slug 冲突时追加 -2、-3 …，不覆盖已有记录"""
    if base not in taken:
        return base
    n = 2
    while f"{base}-{n}" in taken:
        n += 1
    return f"{base}-{n}"


def empty_results() -> dict[str, list]:
    return {k: [] for k in SEARCH_KINDS}


class Storage(ABC):
    name = "storage"

    # ---- 内容 ----
    @abstractmethod
    def get_all(self, kind: str) -> list[dict]: ...

    @abstractmethod
    def get_by_id(self, kind: str, item_id: Any) -> Optional[dict]: ...

    @abstractmethod
    def get_by_slug(self, kind: str, slug: str) -> Optional[dict]: ...

    @abstractmethod
    def create(self, kind: str, data: dict) -> dict: ...

    @abstractmethod
    def update(self, kind: str, item_id: Any, data: dict) -> Optional[dict]: ...

    @abstractmethod
    def delete(self, kind: str, item_id: Any) -> bool: ...

    @abstractmethod
    def clear(self, kind: str) -> int: ...

    @abstractmethod
    def get_featured_news(self) -> list[dict]: ...

    @abstractmethod
    def search_kind(self, kind: str, query: str, limit: int) -> list[dict]: ...

    # ---- 管理员账号 ----
    @abstractmethod
    def create_user(self, data: dict) -> dict: ...

    @abstractmethod
    def get_user(self, user_id: Any) -> Optional[dict]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[dict]: ...

    # ---- 前台用户 ----
    @abstractmethod
    def create_active_user(self, data: dict) -> dict: ...

    @abstractmethod
    def get_active_user(self, user_id: Any) -> Optional[dict]: ...

    @abstractmethod
    def get_active_user_by_email(self, email: str) -> Optional[dict]: ...

    @abstractmethod
    def update_active_user(self, user_id: Any, data: dict) -> Optional[dict]: ...

    # ---- 点赞 ----
    @abstractmethod
    def like_article(self, article_id: Any, user_id: Any) -> Optional[int]: ...

    @abstractmethod
    def unlike_article(self, article_id: Any, user_id: Any) -> Optional[int]: ...

    @abstractmethod
    def has_liked(self, article_id: Any, user_id: Any) -> Optional[bool]: ...

    # ---- 收藏 ----
    @abstractmethod
    def save_item(self, user_id: Any, kind: str, item_id: Any) -> Optional[list]: ...

    @abstractmethod
    def unsave_item(self, user_id: Any, kind: str, item_id: Any) -> Optional[list]: ...

    # ---- 评论 ----
    @abstractmethod
    def add_comment(self, user_id: Any, article_id: Any, content: str) -> Optional[dict]: ...

    @abstractmethod
    def get_comment(self, comment_id: Any) -> Optional[dict]: ...

    @abstractmethod
    def update_comment(self, comment_id: Any, content: str) -> Optional[dict]: ...

    @abstractmethod
    def delete_comment(self, comment_id: Any) -> bool: ...

    @abstractmethod
    def comments_by_user(self, user_id: Any) -> list[dict]: ...

    @abstractmethod
    def comments_by_article(self, article_id: Any) -> list[dict]: ...


def as_int(value: Any) -> Optional[int]:
    """路径参数里的 id 统一转 int，非法值视为查不到"""
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
