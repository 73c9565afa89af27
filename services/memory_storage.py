# services/memory_storage.py
"""
进程内的兜底存储：持久存储不可用时由路由器切过来。

- 每个类型一个 dict（插入有序），key 为自增 int id，从 1 开始，删除后不复用
- Flask 多线程处理请求，自增 + 写入放在同一把锁里
- 数据只活在进程生命周期内
"""
from __future__ import annotations

import copy
import threading
from collections import defaultdict
from datetime import datetime
from typing import Any, Optional

from services.storage_base import (
    CONTENT_KINDS,
    SAVABLE_KINDS,
    SLUG_KINDS,
    Storage,
    as_int,
    matches,
    sort_entities,
    unique_slug,
)
from services.sample_data import MENU_ITEMS

_SAVED_FIELD = {"articles": "savedArticles", "scholarships": "savedScholarships"}


class MemoryStorage(Storage):
    name = "ephemeral"

    def __init__(self, seed_menu: bool = True):
        self._lock = threading.RLock()
        self._rows: dict[str, dict[int, dict]] = {k: {} for k in CONTENT_KINDS}
        self._users: dict[int, dict] = {}
        self._active_users: dict[int, dict] = {}
        self._comments: dict[int, dict] = {}
        # 评论的两个二级索引：按用户、按文章
        self._comments_by_user: dict[int, list[int]] = defaultdict(list)
        self._comments_by_article: dict[int, list[int]] = defaultdict(list)
        self._counters: dict[str, int] = defaultdict(lambda: 1)

        if seed_menu:
            for item in MENU_ITEMS:
                self.create("menu", copy.deepcopy(item))

    def _next_id(self, name: str) -> int:
        nid = self._counters[name]
        self._counters[name] = nid + 1
        return nid

    # ========== 内容 ==========
    def get_all(self, kind: str) -> list[dict]:
        with self._lock:
            rows = [copy.deepcopy(r) for r in self._rows[kind].values()]
        return sort_entities(kind, rows)

    def get_by_id(self, kind: str, item_id: Any) -> Optional[dict]:
        nid = as_int(item_id)
        with self._lock:
            row = self._rows[kind].get(nid)
            return copy.deepcopy(row) if row else None

    def get_by_slug(self, kind: str, slug: str) -> Optional[dict]:
        with self._lock:
            for row in self._rows[kind].values():
                if row.get("slug") == slug:
                    return copy.deepcopy(row)
        return None

    def create(self, kind: str, data: dict) -> dict:
        row = copy.deepcopy(data)
        row.pop("id", None)
        with self._lock:
            if kind in SLUG_KINDS:
                taken = {r["slug"] for r in self._rows[kind].values()}
                row["slug"] = unique_slug(row["slug"], taken)
            if kind == "articles":
                row["likes"] = []
            row["id"] = self._next_id(kind)
            self._rows[kind][row["id"]] = row
            return copy.deepcopy(row)

    def update(self, kind: str, item_id: Any, data: dict) -> Optional[dict]:
        nid = as_int(item_id)
        with self._lock:
            row = self._rows[kind].get(nid)
            if row is None:
                return None
            patch = {k: v for k, v in copy.deepcopy(data).items() if k not in ("id", "likes")}
            if kind in SLUG_KINDS and patch.get("slug") and patch["slug"] != row["slug"]:
                taken = {r["slug"] for i, r in self._rows[kind].items() if i != nid}
                patch["slug"] = unique_slug(patch["slug"], taken)
            row.update(patch)
            return copy.deepcopy(row)

    def delete(self, kind: str, item_id: Any) -> bool:
        nid = as_int(item_id)
        with self._lock:
            if self._rows[kind].pop(nid, None) is None:
                return False
            self._drop_references(kind, {nid})
            return True

    def clear(self, kind: str) -> int:
        with self._lock:
            ids = set(self._rows[kind])
            self._rows[kind].clear()
            self._drop_references(kind, ids)
            return len(ids)

    def _drop_references(self, kind: str, ids: set):
        # 与持久存储的级联删除保持一致：文章的评论、用户收藏里的 id
        if kind == "articles":
            for aid in ids:
                for cid in self._comments_by_article.pop(aid, []):
                    c = self._comments.pop(cid)
                    self._comments_by_user[c["userId"]].remove(cid)
        if kind in SAVABLE_KINDS:
            for u in self._active_users.values():
                u[_SAVED_FIELD[kind]] = [i for i in u[_SAVED_FIELD[kind]] if i not in ids]

    def get_featured_news(self) -> list[dict]:
        return [n for n in self.get_all("news") if n.get("isFeatured")]

    def search_kind(self, kind: str, query: str, limit: int) -> list[dict]:
        with self._lock:
            hits = [copy.deepcopy(r) for r in self._rows[kind].values() if matches(r, kind, query)]
        return hits[:limit]

    # ========== 管理员账号 ==========
    def create_user(self, data: dict) -> dict:
        with self._lock:
            user = dict(data, id=self._next_id("users"))
            self._users[user["id"]] = user
            return dict(user)

    def get_user(self, user_id: Any) -> Optional[dict]:
        with self._lock:
            u = self._users.get(as_int(user_id))
            return dict(u) if u else None

    def get_user_by_username(self, username: str) -> Optional[dict]:
        with self._lock:
            for u in self._users.values():
                if u["username"] == username:
                    return dict(u)
        return None

    # ========== 前台用户 ==========
    def create_active_user(self, data: dict) -> dict:
        with self._lock:
            user = copy.deepcopy(data)
            user.update(id=self._next_id("active_users"), savedArticles=[], savedScholarships=[])
            self._active_users[user["id"]] = user
            return copy.deepcopy(user)

    def get_active_user(self, user_id: Any) -> Optional[dict]:
        with self._lock:
            u = self._active_users.get(as_int(user_id))
            return copy.deepcopy(u) if u else None

    def get_active_user_by_email(self, email: str) -> Optional[dict]:
        email = (email or "").lower()
        with self._lock:
            for u in self._active_users.values():
                if u["email"] == email:
                    return copy.deepcopy(u)
        return None

    def update_active_user(self, user_id: Any, data: dict) -> Optional[dict]:
        with self._lock:
            u = self._active_users.get(as_int(user_id))
            if u is None:
                return None
            u.update({k: v for k, v in data.items() if v is not None and k != "id"})
            return copy.deepcopy(u)

    # ========== 点赞（幂等） ==========
    def like_article(self, article_id: Any, user_id: Any) -> Optional[int]:
        with self._lock:
            art = self._rows["articles"].get(as_int(article_id))
            if art is None:
                return None
            if user_id not in art["likes"]:
                art["likes"].append(user_id)
                art["likes"].sort()
            return len(art["likes"])

    def unlike_article(self, article_id: Any, user_id: Any) -> Optional[int]:
        with self._lock:
            art = self._rows["articles"].get(as_int(article_id))
            if art is None:
                return None
            if user_id in art["likes"]:
                art["likes"].remove(user_id)
            return len(art["likes"])

    def has_liked(self, article_id: Any, user_id: Any) -> Optional[bool]:
        with self._lock:
            art = self._rows["articles"].get(as_int(article_id))
            if art is None:
                return None
            return user_id in art["likes"]

    # ========== 收藏（幂等） ==========
    def save_item(self, user_id: Any, kind: str, item_id: Any) -> Optional[list]:
        if kind not in SAVABLE_KINDS:
            return None
        with self._lock:
            u = self._active_users.get(as_int(user_id))
            iid = as_int(item_id)
            if u is None or iid not in self._rows[kind]:
                return None
            saved = u[_SAVED_FIELD[kind]]
            if iid not in saved:
                saved.append(iid)
            return list(saved)

    def unsave_item(self, user_id: Any, kind: str, item_id: Any) -> Optional[list]:
        if kind not in SAVABLE_KINDS:
            return None
        with self._lock:
            u = self._active_users.get(as_int(user_id))
            if u is None:
                return None
            saved = u[_SAVED_FIELD[kind]]
            iid = as_int(item_id)
            if iid in saved:
                saved.remove(iid)
            return list(saved)

    # ========== 评论 ==========
    def add_comment(self, user_id: Any, article_id: Any, content: str) -> Optional[dict]:
        uid, aid = as_int(user_id), as_int(article_id)
        with self._lock:
            if uid not in self._active_users or aid not in self._rows["articles"]:
                return None
            c = {
                "id": self._next_id("comments"),
                "content": content,
                "articleId": aid,
                "userId": uid,
                "createdAt": datetime.utcnow().isoformat(),
            }
            self._comments[c["id"]] = c
            self._comments_by_user[uid].append(c["id"])
            self._comments_by_article[aid].append(c["id"])
            return dict(c)

    def get_comment(self, comment_id: Any) -> Optional[dict]:
        with self._lock:
            c = self._comments.get(as_int(comment_id))
            return dict(c) if c else None

    def update_comment(self, comment_id: Any, content: str) -> Optional[dict]:
        with self._lock:
            c = self._comments.get(as_int(comment_id))
            if c is None:
                return None
            c["content"] = content
            return dict(c)

    def delete_comment(self, comment_id: Any) -> bool:
        with self._lock:
            c = self._comments.pop(as_int(comment_id), None)
            if c is None:
                return False
            self._comments_by_user[c["userId"]].remove(c["id"])
            self._comments_by_article[c["articleId"]].remove(c["id"])
            return True

    def comments_by_user(self, user_id: Any) -> list[dict]:
        with self._lock:
            ids = self._comments_by_user.get(as_int(user_id), [])
            return [dict(self._comments[i]) for i in reversed(ids)]

    def comments_by_article(self, article_id: Any) -> list[dict]:
        with self._lock:
            ids = self._comments_by_article.get(as_int(article_id), [])
            return [dict(self._comments[i]) for i in reversed(ids)]
