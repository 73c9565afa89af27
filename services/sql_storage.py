# services/sql_storage.py
"""
持久存储（SQLAlchemy）。

每个方法都先向 DurableConnection 要连接：
- 拿不到 -> 抛 BackendUnavailable，由路由器切到内存存储
- 查询中途的连接类错误 -> 回滚、标记连接失效、同样抛 BackendUnavailable
- 唯一约束 / 版本冲突 -> ConflictError，直接返回给调用方
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import DataError, DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from extensions import db
from models.article import Article, ArticleLike
from models.base import search_vector
from models.comment import Comment
from models.country import Country
from models.menu import MenuItem
from models.news import News
from models.scholarship import Scholarship
from models.university import University
from models.user import ActiveUser, SavedItem, User
from services.connection import DurableConnection
from services.errors import BackendUnavailable, ConflictError, ValidationFailure
from services.storage_base import (
    SAVABLE_KINDS,
    SEARCH_FIELDS,
    SLUG_KINDS,
    Storage,
    as_int,
    unique_slug,
)

logger = logging.getLogger(__name__)

MODELS = {
    "scholarships": Scholarship,
    "articles": Article,
    "countries": Country,
    "universities": University,
    "news": News,
    "menu": MenuItem,
}

# 与 storage_base.sort_entities 对齐
ORDERING = {
    "scholarships": lambda M: (M.created_at.desc(), M.id.desc()),
    "articles": lambda M: (M.created_at.desc(), M.id.desc()),
    "countries": lambda M: (func.lower(M.name).asc(), M.id.asc()),
    "universities": lambda M: (M.ranking.is_(None), M.ranking.asc(), M.id.asc()),
    "news": lambda M: (M.publish_date.desc(), M.id.desc()),
    "menu": lambda M: (M.id.asc(),),
}

_ACTIVE_USER_COLUMNS = {
    "fullName": "full_name",
    "email": "email",
    "passwordHash": "password_hash",
    "profileImage": "profile_image",
    "googleId": "google_id",
}


class TextSearchUnsupported(Exception):
    """当前数据库没有可用的全文索引"""


def _escape_like(q: str) -> str:
    return q.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _rollback():
    try:
        db.session.rollback()
    except SQLAlchemyError as e:
        logger.error(f"❌ [持久存储] 回滚失败: {e}")


class SqlStorage(Storage):
    name = "durable"

    def __init__(self, connection: DurableConnection | None = None):
        self.connection = connection or DurableConnection()

    @contextmanager
    def _session(self):
        if not self.connection.acquire():
            raise BackendUnavailable(self.connection.last_error or "durable store unavailable")
        try:
            yield db.session
        except IntegrityError as e:
            _rollback()
            raise ConflictError("Duplicate or invalid reference", [{"message": str(e.orig)}]) from e
        except StaleDataError as e:
            _rollback()
            raise ConflictError("Record was modified concurrently") from e
        except DataError as e:
            _rollback()
            raise ValidationFailure("Value rejected by the store", [{"message": str(e.orig)}]) from e
        except DBAPIError as e:
            _rollback()
            self.connection.invalidate(str(e))
            raise BackendUnavailable(str(e)) from e

    def _unique_slug(self, M, base: str, exclude_id: int | None = None) -> str:
        q = db.session.query(M.id, M.slug).filter(
            or_(M.slug == base, M.slug.like(f"{_escape_like(base)}-%", escape="\\"))
        )
        taken = {slug for rid, slug in q.all() if rid != exclude_id}
        return unique_slug(base, taken)

    # ========== 内容 ==========
    def get_all(self, kind: str) -> list[dict]:
        M = MODELS[kind]
        with self._session():
            rows = M.query.order_by(*ORDERING[kind](M)).all()
            return [r.to_dict() for r in rows]

    def get_by_id(self, kind: str, item_id: Any) -> Optional[dict]:
        nid = as_int(item_id)
        if nid is None:
            return None
        with self._session():
            row = db.session.get(MODELS[kind], nid)
            return row.to_dict() if row else None

    def get_by_slug(self, kind: str, slug: str) -> Optional[dict]:
        if kind not in SLUG_KINDS:
            return None
        M = MODELS[kind]
        with self._session():
            row = M.query.filter_by(slug=slug).first()
            return row.to_dict() if row else None

    def create(self, kind: str, data: dict) -> dict:
        M = MODELS[kind]
        with self._session():
            row = M().apply(data)
            if kind in SLUG_KINDS:
                row.slug = self._unique_slug(M, data["slug"])
            db.session.add(row)
            db.session.commit()
            return row.to_dict()

    def update(self, kind: str, item_id: Any, data: dict) -> Optional[dict]:
        nid = as_int(item_id)
        if nid is None:
            return None
        M = MODELS[kind]
        with self._session():
            row = db.session.get(M, nid)
            if row is None:
                return None
            data = dict(data)
            if kind in SLUG_KINDS and "slug" in data:
                # 先查重再改行，避免 autoflush 把冲突的 slug 提前写进库
                data["slug"] = self._unique_slug(M, data["slug"], exclude_id=nid)
            row.apply(data)
            db.session.commit()
            return row.to_dict()

    def delete(self, kind: str, item_id: Any) -> bool:
        nid = as_int(item_id)
        if nid is None:
            return False
        M = MODELS[kind]
        with self._session():
            row = db.session.get(M, nid)
            if row is None:
                return False
            if kind in SAVABLE_KINDS:
                SavedItem.query.filter_by(kind=kind, item_id=nid).delete()
            db.session.delete(row)
            db.session.commit()
            return True

    def clear(self, kind: str) -> int:
        M = MODELS[kind]
        with self._session():
            if kind == "articles":
                ArticleLike.query.delete()
                Comment.query.delete()
            if kind in SAVABLE_KINDS:
                SavedItem.query.filter_by(kind=kind).delete()
            n = M.query.delete()
            db.session.commit()
            return n

    def get_featured_news(self) -> list[dict]:
        with self._session():
            rows = News.query.filter(News.is_featured.is_(True)).order_by(*ORDERING["news"](News)).all()
            return [r.to_dict() for r in rows]

    # ========== 搜索 ==========
    def _text_search(self, M, kind: str, query: str, limit: int):
        if db.engine.dialect.name != "postgresql":
            raise TextSearchUnsupported(db.engine.dialect.name)
        # 与 models 上的 GIN 索引表达式相同
        vector = search_vector(*(getattr(M, f) for f in SEARCH_FIELDS[kind]))
        tsq = func.plainto_tsquery("simple", query)
        return (
            M.query.filter(vector.op("@@")(tsq))
            .order_by(func.ts_rank(vector, tsq).desc())
            .limit(limit)
            .all()
        )

    def _like_search(self, M, kind: str, query: str, limit: int):
        like = f"%{_escape_like(query)}%"
        conds = [getattr(M, f).ilike(like, escape="\\") for f in SEARCH_FIELDS[kind]]
        return M.query.filter(or_(*conds)).order_by(M.id.asc()).limit(limit).all()

    def search_kind(self, kind: str, query: str, limit: int) -> list[dict]:
        M = MODELS[kind]
        with self._session():
            try:
                rows = self._text_search(M, kind, query, limit)
            except (TextSearchUnsupported, SQLAlchemyError) as e:
                # 全文索引不可用时退回 ilike，条数上限一致
                _rollback()
                logger.debug(f"[搜索] {kind} 全文检索不可用，改用子串匹配: {e}")
                rows = self._like_search(M, kind, query, limit)
            return [r.to_dict() for r in rows]

    # ========== 管理员账号 ==========
    def create_user(self, data: dict) -> dict:
        with self._session():
            u = User(
                username=data["username"],
                password_hash=data["passwordHash"],
                is_admin=bool(data.get("isAdmin")),
            )
            db.session.add(u)
            db.session.commit()
            return u.to_dict()

    def get_user(self, user_id: Any) -> Optional[dict]:
        uid = as_int(user_id)
        if uid is None:
            return None
        with self._session():
            u = db.session.get(User, uid)
            return u.to_dict() if u else None

    def get_user_by_username(self, username: str) -> Optional[dict]:
        with self._session():
            u = User.query.filter_by(username=username).first()
            return u.to_dict() if u else None

    # ========== 前台用户 ==========
    def create_active_user(self, data: dict) -> dict:
        with self._session():
            u = ActiveUser(**{col: data.get(key) for key, col in _ACTIVE_USER_COLUMNS.items()})
            db.session.add(u)
            db.session.commit()
            return u.to_dict()

    def get_active_user(self, user_id: Any) -> Optional[dict]:
        uid = as_int(user_id)
        if uid is None:
            return None
        with self._session():
            u = db.session.get(ActiveUser, uid)
            return u.to_dict() if u else None

    def get_active_user_by_email(self, email: str) -> Optional[dict]:
        with self._session():
            u = ActiveUser.query.filter_by(email=(email or "").lower()).first()
            return u.to_dict() if u else None

    def update_active_user(self, user_id: Any, data: dict) -> Optional[dict]:
        uid = as_int(user_id)
        if uid is None:
            return None
        with self._session():
            u = db.session.get(ActiveUser, uid)
            if u is None:
                return None
            for key, col in _ACTIVE_USER_COLUMNS.items():
                if data.get(key) is not None:
                    setattr(u, col, data[key])
            db.session.commit()
            return u.to_dict()

    # ========== 点赞（幂等） ==========
    def _like_count(self, aid: int) -> int:
        return ArticleLike.query.filter_by(article_id=aid).count()

    def like_article(self, article_id: Any, user_id: Any) -> Optional[int]:
        aid = as_int(article_id)
        with self._session():
            if aid is None or db.session.get(Article, aid) is None:
                return None
            if not ArticleLike.query.filter_by(article_id=aid, user_id=user_id).first():
                db.session.add(ArticleLike(article_id=aid, user_id=user_id))
                try:
                    db.session.commit()
                except IntegrityError:
                    # 并发请求已经写入同一条点赞，结果一致
                    _rollback()
            return self._like_count(aid)

    def unlike_article(self, article_id: Any, user_id: Any) -> Optional[int]:
        aid = as_int(article_id)
        with self._session():
            if aid is None or db.session.get(Article, aid) is None:
                return None
            ArticleLike.query.filter_by(article_id=aid, user_id=user_id).delete()
            db.session.commit()
            return self._like_count(aid)

    def has_liked(self, article_id: Any, user_id: Any) -> Optional[bool]:
        aid = as_int(article_id)
        with self._session():
            if aid is None or db.session.get(Article, aid) is None:
                return None
            return ArticleLike.query.filter_by(article_id=aid, user_id=user_id).first() is not None

    # ========== 收藏（幂等） ==========
    def save_item(self, user_id: Any, kind: str, item_id: Any) -> Optional[list]:
        uid, iid = as_int(user_id), as_int(item_id)
        if kind not in SAVABLE_KINDS or uid is None or iid is None:
            return None
        with self._session():
            u = db.session.get(ActiveUser, uid)
            if u is None or db.session.get(MODELS[kind], iid) is None:
                return None
            if not SavedItem.query.filter_by(user_id=uid, kind=kind, item_id=iid).first():
                db.session.add(SavedItem(user_id=uid, kind=kind, item_id=iid))
                db.session.commit()
            return u.saved_ids(kind)

    def unsave_item(self, user_id: Any, kind: str, item_id: Any) -> Optional[list]:
        uid, iid = as_int(user_id), as_int(item_id)
        if kind not in SAVABLE_KINDS or uid is None:
            return None
        with self._session():
            u = db.session.get(ActiveUser, uid)
            if u is None:
                return None
            SavedItem.query.filter_by(user_id=uid, kind=kind, item_id=iid).delete()
            db.session.commit()
            return u.saved_ids(kind)

    # ========== 评论 ==========
    def add_comment(self, user_id: Any, article_id: Any, content: str) -> Optional[dict]:
        uid, aid = as_int(user_id), as_int(article_id)
        if uid is None or aid is None:
            return None
        with self._session():
            if db.session.get(ActiveUser, uid) is None or db.session.get(Article, aid) is None:
                return None
            c = Comment(user_id=uid, article_id=aid, content=content)
            db.session.add(c)
            db.session.commit()
            return c.to_dict()

    def get_comment(self, comment_id: Any) -> Optional[dict]:
        cid = as_int(comment_id)
        if cid is None:
            return None
        with self._session():
            c = db.session.get(Comment, cid)
            return c.to_dict() if c else None

    def update_comment(self, comment_id: Any, content: str) -> Optional[dict]:
        cid = as_int(comment_id)
        if cid is None:
            return None
        with self._session():
            c = db.session.get(Comment, cid)
            if c is None:
                return None
            c.content = content
            db.session.commit()
            return c.to_dict()

    def delete_comment(self, comment_id: Any) -> bool:
        cid = as_int(comment_id)
        if cid is None:
            return False
        with self._session():
            c = db.session.get(Comment, cid)
            if c is None:
                return False
            db.session.delete(c)
            db.session.commit()
            return True

    def comments_by_user(self, user_id: Any) -> list[dict]:
        with self._session():
            rows = Comment.query.filter_by(user_id=as_int(user_id)).order_by(Comment.id.desc()).all()
            return [c.to_dict() for c in rows]

    def comments_by_article(self, article_id: Any) -> list[dict]:
        with self._session():
            rows = Comment.query.filter_by(article_id=as_int(article_id)).order_by(Comment.id.desc()).all()
            return [c.to_dict() for c in rows]
