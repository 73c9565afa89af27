# routes/likes.py
# 点赞是幂等的：重复点赞 / 重复取消都只返回当前计数
from flask import Blueprint, jsonify

from services.auth import current_principal_id, user_required
from services.router import get_storage

likes_bp = Blueprint("likes", __name__, url_prefix="/api/likes")


def _article_not_found():
    return jsonify({"msg": "Article not found"}), 404


@likes_bp.post("/article/<int:article_id>")
@user_required
def like(article_id):
    count = get_storage().like_article(article_id, current_principal_id())
    if count is None:
        return _article_not_found()
    return jsonify({"likes": count, "liked": True})


@likes_bp.delete("/article/<int:article_id>")
@user_required
def unlike(article_id):
    count = get_storage().unlike_article(article_id, current_principal_id())
    if count is None:
        return _article_not_found()
    return jsonify({"likes": count, "liked": False})


@likes_bp.get("/article/<int:article_id>/count")
def like_count(article_id):
    article = get_storage().get_by_id("articles", article_id)
    if article is None:
        return _article_not_found()
    return jsonify({"likes": len(article.get("likes") or [])})


@likes_bp.get("/article/<int:article_id>/status")
@user_required
def like_status(article_id):
    liked = get_storage().has_liked(article_id, current_principal_id())
    if liked is None:
        return _article_not_found()
    return jsonify({"liked": liked})
