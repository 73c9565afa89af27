# routes/comments.py
from flask import Blueprint, jsonify, request

from services.auth import current_principal_id, user_required
from services.errors import AuthFailure
from services.router import get_storage

comments_bp = Blueprint("comments", __name__, url_prefix="/api/comments")


def _with_authors(comments: list[dict]) -> list[dict]:
    """评论列表补上作者名和头像，同一作者只查一次"""
    storage = get_storage()
    authors = {}
    for c in comments:
        uid = c["userId"]
        if uid not in authors:
            u = storage.get_active_user(uid) or {}
            authors[uid] = {"id": uid, "fullName": u.get("fullName"), "profileImage": u.get("profileImage", "")}
        c["user"] = authors[uid]
    return comments


def _owned_comment(comment_id: int):
    comment = get_storage().get_comment(comment_id)
    if comment is not None and comment["userId"] != current_principal_id():
        raise AuthFailure("Not allowed to modify this comment.", 403)
    return comment


@comments_bp.get("/article/<int:article_id>")
def list_comments(article_id):
    storage = get_storage()
    if storage.get_by_id("articles", article_id) is None:
        return jsonify({"msg": "Article not found"}), 404
    return jsonify(_with_authors(storage.comments_by_article(article_id)))


@comments_bp.post("/article/<int:article_id>")
@user_required
def add_comment(article_id):
    data = request.get_json(silent=True) or {}
    comment = get_storage().add_comment(current_principal_id(), article_id, data.get("content"))
    if comment is None:
        return jsonify({"msg": "Article or user not found"}), 404
    return jsonify(comment), 201


@comments_bp.put("/<int:comment_id>")
@user_required
def edit_comment(comment_id):
    if _owned_comment(comment_id) is None:
        return jsonify({"msg": "Comment not found"}), 404
    data = request.get_json(silent=True) or {}
    comment = get_storage().update_comment(comment_id, data.get("content"))
    if comment is None:
        return jsonify({"msg": "Comment not found"}), 404
    return jsonify(comment)


@comments_bp.delete("/<int:comment_id>")
@user_required
def delete_comment(comment_id):
    if _owned_comment(comment_id) is None or not get_storage().delete_comment(comment_id):
        return jsonify({"msg": "Comment not found"}), 404
    return jsonify({"msg": "Comment deleted"})
