# routes/user.py
from flask import Blueprint, jsonify, request

from services.auth import current_principal_id, hash_password, public_user, user_required
from services.errors import ValidationFailure
from services.router import get_storage

user_bp = Blueprint("user", __name__, url_prefix="/api/user")

_SAVED_FIELD = {"articles": "savedArticles", "scholarships": "savedScholarships"}


def _user_not_found():
    return jsonify({"msg": "User not found"}), 404


@user_bp.put("/profile")
@user_required
def update_profile():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationFailure("Request body must be a JSON object")

    patch = {k: data.get(k) for k in ("fullName", "profileImage")}
    if data.get("password"):
        patch["passwordHash"] = hash_password(data["password"])

    user = get_storage().update_active_user(current_principal_id(), patch)
    if user is None:
        return _user_not_found()
    return jsonify(public_user(user))


@user_bp.get("/saved")
@user_required
def saved_items():
    storage = get_storage()
    user = storage.get_active_user(current_principal_id())
    if user is None:
        return _user_not_found()
    out = {}
    for kind, field in _SAVED_FIELD.items():
        items = [storage.get_by_id(kind, i) for i in user[field]]
        out[kind] = [i for i in items if i is not None]
    return jsonify(out)


def _toggle_saved(kind: str, item_id: int, save: bool):
    storage = get_storage()
    op = storage.save_item if save else storage.unsave_item
    saved = op(current_principal_id(), kind, item_id)
    if saved is None:
        return jsonify({"msg": "Item or user not found"}), 404
    return jsonify({_SAVED_FIELD[kind]: saved})


@user_bp.post("/save-article/<int:item_id>")
@user_required
def save_article(item_id):
    return _toggle_saved("articles", item_id, True)


@user_bp.delete("/unsave-article/<int:item_id>")
@user_required
def unsave_article(item_id):
    return _toggle_saved("articles", item_id, False)


@user_bp.post("/save-scholarship/<int:item_id>")
@user_required
def save_scholarship(item_id):
    return _toggle_saved("scholarships", item_id, True)


@user_bp.delete("/unsave-scholarship/<int:item_id>")
@user_required
def unsave_scholarship(item_id):
    return _toggle_saved("scholarships", item_id, False)


@user_bp.get("/comments")
@user_required
def my_comments():
    return jsonify(get_storage().comments_by_user(current_principal_id()))
