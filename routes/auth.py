# routes/auth.py
from __future__ import annotations

import logging

from flask import Blueprint, jsonify, request

from services.auth import (
    ADMIN,
    USER,
    admin_required,
    check_password,
    current_principal_id,
    hash_password,
    issue_token,
    public_user,
    user_required,
    verify_google_token,
)
from services.errors import AuthFailure, ValidationFailure
from services.router import get_storage

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")
admin_auth_bp = Blueprint("admin_auth", __name__, url_prefix="/api/admin/auth")

MIN_PASSWORD_LEN = 6


def _body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationFailure("Request body must be a JSON object")
    return data


def _session_payload(user: dict):
    return {"token": issue_token(USER, user["id"]), "user": public_user(user)}


# ========== 前台用户 ==========

@auth_bp.post("/register")
def register():
    data = _body()
    password = data.get("password") or ""
    if len(password) < MIN_PASSWORD_LEN:
        raise ValidationFailure(
            "Validation failed",
            [{"field": "password", "message": f"at least {MIN_PASSWORD_LEN} characters"}],
        )
    user = get_storage().create_active_user({
        "fullName": data.get("fullName"),
        "email": data.get("email"),
        "passwordHash": hash_password(password),
        "profileImage": data.get("profileImage") or "",
    })
    logger.info(f"✅ [注册] user#{user['id']} {user['email']}")
    return jsonify(_session_payload(user)), 201


@auth_bp.post("/login")
def login():
    data = _body()
    user = get_storage().get_active_user_by_email(data.get("email") or "")
    # 不区分“用户不存在”和“密码错误”
    if not user or not check_password(user.get("passwordHash"), data.get("password")):
        raise AuthFailure("Invalid credentials")
    return jsonify(_session_payload(user))


@auth_bp.post("/google")
def google_login():
    data = _body()
    profile = verify_google_token(data.get("credential") or data.get("idToken") or "")
    storage = get_storage()

    user = storage.get_active_user_by_email(profile["email"])
    if user is None:
        user = storage.create_active_user(profile)
        logger.info(f"✅ [Google] 新建 user#{user['id']} {user['email']}")
    elif not user.get("googleId"):
        # 已用邮箱注册过的账号，首次 Google 登录时绑定
        user = storage.update_active_user(user["id"], {"googleId": profile["googleId"]})
    return jsonify(_session_payload(user))


@auth_bp.get("/user")
@user_required
def me():
    user = get_storage().get_active_user(current_principal_id())
    if user is None:
        return jsonify({"msg": "User not found"}), 404
    return jsonify(public_user(user))


# ========== 管理员 ==========

@admin_auth_bp.post("/login")
def admin_login():
    data = _body()
    admin = get_storage().get_user_by_username(data.get("username") or "")
    if not admin or not check_password(admin.get("passwordHash"), data.get("password")):
        raise AuthFailure("Invalid credentials")
    if not admin.get("isAdmin"):
        raise AuthFailure("Access denied.", 403)
    token = issue_token(ADMIN, admin["id"], {"username": admin["username"]})
    return jsonify({"token": token, "user": public_user(admin)})


@admin_auth_bp.get("")
@admin_required
def admin_me():
    admin = get_storage().get_user(current_principal_id())
    if admin is None:
        return jsonify({"msg": "Admin not found"}), 404
    return jsonify(public_user(admin))
