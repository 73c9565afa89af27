# services/auth.py
"""
两类身份的 token：

- 前台用户：identity = "user:<id>"，JWT_SECRET_KEY 签名
- 管理员：identity = "admin:<id>"，ADMIN_JWT_SECRET_KEY 签名

JWT 的 key loader 按 identity 前缀选密钥，所以用户 token 永远不可能通过管理员校验。
密钥缺失只影响鉴权（签发 / 校验时报 AuthNotConfigured），内容接口照常可用。
"""
from __future__ import annotations

import logging
from datetime import timedelta
from functools import wraps

import requests
from flask import current_app, g, request
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from werkzeug.security import check_password_hash, generate_password_hash

from extensions import jwt
from services.errors import AuthFailure, AuthNotConfigured

logger = logging.getLogger(__name__)

USER = "user"
ADMIN = "admin"

_SECRET_KEYS = {USER: "JWT_SECRET_KEY", ADMIN: "ADMIN_JWT_SECRET_KEY"}


def _split_identity(identity) -> tuple[str, int]:
    principal, _, raw_id = str(identity or "").partition(":")
    if principal not in _SECRET_KEYS or not raw_id.isdigit():
        raise AuthFailure("Token is not valid.")
    return principal, int(raw_id)


def _secret_for(principal: str) -> str:
    secret = current_app.config.get(_SECRET_KEYS[principal])
    if not secret:
        logger.error(f"❌ [鉴权] 缺少 {_SECRET_KEYS[principal]}，{principal} 鉴权不可用")
        raise AuthNotConfigured("auth not configured")
    return secret


@jwt.encode_key_loader
def _encode_key(identity):
    return _secret_for(_split_identity(identity)[0])


@jwt.decode_key_loader
def _decode_key(jwt_header, jwt_data):
    return _secret_for(_split_identity(jwt_data.get("sub"))[0])


# ========== 密码 ==========
def hash_password(raw: str) -> str:
    return generate_password_hash(raw)


def check_password(hashed: str | None, raw: str | None) -> bool:
    if not hashed or not raw:
        return False
    return check_password_hash(hashed, raw)


# ========== token ==========
def issue_token(principal: str, principal_id: int, claims: dict | None = None) -> str:
    cfg = current_app.config
    if principal == ADMIN:
        expires = timedelta(hours=cfg.get("ADMIN_TOKEN_EXPIRES_HOURS", 12))
    else:
        expires = timedelta(days=cfg.get("USER_TOKEN_EXPIRES_DAYS", 7))
    return create_access_token(
        identity=f"{principal}:{principal_id}",
        additional_claims=claims or {},
        expires_delta=expires,
    )


def verify(token: str) -> dict:
    """token -> {"type": "user"|"admin", "id": int, "claims": {...}}，失败抛 AuthFailure"""
    try:
        data = decode_token(token)
    except (JWTExtendedException, PyJWTError) as e:
        raise AuthFailure("Token is not valid.") from e
    principal, pid = _split_identity(data.get("sub"))
    return {"type": principal, "id": pid, "claims": data}


def _require(principal: str):
    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = request.headers.get(current_app.config.get("JWT_HEADER_NAME", "x-auth-token"))
            if not token:
                raise AuthFailure("No token, authorization denied.")
            p = verify(token.strip())
            if p["type"] != principal:
                raise AuthFailure("Access denied.", 403)
            g.principal = p
            return fn(*args, **kwargs)
        return wrapper
    return deco


user_required = _require(USER)
admin_required = _require(ADMIN)


def current_principal_id() -> int:
    return g.principal["id"]


# ========== Google 登录 ==========
def verify_google_token(id_token: str) -> dict:
    """用 tokeninfo 接口校验 Google ID token，返回可直接建用户的字段"""
    client_id = current_app.config.get("GOOGLE_CLIENT_ID")
    if not client_id:
        raise AuthNotConfigured("google auth not configured")
    if not id_token:
        raise AuthFailure("Google token is required.")

    try:
        resp = requests.get(
            current_app.config["GOOGLE_TOKENINFO_URL"],
            params={"id_token": id_token},
            timeout=5,
        )
    except requests.RequestException as e:
        logger.error(f"❌ [Google] tokeninfo 请求失败: {e}")
        raise AuthFailure("Google token could not be verified.") from e

    if resp.status_code != 200:
        raise AuthFailure("Invalid Google token.")
    info = resp.json()
    if info.get("aud") != client_id:
        raise AuthFailure("Google token was issued for another client.")
    if not info.get("email") or not info.get("sub"):
        raise AuthFailure("Invalid Google token.")

    return {
        "googleId": info["sub"],
        "email": info["email"].lower(),
        "fullName": info.get("name") or info["email"].split("@")[0],
        "profileImage": info.get("picture") or "",
    }


def public_user(user: dict) -> dict:
    """对外返回的用户信息，不带密码哈希"""
    return {k: v for k, v in user.items() if k != "passwordHash"}
