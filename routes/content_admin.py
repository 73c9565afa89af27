# routes/content_admin.py
"""
后台内容管理：六种内容统一的增删改查，外加种子数据 / 迁移两个批处理入口。
全部要求管理员 token。
"""
import logging

from flask import Blueprint, current_app, jsonify, request

from services.auth import admin_required
from services.errors import SeedDisabled
from services.migration import migrate_ephemeral_to_durable, populate_database
from services.router import get_storage

logger = logging.getLogger(__name__)

admin_content_bp = Blueprint("admin_content", __name__, url_prefix="/api/admin")

KIND_RULE = "<any(scholarships, articles, countries, universities, news, menu):kind>"


def _not_found(kind, item_id):
    return jsonify({"msg": f"{kind} #{item_id} not found"}), 404


@admin_content_bp.get(f"/{KIND_RULE}")
@admin_required
def admin_list(kind):
    return jsonify(get_storage().get_all(kind))


@admin_content_bp.post(f"/{KIND_RULE}")
@admin_required
def admin_create(kind):
    item = get_storage().create(kind, request.get_json(silent=True))
    logger.info(f"[后台] 新建 {kind}#{item['id']}")
    return jsonify(item), 201


@admin_content_bp.get(f"/{KIND_RULE}/<int:item_id>")
@admin_required
def admin_get(kind, item_id):
    item = get_storage().get_by_id(kind, item_id)
    if item is None:
        return _not_found(kind, item_id)
    return jsonify(item)


@admin_content_bp.put(f"/{KIND_RULE}/<int:item_id>")
@admin_required
def admin_update(kind, item_id):
    item = get_storage().update(kind, item_id, request.get_json(silent=True))
    if item is None:
        return _not_found(kind, item_id)
    return jsonify(item)


@admin_content_bp.delete(f"/{KIND_RULE}/<int:item_id>")
@admin_required
def admin_delete(kind, item_id):
    if not get_storage().delete(kind, item_id):
        return _not_found(kind, item_id)
    logger.info(f"[后台] 删除 {kind}#{item_id}")
    return jsonify({"msg": f"{kind} #{item_id} deleted"})


# ---- 批处理 ----

@admin_content_bp.post("/seed")
@admin_required
def admin_seed():
    if not current_app.config.get("ALLOW_SEED"):
        raise SeedDisabled("Seeding is disabled in this environment")
    counts = populate_database(get_storage())
    return jsonify({"msg": "Database populated", "counts": counts})


@admin_content_bp.post("/migrate")
@admin_required
def admin_migrate():
    report = migrate_ephemeral_to_durable(get_storage())
    return jsonify({"msg": "Migration finished", "report": report.to_dict()})
