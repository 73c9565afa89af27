# routes/content_public.py
from flask import Blueprint, jsonify, request

from services.router import get_storage

public_content_bp = Blueprint("public_content", __name__, url_prefix="/api")

# 带 slug 的五种内容；menu 只有列表
SLUG_RULE = "<any(scholarships, articles, countries, universities, news):kind>"
LIST_RULE = "<any(scholarships, articles, countries, universities, news, menu):kind>"

_SINGULAR = {
    "scholarships": "Scholarship",
    "articles": "Article",
    "countries": "Country",
    "universities": "University",
    "news": "News article",
}


@public_content_bp.get("/news/featured")
def featured_news():
    return jsonify(get_storage().get_featured_news())


@public_content_bp.get("/search")
def search():
    # 兼容 ?q= 和 ?query=
    q = request.args.get("q")
    if q is None:
        q = request.args.get("query")
    return jsonify(get_storage().search(q))


@public_content_bp.get(f"/{LIST_RULE}")
def list_items(kind):
    return jsonify(get_storage().get_all(kind))


@public_content_bp.get(f"/{SLUG_RULE}/<slug>")
def get_item(kind, slug):
    item = get_storage().get_by_slug(kind, slug)
    if item is None:
        return jsonify({"msg": f"{_SINGULAR[kind]} not found"}), 404
    return jsonify(item)
