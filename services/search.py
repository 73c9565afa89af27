# services/search.py
"""
跨类型搜索：同一个关键词并发查五个集合，按类型合并。

每个子任务在自己的线程里推一个 app context（Flask-SQLAlchemy 的 session 按 app context 划分），
并各自经过可用性路由器，所以某个集合退回内存存储不影响其它集合。
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

from flask import current_app

from services.errors import ValidationFailure
from services.storage_base import SEARCH_KINDS, empty_results

logger = logging.getLogger(__name__)


def search(router, query: str | None, limit: int | None = None) -> dict[str, list]:
    q = (query or "").strip()
    if not q:
        raise ValidationFailure("Search query is required", [{"field": "q", "message": "must not be empty"}])

    app = current_app._get_current_object()
    limit = limit or app.config.get("SEARCH_LIMIT", 10)
    workers = max(1, min(int(app.config.get("SEARCH_MAX_WORKERS", 5)), len(SEARCH_KINDS)))

    def run(kind: str) -> list[dict]:
        with app.app_context():
            return router.search_kind(kind, q, limit)

    results = empty_results()
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="search") as pool:
        futures = {pool.submit(run, kind): kind for kind in SEARCH_KINDS}
        for fut in as_completed(futures):
            results[futures[fut]] = fut.result()

    logger.debug(f"[搜索] q={q!r} " + ", ".join(f"{k}={len(v)}" for k, v in results.items()))
    return results
