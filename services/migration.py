# services/migration.py
"""
两个一次性的批处理：

- migrate_ephemeral_to_durable：把内存存储里的内容逐条拷到持久存储。
  逐行失败只记日志并跳过，不回滚已写入的行；没有自然键去重，重复执行会产生重复行
  （slug 会被加上 -2、-3 后缀）。
- populate_database：清空持久存储的各内容集合，再写入 sample_data。破坏性操作，
  HTTP 入口要求管理员 + ALLOW_SEED，命令行入口要求 --yes。
"""
from __future__ import annotations

import copy
import logging
from dataclasses import asdict, dataclass, field

from schemas import SERVER_FIELDS, validate
from services.errors import BackendUnavailable, StorageError
from services.sample_data import DATASET
from services.storage_base import CONTENT_KINDS

logger = logging.getLogger(__name__)


@dataclass
class MigrationReport:
    attempted: int = 0
    migrated: int = 0
    failed: int = 0
    by_kind: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


def _require_durable(router):
    if not router.durable_available():
        raise BackendUnavailable(router.durable.connection.last_error or "durable store unavailable")


def migrate_ephemeral_to_durable(router) -> MigrationReport:
    _require_durable(router)
    report = MigrationReport()

    for kind in CONTENT_KINDS:
        # 按内存存储的插入顺序写入
        rows = sorted(router.ephemeral.get_all(kind), key=lambda r: r["id"])
        done = 0
        for row in rows:
            report.attempted += 1
            data = {k: v for k, v in row.items() if k not in SERVER_FIELDS}
            try:
                router.durable.create(kind, validate(kind, data))
            except StorageError as e:
                report.failed += 1
                logger.error(f"❌ [迁移] {kind}#{row['id']} 写入失败，跳过: {e.msg}")
                continue
            done += 1
        report.migrated += done
        report.by_kind[kind] = done

    logger.info(f"✅ [迁移] 完成: attempted={report.attempted} migrated={report.migrated} failed={report.failed}")
    return report


def populate_database(router) -> dict[str, int]:
    _require_durable(router)

    for kind in DATASET:
        removed = router.durable.clear(kind)
        logger.info(f"[种子] 清空 {kind}: {removed} 行")

    counts = {}
    for kind, rows in DATASET.items():
        for row in rows:
            router.durable.create(kind, validate(kind, copy.deepcopy(row)))
        counts[kind] = len(rows)

    logger.info(f"✅ [种子] 写入完成: {counts}")
    return counts
