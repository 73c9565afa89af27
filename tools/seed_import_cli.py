# tools/seed_import_cli.py
# -*- coding: utf-8 -*-
"""
把 Excel/CSV 批量导入任意一种内容（scholarships / articles / countries / universities / news）。
- 以 slug 作为 upsert 主键：存在则更新，不存在则创建；没有 slug 列时按标题生成
- 列表字段（tags、highlights、features …）支持 JSON 数组或逗号分隔
- 表里多出来的列直接忽略；写入经过可用性路由器和 schemas 校验
用法：
  python tools/seed_import_cli.py --kind scholarships --file ./scholarships.xlsx
"""
import argparse
import json
import sys
import typing
from typing import Any

import pandas as pd

from app import create_app
from schemas import CONTENT_SCHEMAS, TITLE_FIELD, slugify
from services.errors import StorageError
from services.router import get_storage


def load_df(path: str, sheet: str | None = None) -> pd.DataFrame:
    if path.lower().endswith(".xlsx"):
        return pd.read_excel(path, sheet_name=sheet or 0)
    return pd.read_csv(path)


def parse_list(val) -> list:
    if val is None or (isinstance(val, float) and pd.isna(val)):
        return []
    if isinstance(val, list):
        return [str(x).strip() for x in val if str(x).strip()]
    s = str(val).strip()
    if not s:
        return []
    # 先试 JSON
    if s.startswith("["):
        try:
            arr = json.loads(s)
        except ValueError:
            arr = None
        if isinstance(arr, list):
            return [str(x).strip() for x in arr if str(x).strip()]
    # 逗号分隔
    return [x.strip() for x in s.split(",") if x.strip()]


def _is_list_field(annotation) -> bool:
    return typing.get_origin(annotation) is list


def list_columns(kind: str) -> set[str]:
    model = CONTENT_SCHEMAS[kind]
    return {
        f.alias or name
        for name, f in model.model_fields.items()
        if _is_list_field(f.annotation)
    }


def row_to_payload(kind: str, row: dict[str, Any]) -> dict:
    """一行表格 -> 接口入参（camelCase）；空单元格不出现在结果里"""
    lists = list_columns(kind)
    out = {}
    for key, val in row.items():
        if val is None or (isinstance(val, float) and pd.isna(val)):
            continue
        out[key] = parse_list(val) if key in lists else val
    return out


def import_records(storage, kind: str, records: list[dict], dry_run: bool = False) -> dict:
    created = updated = failed = 0
    total = len(records)
    title_field = TITLE_FIELD[kind]

    for i, row in enumerate(records, start=1):
        payload = row_to_payload(kind, row)
        slug = slugify(str(payload.get("slug") or payload.get(title_field) or ""))
        if not slug:
            print(f"[{i}/{total}] 跳过：无 slug 也无标题")
            failed += 1
            continue
        payload["slug"] = slug

        existing = storage.get_by_slug(kind, slug)
        if dry_run:
            print(f"[{i}/{total}] {'~ UPDATE' if existing else '+ CREATE'} {slug}")
            continue
        try:
            if existing:
                storage.update(kind, existing["id"], payload)
                updated += 1
                print(f"[{i}/{total}] ✅ UPDATE {slug}")
            else:
                storage.create(kind, payload)
                created += 1
                print(f"[{i}/{total}] ✅ CREATE {slug}")
        except StorageError as e:
            failed += 1
            print(f"[{i}/{total}] ❌ {slug}: {e.msg} {e.errors or ''}", file=sys.stderr)

    return {"created": created, "updated": updated, "failed": failed}


def main(argv=None):
    ap = argparse.ArgumentParser(description="Import content rows from Excel/CSV (upsert by slug)")
    ap.add_argument("--kind", required=True, choices=sorted(TITLE_FIELD), help="内容类型")
    ap.add_argument("--file", required=True, help="Excel/CSV 路径")
    ap.add_argument("--sheet", default=None, help="Excel 的 sheet 名（不填用第一个）")
    ap.add_argument("--env", default=None, help="配置名：development / production / testing")
    ap.add_argument("--dry-run", action="store_true", help="只打印不落库")
    args = ap.parse_args(argv)

    # 1) 读表，NaN 统一成 None
    df = load_df(args.file, args.sheet)
    records = df.astype(object).where(df.notnull(), None).to_dict(orient="records")

    # 2) 初始化 Flask & 存储
    app = create_app(args.env)
    with app.app_context():
        storage = get_storage()
        if not storage.durable_available():
            print("⚠️ 持久存储不可用，数据只会写进当前进程的内存存储", file=sys.stderr)
        stats = import_records(storage, args.kind, records, args.dry_run)

    print(f"\n完成：新建 {stats['created']}，更新 {stats['updated']}，失败 {stats['failed']}")
    return 0 if stats["failed"] == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
