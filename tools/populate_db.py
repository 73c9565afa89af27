# tools/populate_db.py
# -*- coding: utf-8 -*-
"""
清空持久存储的内容集合并写入演示数据（services/sample_data.py）。
破坏性操作，必须显式带 --yes。
用法：
  python tools/populate_db.py --yes
"""
import argparse
import sys

from app import create_app
from services.errors import BackendUnavailable
from services.migration import populate_database
from services.router import get_storage


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Wipe content collections and load the sample dataset")
    ap.add_argument("--yes", action="store_true", help="确认清空现有内容")
    ap.add_argument("--env", default=None, help="配置名：development / production / testing")
    args = ap.parse_args(argv)

    if not args.yes:
        print("❌ 该操作会清空所有内容集合，确认请加 --yes", file=sys.stderr)
        return 2

    app = create_app(args.env)
    with app.app_context():
        try:
            counts = populate_database(get_storage())
        except BackendUnavailable as e:
            print(f"❌ 持久存储不可用：{e.msg}", file=sys.stderr)
            return 1

    for kind, n in counts.items():
        print(f"✅ {kind}: {n}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
