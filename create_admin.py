# create_admin.py
# 用法：python create_admin.py --username admin --password superpassword123
import argparse
import sys

from app import create_app
from services.auth import hash_password
from services.router import get_storage


def main(argv=None):
    ap = argparse.ArgumentParser(description="Create the admin account")
    ap.add_argument("--username", default="admin")
    ap.add_argument("--password", required=True)
    args = ap.parse_args(argv)

    app = create_app()
    with app.app_context():
        storage = get_storage()
        if not storage.durable_available():
            # 内存存储里的账号随进程退出就没了，这里建了也没意义
            print("❌ 持久存储不可用，请先配置 DATABASE_URL", file=sys.stderr)
            return 1
        if storage.get_user_by_username(args.username):
            print(f"ℹ️ 用户已存在：{args.username}")
            return 0
        storage.create_user({
            "username": args.username,
            "passwordHash": hash_password(args.password),
            "isAdmin": True,
        })
        print(f"✅ 管理员创建成功：{args.username}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
