# migration.py：仅用于生成/应用表结构迁移（Alembic），与内容迁移无关
import os

from flask_migrate import init as mig_init, migrate as mig_migrate, upgrade as mig_upgrade

from app import create_app
# 导入 SqlStorage 会把所有模型注册到 metadata 上
import services.sql_storage  # noqa: F401

MIGRATIONS_DIR = os.path.join(os.path.dirname(__file__), "migrations")

if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        # 1) 初始化 migrations 目录（不存在才创建）
        if not os.path.exists(os.path.join(MIGRATIONS_DIR, "env.py")):
            print("==> 初始化 migrations 目录")
            mig_init(directory=MIGRATIONS_DIR)
        else:
            print("==> migrations 已存在，跳过 init")

        # 2) 生成迁移脚本
        print("==> 生成迁移脚本...")
        mig_migrate(message="content tables", directory=MIGRATIONS_DIR)

        # 3) 应用迁移
        print("==> 应用迁移到数据库...")
        mig_upgrade(directory=MIGRATIONS_DIR)

        print("✅ 迁移完成")
