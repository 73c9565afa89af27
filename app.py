# app.py
import logging

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import get_config
from extensions import db, jwt, migrate
from services.errors import StorageError
from services.migration import migrate_ephemeral_to_durable
from services.router import init_storage

# ---- 导入各个蓝图 ----
from routes.auth import admin_auth_bp, auth_bp
from routes.comments import comments_bp
from routes.content_admin import admin_content_bp
from routes.content_public import public_content_bp
from routes.likes import likes_bp
from routes.user import user_bp

load_dotenv()

logger = logging.getLogger(__name__)


def _register_error_handlers(app):
    # 所有错误都返回 JSON：{"msg": ..., "errors": [...]}
    @app.errorhandler(StorageError)
    def handle_storage_error(e: StorageError):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"msg": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception(f"❌ [未处理异常] {e}")
        return jsonify({"msg": "Server error"}), 500


def create_app(config_name: str | None = None):
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    # ---- 初始化扩展 ----
    db.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)

    # ---- CORS ----
    CORS(
        app,
        resources={
            r"/api/*": {
                "origins": app.config["CORS_ORIGINS"],
                "supports_credentials": True,
                "allow_headers": ["Content-Type", "x-auth-token"],
                "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            }
        },
    )

    # ---- 注册蓝图 ----
    app.register_blueprint(public_content_bp)
    app.register_blueprint(admin_content_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_auth_bp)
    app.register_blueprint(user_bp)
    app.register_blueprint(likes_bp)
    app.register_blueprint(comments_bp)

    _register_error_handlers(app)

    # ---- 存储：持久存储 + 内存兜底 ----
    router = init_storage(app)
    if not app.config.get("DURABLE_STORE_ENABLED"):
        logger.warning("⚠️ [持久存储] 未配置 DATABASE_URL，所有请求走内存存储")

    if app.config.get("MIGRATE_ON_STARTUP"):
        with app.app_context():
            if router.durable_available():
                migrate_ephemeral_to_durable(router)
            else:
                logger.warning("⚠️ [迁移] 持久存储不可用，跳过启动迁移")

    # ---- 健康检查 ----
    @app.get("/")
    def health():
        return jsonify({"status": "ok", "durableStore": router.durable_available()})

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
