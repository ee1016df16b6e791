# app.py
from flask import Flask
from config.settings import get_config
from extensions.database import db, migrate
from extensions.logger import init_logger
from controllers.sync_controller import sync_bp
from controllers.sync_cli import sync_cli
from utils.response import json_response
from utils.exceptions import BizError
import models  # noqa: F401  注册全部模型，供 create_all / 迁移使用


def create_app(config_name="development"):
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    # 初始化扩展
    db.init_app(app)
    migrate.init_app(app, db)
    init_logger(app)
    app.logger.info("当前数据库 URI: %s", app.config["SQLALCHEMY_DATABASE_URI"])

    # 同步接口
    app.register_blueprint(sync_bp)
    # flask sync run / flask sync init-db
    app.cli.add_command(sync_cli)

    # 错误处理
    @app.errorhandler(404)
    def not_found(e):
        return json_response(message="接口不存在", code=404)

    @app.errorhandler(500)
    def server_error(e):
        return json_response(message="服务器内部错误", code=500)

    @app.errorhandler(BizError)
    def _biz_err(e: BizError):
        return json_response(code=e.code, message=e.message, data=e.data)

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="127.0.0.1", port=8888, debug=True)
