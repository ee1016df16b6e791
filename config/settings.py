# config/settings.py
import os
from dotenv import load_dotenv

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
load_dotenv(os.path.join(BASE_DIR, ".env"))  # 自动加载环境变量


def _as_bool(val, default=False):
    if val is None:
        return default
    return str(val).lower() in ("1", "true", "yes", "on")


def _as_list(val, default=None):
    if val is None or not str(val).strip():
        return list(default) if default is not None else None
    return [item.strip() for item in str(val).split(",") if item.strip()]


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # 日志相关
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR = os.getenv("LOG_DIR", "./logs")
    LOG_JSON = os.getenv("LOG_JSON", "1") == "1"  # 是否 JSON 格式
    LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", 5 * 1024 * 1024))
    LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", 5))
    LOG_TO_FILE = _as_bool(os.getenv("LOG_TO_FILE"), True)
    APP_NAME = os.getenv("APP_NAME", "qa-tracking-sync")

    # ========= 同步相关 =========
    # 文件存储目录（每种实体一个 JSON 文档）
    SYNC_DATA_DIR = os.getenv("SYNC_DATA_DIR", os.path.join(BASE_DIR, "data"))
    # 机器可读的同步报告输出目录
    SYNC_RESULTS_DIR = os.getenv("SYNC_RESULTS_DIR", os.path.join(BASE_DIR, "results"))
    SYNC_WRITE_REPORT = _as_bool(os.getenv("SYNC_WRITE_REPORT"), False)
    # 团队/单元按名称找不到时是否回退到“第一个可用”的记录（默认关闭）
    SYNC_REFERENCE_FALLBACK = _as_bool(os.getenv("SYNC_REFERENCE_FALLBACK"), False)

    # ========= 匹配规则 =========
    # 默认按顺序启用全部规则
    MATCH_RULES = _as_list(
        os.getenv("MATCH_RULES"),
        [
            "exact",
            "composite",
            "code_ref_contains",
            "project_contains",
            "normalized_contains",
            "ticket_number",
        ],
    )
    # ticket_number 规则仅对这些项目生效；为空表示对所有项目生效
    TICKET_NUMBER_PROJECTS = _as_list(os.getenv("TICKET_NUMBER_PROJECTS"))
    # 描述相似度超过该阈值的缺陷视为“可能重复”
    DUPLICATE_SIMILARITY_THRESHOLD = float(os.getenv("DUPLICATE_SIMILARITY_THRESHOLD", 0.60))

    # =========================================


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DEV_DATABASE_URI",
        os.getenv("DATABASE_URI", "sqlite:///" + os.path.join(BASE_DIR, "qa_tracking.db")),
    )


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URI", "sqlite:///:memory:")
    LOG_JSON = False
    LOG_TO_FILE = False
    SYNC_WRITE_REPORT = False


config_map = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config(config_name):
    return config_map.get(config_name, DevelopmentConfig)
