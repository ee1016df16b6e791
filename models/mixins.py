# models/mixins.py
from sqlalchemy import func, DateTime
from extensions.database import db
from utils.datetime_helpers import datetime_to_iso

COMMON_TABLE_ARGS = {
    "mysql_engine": "InnoDB",
    "mysql_charset": "utf8mb4",
    "mysql_collate": "utf8mb4_unicode_ci",
}

# 文件存储中的记录 id 为不透明字符串（多数为 uuid）
ID_LENGTH = 64


class TimestampMixin:
    created_at = db.Column(DateTime, nullable=False, server_default=func.now(), index=True)
    updated_at = db.Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now(), index=True)

    def timestamps_to_dict(self):
        return {
            "created_at": datetime_to_iso(self.created_at),
            "updated_at": datetime_to_iso(self.updated_at),
        }
