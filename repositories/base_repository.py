"""Shared CRUD helpers for the sync repositories."""
from __future__ import annotations

from typing import Any, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from extensions.database import db


class BaseRepository:
    """按主键读写的通用仓储；子类通过 ``model`` 指定实体。"""

    model = None
    order_column = "id"

    @classmethod
    def list_all(cls) -> List[Any]:
        stmt = select(cls.model).order_by(getattr(cls.model, cls.order_column))
        return list(db.session.execute(stmt).scalars().all())

    @classmethod
    def get_by_id(cls, record_id) -> Optional[Any]:
        if record_id is None or record_id == "":
            return None
        return db.session.get(cls.model, record_id)

    @classmethod
    def exists(cls, record_id) -> bool:
        return cls.get_by_id(record_id) is not None

    @classmethod
    def find_by_name(cls, name: Optional[str]) -> Optional[Any]:
        """按名称精确查找（忽略首尾空格与大小写）"""
        if not name or not str(name).strip():
            return None
        stmt = select(cls.model).where(
            func.lower(func.trim(cls.model.name)) == str(name).strip().lower()
        )
        return db.session.execute(stmt).scalars().first()

    @classmethod
    def first_available(cls) -> Optional[Any]:
        stmt = select(cls.model).order_by(cls.model.created_at, cls.model.id).limit(1)
        return db.session.execute(stmt).scalars().first()

    @staticmethod
    def add(instance):
        db.session.add(instance)
        db.session.flush()
        return instance

    @staticmethod
    def delete(instance):
        """删除记录，级联的子集合由模型关系处理"""
        db.session.delete(instance)
        db.session.flush()

    @staticmethod
    def commit():
        try:
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def rollback():
        db.session.rollback()
