from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from extensions.database import db
from models.defect_relation import DefectRelation
from repositories.base_repository import BaseRepository
from utils.exceptions import DuplicateConstraintViolation


class DefectRelationRepository(BaseRepository):
    model = DefectRelation

    @staticmethod
    def list_all() -> List[DefectRelation]:
        stmt = select(DefectRelation).order_by(DefectRelation.test_case_id, DefectRelation.incident_id)
        return list(db.session.execute(stmt).scalars().all())

    @staticmethod
    def get(test_case_id: str, incident_id: str) -> Optional[DefectRelation]:
        stmt = select(DefectRelation).where(
            DefectRelation.test_case_id == test_case_id,
            DefectRelation.incident_id == incident_id,
        )
        return db.session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def count_for_test_case(test_case_id: str) -> int:
        stmt = select(func.count(DefectRelation.id)).where(DefectRelation.test_case_id == test_case_id)
        return db.session.execute(stmt).scalar() or 0

    @staticmethod
    def create(test_case_id: str, incident_id: str) -> DefectRelation:
        """
        创建关联并立即提交
        :raises DuplicateConstraintViolation: 关联已存在（唯一约束冲突）
        """
        if DefectRelationRepository.get(test_case_id, incident_id) is not None:
            raise DuplicateConstraintViolation("DefectRelation", (test_case_id, incident_id))
        relation = DefectRelation(test_case_id=test_case_id, incident_id=incident_id)
        db.session.add(relation)
        try:
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            # 外键冲突同样是 IntegrityError，只有记录确实已存在才视为重复
            if DefectRelationRepository.get(test_case_id, incident_id) is None:
                raise
            raise DuplicateConstraintViolation("DefectRelation", (test_case_id, incident_id)) from exc
        return relation

    @staticmethod
    def remove(test_case_id: str, incident_id: str) -> bool:
        relation = DefectRelationRepository.get(test_case_id, incident_id)
        if relation is None:
            return False
        db.session.delete(relation)
        db.session.commit()
        return True
