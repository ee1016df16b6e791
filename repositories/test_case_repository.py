from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from extensions.database import db
from models.test_case import TestCase, TestStep, TestEvidence
from repositories.base_repository import BaseRepository


class TestCaseRepository(BaseRepository):
    model = TestCase

    @staticmethod
    def list_all() -> List[TestCase]:
        stmt = (
            select(TestCase)
            .options(
                selectinload(TestCase.steps),
                selectinload(TestCase.evidences),
                selectinload(TestCase.defect_relations),
            )
            .order_by(TestCase.id)
        )
        return list(db.session.execute(stmt).scalars().all())

    @staticmethod
    def list_with_defects() -> List[TestCase]:
        """存在至少一条关联缺陷的用例"""
        stmt = select(TestCase).where(TestCase.defect_relations.any()).order_by(TestCase.id)
        return list(db.session.execute(stmt).scalars().all())

    @staticmethod
    def create(id: str, **fields) -> TestCase:
        test_case = TestCase(id=id, **fields)
        return BaseRepository.add(test_case)

    @staticmethod
    def update(test_case: TestCase, **fields) -> TestCase:
        for key, value in fields.items():
            setattr(test_case, key, value)
        db.session.flush()
        return test_case

    @staticmethod
    def update_status(test_case: TestCase, status: Optional[str]) -> TestCase:
        test_case.status = status
        db.session.flush()
        return test_case

    @staticmethod
    def replace_steps(test_case: TestCase, steps: Iterable[Dict[str, Any]]):
        test_case.steps.clear()
        db.session.flush()
        for position, step in enumerate(steps):
            test_case.steps.append(TestStep(position=position, **step))
        db.session.flush()

    @staticmethod
    def replace_evidences(test_case: TestCase, evidences: Iterable[Dict[str, Any]]):
        test_case.evidences.clear()
        db.session.flush()
        for evidence in evidences:
            test_case.evidences.append(TestEvidence(**evidence))
        db.session.flush()
