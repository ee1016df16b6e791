from typing import Any, Dict, Iterable

from extensions.database import db
from models.test_plan import TestPlan, TestCycle
from repositories.base_repository import BaseRepository


class TestPlanRepository(BaseRepository):
    model = TestPlan

    @staticmethod
    def create(id: str, **fields) -> TestPlan:
        plan = TestPlan(id=id, **fields)
        return BaseRepository.add(plan)

    @staticmethod
    def update(plan: TestPlan, **fields) -> TestPlan:
        for key, value in fields.items():
            setattr(plan, key, value)
        db.session.flush()
        return plan

    @staticmethod
    def replace_cycles(plan: TestPlan, cycles: Iterable[Dict[str, Any]]):
        """执行轮次是有序子集合，不做部分合并：先全部删除再按文件内容重建"""
        plan.cycles.clear()
        db.session.flush()
        for cycle in cycles:
            plan.cycles.append(TestCycle(**cycle))
        db.session.flush()
