# -*- coding: utf-8 -*-
"""
status_service.py
--------------------------------------------------------------------
测试用例状态推导：
- 有关联缺陷且当前状态为 空 / No ejecutado / Exitoso  -> Fallido
- 没有关联缺陷且当前状态为 空 / Fallido              -> No ejecutado
- 其余情况保持不变（Bloqueado、En progreso 不会被自动覆盖）
每次关联创建 / 删除后，对受影响的用例各调用一次。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from constants.test_case import TestCaseStatus, coerce_status
from repositories.defect_relation_repository import DefectRelationRepository
from repositories.test_case_repository import TestCaseRepository

logger = logging.getLogger(__name__)

_FAIL_FROM = {None, TestCaseStatus.NOT_EXECUTED, TestCaseStatus.SUCCESSFUL}
_RESET_FROM = {None, TestCaseStatus.FAILED}


def derive_status(
    current_status: Union[str, TestCaseStatus, None], defect_count: int
) -> Optional[str]:
    """返回推导后的状态标签；无法识别的状态原样返回"""
    try:
        current = coerce_status(current_status)
    except ValueError:
        return current_status
    if defect_count > 0 and current in _FAIL_FROM:
        return TestCaseStatus.FAILED.value
    if defect_count == 0 and current in _RESET_FROM:
        return TestCaseStatus.NOT_EXECUTED.value
    if isinstance(current_status, TestCaseStatus):
        return current_status.value
    return current_status


@dataclass(frozen=True)
class StatusTransition:
    test_case_id: str
    code_ref: Optional[str]
    old_status: Optional[str]
    new_status: Optional[str]
    defect_count: int

    def to_dict(self):
        return {
            "test_case_id": self.test_case_id,
            "code_ref": self.code_ref,
            "old_status": self.old_status,
            "new_status": self.new_status,
            "defect_count": self.defect_count,
        }


class StatusService:

    @staticmethod
    def refresh(test_case_id: str) -> Optional[StatusTransition]:
        """按当前关联数量重新推导单个用例状态，发生变化时提交并返回变更"""
        test_case = TestCaseRepository.get_by_id(test_case_id)
        if test_case is None:
            return None
        count = DefectRelationRepository.count_for_test_case(test_case_id)
        new_status = derive_status(test_case.status, count)
        if new_status == test_case.status:
            return None
        transition = StatusTransition(
            test_case_id=test_case.id,
            code_ref=test_case.code_ref,
            old_status=test_case.status,
            new_status=new_status,
            defect_count=count,
        )
        TestCaseRepository.update_status(test_case, new_status)
        TestCaseRepository.commit()
        logger.info(
            "用例 %s (%s) 状态 %s -> %s，关联缺陷 %d 个",
            test_case.id, test_case.code_ref, transition.old_status, new_status, count,
        )
        return transition

    @staticmethod
    def refresh_many(test_case_ids: Iterable[str]) -> List[StatusTransition]:
        transitions = []
        for test_case_id in sorted(set(test_case_ids)):
            transition = StatusService.refresh(test_case_id)
            if transition is not None:
                transitions.append(transition)
        return transitions
