# -*- coding: utf-8 -*-
"""
relation_service.py
--------------------------------------------------------------------
同步流程之外的关联操作（供 API 使用）：
- link / unlink：单条关联的创建与删除，完成后重新推导用例状态
- preview_matches：按规则链列出候选 (缺陷, 用例)，不写库
- duplicates_for_test_case：同一用例下描述相似的缺陷，仅提示
"""

import logging
from typing import Any, Dict, List, Optional

from repositories.defect_relation_repository import DefectRelationRepository
from repositories.incident_repository import IncidentRepository
from repositories.test_case_repository import TestCaseRepository
from services.match_service import MatchResolver, find_possible_duplicates
from services.status_service import StatusService
from utils.exceptions import BizError, DuplicateConstraintViolation

logger = logging.getLogger(__name__)


class RelationService:

    @staticmethod
    def _require(test_case_id: str, incident_id: str):
        test_case = TestCaseRepository.get_by_id(test_case_id)
        if test_case is None:
            raise BizError(f"测试用例 {test_case_id} 不存在", 404)
        incident = IncidentRepository.get_by_id(incident_id)
        if incident is None:
            raise BizError(f"缺陷 {incident_id} 不存在", 404)
        return test_case, incident

    @staticmethod
    def link(test_case_id: str, incident_id: str) -> Dict[str, Any]:
        """创建关联；已存在时不报错，created=False"""
        RelationService._require(test_case_id, incident_id)
        try:
            DefectRelationRepository.create(test_case_id, incident_id)
            created = True
        except DuplicateConstraintViolation:
            created = False
        transition = StatusService.refresh(test_case_id)
        logger.info("关联 %s -> %s (created=%s)", incident_id, test_case_id, created)
        return {
            "test_case_id": test_case_id,
            "incident_id": incident_id,
            "created": created,
            "status_transition": transition.to_dict() if transition else None,
        }

    @staticmethod
    def unlink(test_case_id: str, incident_id: str, resolver: Optional[MatchResolver] = None) -> Dict[str, Any]:
        """
        删除关联并重新推导用例状态
        若规则链仍然接受这对组合，下次同步会重新建立关联，返回中以 rematch_rule 提示
        """
        test_case, incident = RelationService._require(test_case_id, incident_id)
        removed = DefectRelationRepository.remove(test_case_id, incident_id)
        if not removed:
            raise BizError(f"用例 {test_case_id} 与缺陷 {incident_id} 之间没有关联", 404)
        transition = StatusService.refresh(test_case_id)
        rematch_rule = None
        if resolver is not None:
            rematch_rule = resolver.resolve(incident, test_case).rule
        logger.info("已删除关联 %s -> %s", incident_id, test_case_id)
        return {
            "test_case_id": test_case_id,
            "incident_id": incident_id,
            "removed": True,
            "status_transition": transition.to_dict() if transition else None,
            "rematch_rule": rematch_rule,
        }

    @staticmethod
    def preview_matches(resolver: MatchResolver, ticket: Optional[str] = None) -> List[Dict[str, Any]]:
        if ticket:
            incidents = IncidentRepository.search_by_ticket(ticket)
        else:
            incidents = IncidentRepository.list_with_ticket()
        pairs = resolver.matching_pairs(incidents, TestCaseRepository.list_all())
        return [
            {
                "incident_id": incident.id,
                "jira_id": incident.jira_id,
                "test_case_id": test_case.id,
                "code_ref": test_case.code_ref,
                "project_id": test_case.project_id,
                "rule": rule,
                "linked": DefectRelationRepository.get(test_case.id, incident.id) is not None,
            }
            for incident, test_case, rule in pairs
        ]

    @staticmethod
    def duplicates_for_test_case(test_case_id: str, threshold: float) -> List[Dict[str, Any]]:
        test_case = TestCaseRepository.get_by_id(test_case_id)
        if test_case is None:
            raise BizError(f"测试用例 {test_case_id} 不存在", 404)
        incidents = [rel.incident for rel in test_case.defect_relations if rel.incident is not None]
        return [dup.to_dict() for dup in find_possible_duplicates(test_case_id, incidents, threshold)]
