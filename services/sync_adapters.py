# -*- coding: utf-8 -*-
"""
sync_adapters.py
--------------------------------------------------------------------
各实体在文件存储与数据库之间的转换适配器。
通用同步流程（services/sync_service.py）只依赖 EntityAdapter 的接口：
- key_of_record / key_of_row：跨存储的同步键
- scalar_fields：参与比较与覆盖写入的标量字段及其类型转换
- create / update：写入数据库（子集合整体删除后重建）
- to_file_record：数据库记录 -> 文件记录（即模型的 to_dict）
外键按名称精确解析（忽略首尾空格与大小写）；硬依赖解析失败时跳过该记录。
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from constants.incident import DEFAULT_INCIDENT_STATUS
from constants.sync import EntityType, FILE_NAMES
from repositories.analyst_repository import AnalystRepository
from repositories.defect_relation_repository import DefectRelationRepository
from repositories.incident_repository import IncidentRepository
from repositories.project_repository import ProjectRepository
from repositories.team_repository import TeamRepository, CellRepository
from repositories.test_case_repository import TestCaseRepository
from repositories.test_plan_repository import TestPlanRepository
from services.match_service import find_possible_duplicates
from services.status_service import StatusService
from utils.datetime_helpers import datetime_to_iso, parse_datetime
from utils.exceptions import DuplicateConstraintViolation, RecordSkipped, ValidationError

logger = logging.getLogger(__name__)

_TRUE_WORDS = {"1", "true", "yes", "y", "si", "sí", "on"}
_FALSE_WORDS = {"0", "false", "no", "n", "off"}


@dataclass(frozen=True)
class Field:
    kind: str = "text"  # text / name / int / float / bool / datetime
    default: Any = None
    required: bool = False


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def convert_value(field_def: Field, value, name: str, key) -> Any:
    """文件字段 -> Python 值；格式错误抛 ValidationError（整条记录跳过）"""
    if _blank(value):
        if field_def.required:
            raise ValidationError(key, f"缺少必填字段 {name}")
        if field_def.kind == "text" and value is not None:
            return value
        return field_def.default
    try:
        if field_def.kind == "text":
            return str(value)
        if field_def.kind == "name":
            return str(value).strip()
        if field_def.kind == "int":
            if isinstance(value, bool):
                raise ValueError(value)
            number = float(value)
            if not number.is_integer():
                raise ValueError(value)
            return int(number)
        if field_def.kind == "float":
            if isinstance(value, bool):
                raise ValueError(value)
            return float(value)
        if field_def.kind == "bool":
            if isinstance(value, bool):
                return value
            text = str(value).strip().lower()
            if text in _TRUE_WORDS:
                return True
            if text in _FALSE_WORDS:
                return False
            raise ValueError(value)
        if field_def.kind == "datetime":
            return parse_datetime(value)
    except (TypeError, ValueError):
        raise ValidationError(key, f"字段 {name} 格式错误: {value!r}")
    raise ValueError(f"未知的字段类型 {field_def.kind}")


def serialize_value(value):
    if hasattr(value, "strftime"):
        return datetime_to_iso(value)
    return value


def _new_id() -> str:
    return str(uuid.uuid4())


def _list_of(record: Mapping[str, Any], name: str, key) -> List[Any]:
    value = record.get(name)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(key, f"字段 {name} 必须是数组")
    return value


def _relation_key(record: Mapping[str, Any]):
    test_case_id = record.get("test_case_id")
    incident_id = record.get("incident_id")
    if _blank(test_case_id) or _blank(incident_id):
        return None
    return str(test_case_id).strip(), str(incident_id).strip()


def _refresh_statuses(context):
    """按关联数量重新推导本次运行涉及的用例状态"""
    transitions = StatusService.refresh_many(context.affected_test_cases)
    context.report.status_transitions.extend(t.to_dict() for t in transitions)


class EntityAdapter:
    """实体适配器基类：默认以 ``id`` 为同步键。"""

    entity: EntityType = None
    repository = None
    scalar_fields: Dict[str, Field] = {}
    reference_fields: Tuple[str, ...] = ()
    # 读取或写入时还会访问的数据表（子集合、关联、按名称解析的引用）
    related_tables: Tuple[str, ...] = ()
    # 本实体同步后需要重新生成的其他文件快照
    dependent_snapshots: Tuple[EntityType, ...] = ()
    # 数据库中有、文件中没有的记录是否从数据库删除（只对由文件维护的实体开启）
    remove_unlisted: bool = False

    @property
    def name(self) -> str:
        return self.entity.value

    @property
    def file_name(self) -> str:
        return FILE_NAMES[self.entity]

    @property
    def table_name(self) -> str:
        return self.repository.model.__tablename__

    @property
    def table_names(self) -> Tuple[str, ...]:
        return (self.table_name,) + self.related_tables

    @property
    def compare_fields(self) -> List[str]:
        return list(self.scalar_fields) + list(self.reference_fields)

    # -------- 键 --------
    def key_of_record(self, record: Mapping[str, Any]):
        value = record.get("id")
        if _blank(value):
            return None
        return str(value).strip()

    def key_of_row(self, row):
        return row.id

    # -------- 读取 --------
    def load_all(self) -> Dict[Any, Any]:
        return {self.key_of_row(row): row for row in self.repository.list_all()}

    def primary_records(self, file_records: List[Dict[str, Any]], context) -> List[Dict[str, Any]]:
        return file_records

    def to_file_record(self, row) -> Dict[str, Any]:
        return row.to_dict()

    # -------- 转换 --------
    def scalar_values(self, record: Mapping[str, Any], key) -> Dict[str, Any]:
        return {
            name: convert_value(field_def, record.get(name), name, key)
            for name, field_def in self.scalar_fields.items()
        }

    def reference_values(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        return {name: (record.get(name).strip() if isinstance(record.get(name), str) else record.get(name))
                for name in self.reference_fields}

    def normalize(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        """文件记录的规范化标量视图，与 to_file_record 的输出可直接比较"""
        key = self.key_of_record(record)
        values = {name: serialize_value(value) for name, value in self.scalar_values(record, key).items()}
        values.update(self.reference_values(record))
        return values

    # -------- 写入 --------
    def create(self, record: Mapping[str, Any], context):
        raise NotImplementedError

    def update(self, row, record: Mapping[str, Any], context):
        key = self.key_of_record(record)
        self.repository.update(row, **self.scalar_values(record, key))

    def delete(self, row, context):
        self.repository.delete(row)

    def after_reconcile(self, context, entity_report):
        """创建 / 更新完成、重新生成快照之前的钩子"""


# ==================== teams / cells ====================
class TeamAdapter(EntityAdapter):
    entity = EntityType.TEAMS
    repository = TeamRepository
    scalar_fields = {
        "name": Field("name", required=True),
        "description": Field(),
        "color": Field(),
    }

    def create(self, record, context):
        key = self.key_of_record(record)
        return TeamRepository.create(id=key, **self.scalar_values(record, key))


class CellAdapter(EntityAdapter):
    entity = EntityType.CELLS
    repository = CellRepository
    related_tables = ("team",)
    scalar_fields = {
        "name": Field("name", required=True),
        "description": Field(),
        "team_id": Field("name", required=True),
    }

    def _check_team(self, key, values):
        if not TeamRepository.exists(values["team_id"]):
            raise RecordSkipped(key, f"团队 {values['team_id']} 不存在")

    def create(self, record, context):
        key = self.key_of_record(record)
        values = self.scalar_values(record, key)
        self._check_team(key, values)
        return CellRepository.create(id=key, **values)

    def update(self, row, record, context):
        key = self.key_of_record(record)
        values = self.scalar_values(record, key)
        self._check_team(key, values)
        CellRepository.update(row, **values)


# ==================== analysts ====================
class AnalystAdapter(EntityAdapter):
    entity = EntityType.ANALYSTS
    repository = AnalystRepository
    related_tables = ("analyst_skill", "analyst_cell", "cell")
    scalar_fields = {
        "name": Field("name", required=True),
        "email": Field(),
        "role": Field(),
        "color": Field(),
        "availability": Field("int"),
    }

    def _skills(self, record, key):
        skills = []
        for item in _list_of(record, "skills", key):
            if isinstance(item, str):
                item = {"name": item}
            if not isinstance(item, dict) or _blank(item.get("name")):
                raise ValidationError(key, "技能缺少名称")
            skills.append({"name": str(item["name"]).strip(), "level": item.get("level")})
        return skills

    def _cell_ids(self, record, key):
        cell_ids = []
        for cell_id in _list_of(record, "cell_ids", key):
            if CellRepository.exists(cell_id):
                if cell_id not in cell_ids:
                    cell_ids.append(cell_id)
            else:
                logger.warning("分析师 %s 引用的单元 %s 不存在，忽略该关联", key, cell_id)
        return cell_ids

    def _replace_children(self, analyst, record, key):
        AnalystRepository.replace_skills(analyst, self._skills(record, key))
        AnalystRepository.replace_cells(analyst, self._cell_ids(record, key))

    def create(self, record, context):
        key = self.key_of_record(record)
        analyst = AnalystRepository.create(id=key, **self.scalar_values(record, key))
        self._replace_children(analyst, record, key)
        return analyst

    def update(self, row, record, context):
        key = self.key_of_record(record)
        AnalystRepository.update(row, **self.scalar_values(record, key))
        self._replace_children(row, record, key)


# ==================== test plans ====================
_CYCLE_FIELDS = {
    "number": Field("int", required=True),
    "designed": Field("int", 0),
    "successful": Field("int", 0),
    "not_executed": Field("int", 0),
    "defects": Field("int", 0),
    "start_date": Field("datetime"),
    "end_date": Field("datetime"),
}


class TestPlanAdapter(EntityAdapter):
    entity = EntityType.PLANS
    repository = TestPlanRepository
    related_tables = ("test_cycle",)
    remove_unlisted = True
    scalar_fields = {
        "project_id": Field("name", required=True),
        "project_name": Field(),
        "code_reference": Field("name"),
        "start_date": Field("datetime"),
        "end_date": Field("datetime"),
        "estimated_hours": Field("float", 0.0),
        "estimated_days": Field("float", 0.0),
        "total_cases": Field("int", 0),
        "test_quality": Field("float", 0.0),
    }

    def _cycles(self, record, key):
        cycles = []
        for item in _list_of(record, "cycles", key):
            if not isinstance(item, dict):
                raise ValidationError(key, "执行轮次必须是对象")
            cycle = {name: convert_value(field_def, item.get(name), f"cycles.{name}", key)
                     for name, field_def in _CYCLE_FIELDS.items()}
            cycle["id"] = str(item.get("id") or _new_id())
            cycles.append(cycle)
        return cycles

    def create(self, record, context):
        key = self.key_of_record(record)
        plan = TestPlanRepository.create(id=key, **self.scalar_values(record, key))
        TestPlanRepository.replace_cycles(plan, self._cycles(record, key))
        return plan

    def update(self, row, record, context):
        key = self.key_of_record(record)
        cycles = self._cycles(record, key)
        TestPlanRepository.update(row, **self.scalar_values(record, key))
        TestPlanRepository.replace_cycles(row, cycles)


# ==================== test cases ====================
_EVIDENCE_FIELDS = {
    "date": Field("datetime", required=True),
    "tester": Field(),
    "precondition": Field(),
    "result": Field(),
    "comments": Field(),
}


class TestCaseAdapter(EntityAdapter):
    entity = EntityType.CASES
    repository = TestCaseRepository
    related_tables = ("test_step", "test_evidence", "defect_relation", "incident", "test_plan")
    remove_unlisted = True
    scalar_fields = {
        "user_story_id": Field(),
        "name": Field("name", required=True),
        "project_id": Field("name", required=True),
        "test_plan_id": Field("name"),
        "code_ref": Field("name", required=True),
        "expected_result": Field(),
        "test_type": Field(),
        "status": Field(),
        "cycle": Field("int", 1),
        "category": Field(),
        "responsible_person": Field(),
        "priority": Field(),
    }

    def scalar_values(self, record, key):
        values = super().scalar_values(record, key)
        if values["cycle"] < 1:
            raise ValidationError(key, f"cycle 必须 >= 1，当前为 {values['cycle']}")
        return values

    def _check_plan(self, key, values):
        plan_id = values.get("test_plan_id")
        if plan_id and not TestPlanRepository.exists(plan_id):
            raise RecordSkipped(key, f"测试计划 {plan_id} 不存在")

    def _steps(self, record, key):
        steps = []
        for item in _list_of(record, "steps", key):
            if isinstance(item, str):
                item = {"description": item}
            if not isinstance(item, dict):
                raise ValidationError(key, "测试步骤必须是对象")
            steps.append({
                "id": str(item.get("id") or _new_id()),
                "description": item.get("description") or "",
                "expected": item.get("expected"),
            })
        return steps

    def _evidences(self, record, key):
        evidences = []
        for item in _list_of(record, "evidences", key):
            if not isinstance(item, dict):
                raise ValidationError(key, "测试证据必须是对象")
            evidence = {name: convert_value(field_def, item.get(name), f"evidences.{name}", key)
                        for name, field_def in _EVIDENCE_FIELDS.items()}
            evidence["id"] = str(item.get("id") or _new_id())
            evidence["steps"] = list(item.get("steps") or [])
            evidence["screenshots"] = list(item.get("screenshots") or [])
            evidences.append(evidence)
        return evidences

    def _declare_links(self, record, key, context):
        """文件中声明的关联缺陷交给 relations 阶段处理（此时缺陷可能尚未迁移）"""
        if "defects" not in record:
            return
        incident_ids = {str(item).strip() for item in _list_of(record, "defects", key) if not _blank(item)}
        context.declared_defects.setdefault(key, set()).update(incident_ids)
        for incident_id in incident_ids:
            context.declared_links.add((key, incident_id))

    def create(self, record, context):
        key = self.key_of_record(record)
        values = self.scalar_values(record, key)
        self._check_plan(key, values)
        steps = self._steps(record, key)
        evidences = self._evidences(record, key)
        created_at = convert_value(Field("datetime"), record.get("created_at"), "created_at", key)
        if created_at is not None:
            values["created_at"] = created_at
        test_case = TestCaseRepository.create(id=key, **values)
        TestCaseRepository.replace_steps(test_case, steps)
        TestCaseRepository.replace_evidences(test_case, evidences)
        self._declare_links(record, key, context)
        context.affected_test_cases.add(key)
        return test_case

    def update(self, row, record, context):
        key = self.key_of_record(record)
        values = self.scalar_values(record, key)
        self._check_plan(key, values)
        steps = self._steps(record, key)
        evidences = self._evidences(record, key)
        TestCaseRepository.update(row, **values)
        TestCaseRepository.replace_steps(row, steps)
        TestCaseRepository.replace_evidences(row, evidences)
        context.affected_test_cases.add(key)

    def primary_records(self, file_records, context):
        # 已存在的用例同样可能在文件中新增了关联缺陷
        for record in file_records:
            key = self.key_of_record(record)
            if key is None:
                continue
            try:
                self._declare_links(record, key, context)
            except ValidationError as exc:
                logger.warning("用例 %s 的 defects 字段无法解析: %s", key, exc.reason)
        return file_records

    def after_reconcile(self, context, entity_report):
        self._drop_undeclared_links(context)
        _refresh_statuses(context)

    def _drop_undeclared_links(self, context):
        """
        用例记录的 defects 是关联的镜像：文件中去掉的缺陷同时从数据库删除关联。
        仍列在 defect-relations.json 中、或仍被匹配规则接受的关联保留（否则 relations 阶段会重新建立）。
        记录中没有 defects 字段的用例不处理。
        """
        if not context.declared_defects:
            return
        listed = set()
        if context.files is not None:
            for record in context.files.read(FILE_NAMES[EntityType.RELATIONS]):
                pair = _relation_key(record)
                if pair is not None:
                    listed.add(pair)
        for test_case in TestCaseRepository.list_with_defects():
            declared = context.declared_defects.get(test_case.id)
            if declared is None:
                continue
            for relation in list(test_case.defect_relations):
                if relation.incident_id in declared or relation.key in listed:
                    continue
                if relation.incident is not None and context.resolver.matches(relation.incident, test_case):
                    continue
                test_case_id, incident_id = relation.key
                DefectRelationRepository.remove(test_case_id, incident_id)
                context.affected_test_cases.add(test_case_id)
                context.report.removed_relations.append({"test_case_id": test_case_id, "incident_id": incident_id})
                logger.info("用例 %s 的文件记录不再包含缺陷 %s，已删除关联", test_case_id, incident_id)


# ==================== incidents ====================
class IncidentAdapter(EntityAdapter):
    entity = EntityType.DEFECTS
    repository = IncidentRepository
    related_tables = ("cell", "qa_analyst")
    scalar_fields = {
        "jira_id": Field("name"),
        "description": Field(),
        "status": Field("name", DEFAULT_INCIDENT_STATUS),
        "priority": Field(),
        "client": Field(),
        "bug_type": Field(),
        "affected_area": Field(),
        "applies": Field("bool", True),
        "days_open": Field("int", 0),
        "is_erroneous": Field("bool", False),
        "reported_at": Field("datetime"),
        "resolved_at": Field("datetime"),
    }
    reference_fields = ("cell", "reported_by", "assigned_to")

    def _references(self, record, key) -> Dict[str, Any]:
        """缺陷的单元 / 分析师是软依赖：找不到时置空并记录日志，不跳过记录"""
        refs = {}
        lookups = (
            ("cell", "cell_id", CellRepository),
            ("reported_by", "reported_by_id", AnalystRepository),
            ("assigned_to", "assigned_to_id", AnalystRepository),
        )
        for field_name, column, repository in lookups:
            name = record.get(field_name)
            target = repository.find_by_name(name)
            if target is None and not _blank(name):
                logger.warning("缺陷 %s 的 %s=%s 未找到对应记录，置空", key, field_name, name)
            refs[column] = target.id if target else None
        return refs

    def create(self, record, context):
        key = self.key_of_record(record)
        values = self.scalar_values(record, key)
        values.update(self._references(record, key))
        created_at = convert_value(Field("datetime"), record.get("created_at"), "created_at", key)
        if created_at is not None:
            values["created_at"] = created_at
        return IncidentRepository.create(id=key, **values)

    def update(self, row, record, context):
        key = self.key_of_record(record)
        values = self.scalar_values(record, key)
        values.update(self._references(record, key))
        IncidentRepository.update(row, **values)


# ==================== projects ====================
class ProjectAdapter(EntityAdapter):
    entity = EntityType.PROJECTS
    repository = ProjectRepository
    related_tables = ("team", "cell", "project_analyst", "qa_analyst")
    scalar_fields = {
        "name": Field(),
        "project": Field("name", required=True),
        "hours": Field("float", 0.0),
        "days": Field("float", 0.0),
        "estimated_hours": Field("float"),
        "status": Field(),
        "calculated_status": Field(),
        "description": Field(),
        "start_date": Field("datetime"),
        "end_date": Field("datetime"),
        "delivery_date": Field("datetime"),
        "real_delivery_date": Field("datetime"),
        "certification_date": Field("datetime"),
        "delay_days": Field("int", 0),
        "product_analyst": Field(),
        "work_plan": Field(),
    }
    reference_fields = ("team", "cell")

    def key_of_record(self, record):
        value = record.get("jira_id")
        if _blank(value):
            return None
        return str(value).strip()

    def key_of_row(self, row):
        return row.jira_id

    def _resolve(self, repository, label, name, key, context):
        target = repository.find_by_name(name)
        if target is not None:
            return target
        if context.allow_reference_fallback:
            target = repository.first_available()
            if target is not None:
                logger.warning(
                    "项目 %s 的 %s=%s 未找到，按配置回退到第一个可用记录 %s",
                    key, label, name, target.name,
                )
                return target
        raise RecordSkipped(key, f"{label} '{name or ''}' 不存在")

    def _references(self, record, key, context):
        team = self._resolve(TeamRepository, "team", record.get("team"), key, context)
        cell = self._resolve(CellRepository, "cell", record.get("cell"), key, context)
        return {"team_id": team.id, "cell_id": cell.id}

    def _analyst_ids(self, record, key):
        analyst_ids = []
        for analyst_id in _list_of(record, "analysts", key):
            if AnalystRepository.exists(analyst_id):
                if analyst_id not in analyst_ids:
                    analyst_ids.append(analyst_id)
            else:
                logger.warning("项目 %s 引用的分析师 %s 不存在，忽略该关联", key, analyst_id)
        return analyst_ids

    def create(self, record, context):
        key = self.key_of_record(record)
        if key is None:
            raise ValidationError(record.get("id") or "?", "缺少必填字段 jira_id")
        values = self.scalar_values(record, key)
        values.update(self._references(record, key, context))
        analyst_ids = self._analyst_ids(record, key)
        record_id = record.get("id")
        if _blank(record_id) or ProjectRepository.exists(record_id):
            record_id = _new_id()
        project = ProjectRepository.create(id=str(record_id).strip(), jira_id=key, **values)
        ProjectRepository.replace_analysts(project, analyst_ids)
        return project

    def update(self, row, record, context):
        key = self.key_of_record(record)
        values = self.scalar_values(record, key)
        values.update(self._references(record, key, context))
        ProjectRepository.update(row, **values)
        ProjectRepository.replace_analysts(row, self._analyst_ids(record, key))


# ==================== defect relations ====================
class DefectRelationAdapter(EntityAdapter):
    """
    主集合 = defect-relations.json 中的记录
           + 用例文件中声明的 defects
           + 匹配规则接受的 (缺陷, 用例) 组合
    关联只有键没有标量字段，因此不会出现“更新”。
    """

    entity = EntityType.RELATIONS
    repository = DefectRelationRepository
    related_tables = ("test_case", "incident")
    dependent_snapshots = (EntityType.CASES,)

    def __init__(self):
        self.match_evidence: Dict[Tuple[str, str], str] = {}

    def key_of_record(self, record):
        return _relation_key(record)

    def key_of_row(self, row):
        return row.key

    def primary_records(self, file_records, context):
        records = list(file_records)
        for test_case_id, incident_id in sorted(context.declared_links):
            records.append({"test_case_id": test_case_id, "incident_id": incident_id})

        self.match_evidence = {}
        incidents = IncidentRepository.list_with_ticket()
        test_cases = TestCaseRepository.list_all()
        for incident, test_case, rule in context.resolver.matching_pairs(incidents, test_cases):
            pair = (test_case.id, incident.id)
            self.match_evidence[pair] = rule
            records.append({"test_case_id": test_case.id, "incident_id": incident.id})

        # 同一组合可能来自多个来源，只保留第一次出现
        unique, seen = [], set()
        for record in records:
            key = self.key_of_record(record)
            if key is not None and key in seen:
                continue
            seen.add(key)
            unique.append(record)
        return unique

    def create(self, record, context):
        key = self.key_of_record(record)
        if key is None:
            raise ValidationError("?", "关联缺少 test_case_id 或 incident_id")
        test_case_id, incident_id = key
        if not TestCaseRepository.exists(test_case_id):
            raise RecordSkipped(key, f"测试用例 {test_case_id} 不存在")
        if not IncidentRepository.exists(incident_id):
            raise RecordSkipped(key, f"缺陷 {incident_id} 不存在")
        try:
            relation = DefectRelationRepository.create(test_case_id, incident_id)
        except DuplicateConstraintViolation:
            logger.debug("关联 %s 已存在，跳过创建", key)
            return None
        context.affected_test_cases.add(test_case_id)
        rule = self.match_evidence.get(key)
        if rule:
            logger.info("缺陷 %s 按规则 %s 关联到用例 %s", incident_id, rule, test_case_id)
        else:
            logger.info("缺陷 %s 关联到用例 %s", incident_id, test_case_id)
        return relation

    def update(self, row, record, context):
        return None

    def after_reconcile(self, context, entity_report):
        _refresh_statuses(context)
        for test_case in TestCaseRepository.list_with_defects():
            incidents = [rel.incident for rel in test_case.defect_relations if rel.incident is not None]
            if len(incidents) < 2:
                continue
            for duplicate in find_possible_duplicates(
                    test_case.id, incidents, context.duplicate_threshold):
                logger.warning(
                    "用例 %s 下的缺陷 %s 与 %s 描述相似度 %.2f，可能重复",
                    duplicate.test_case_id, duplicate.incident_a, duplicate.incident_b, duplicate.score,
                )
                context.report.possible_duplicates.append(duplicate.to_dict())


def build_adapters() -> Dict[EntityType, EntityAdapter]:
    adapters: Iterable[EntityAdapter] = (
        TeamAdapter(),
        CellAdapter(),
        AnalystAdapter(),
        TestPlanAdapter(),
        TestCaseAdapter(),
        IncidentAdapter(),
        ProjectAdapter(),
        DefectRelationAdapter(),
    )
    return {adapter.entity: adapter for adapter in adapters}
