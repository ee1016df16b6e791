# -*- coding: utf-8 -*-
"""
test_case.py
--------------------------------------------------------------------
测试用例实体：
- 通过 project_id + code_ref（如 KOIN-261 / T003）被缺陷工单号引用
- status 只由状态推导规则或上游编辑修改，同步过程中不会被手工覆盖
- steps / evidences 为有序子集合，同步更新时整体删除后重建
- defects 为关联缺陷 id 的只读镜像，真实关联保存在 DefectRelation
"""

from extensions.database import db
from utils.datetime_helpers import datetime_to_iso
from .mixins import TimestampMixin, COMMON_TABLE_ARGS, ID_LENGTH


class TestCase(TimestampMixin, db.Model):
    __tablename__ = "test_case"
    __table_args__ = (
        db.Index("ix_test_case_project_code", "project_id", "code_ref"),
        db.CheckConstraint("cycle >= 1", name="ck_test_case_cycle_positive"),
        COMMON_TABLE_ARGS,
    )

    id = db.Column(db.String(ID_LENGTH), primary_key=True)
    user_story_id = db.Column(db.String(64))
    name = db.Column(db.String(255), nullable=False)
    project_id = db.Column(db.String(64), nullable=False, index=True)
    test_plan_id = db.Column(
        db.String(ID_LENGTH),
        db.ForeignKey("test_plan.id", ondelete="SET NULL"),
    )
    # 用例短编码，例如 T003 / HU1-T001
    code_ref = db.Column(db.String(64), nullable=False)
    expected_result = db.Column(db.Text)
    test_type = db.Column(db.String(32))
    status = db.Column(db.String(32))
    cycle = db.Column(db.Integer, nullable=False, server_default="1")
    category = db.Column(db.String(128))
    responsible_person = db.Column(db.String(128))
    priority = db.Column(db.String(16))

    test_plan = db.relationship("TestPlan", back_populates="test_cases")
    steps = db.relationship(
        "TestStep",
        back_populates="test_case",
        cascade="all, delete-orphan",
        order_by="TestStep.position",
    )
    evidences = db.relationship(
        "TestEvidence",
        back_populates="test_case",
        cascade="all, delete-orphan",
        order_by="TestEvidence.date",
    )
    defect_relations = db.relationship(
        "DefectRelation",
        back_populates="test_case",
        cascade="all, delete-orphan",
        order_by="DefectRelation.incident_id",
    )

    @property
    def linked_defect_ids(self):
        return [rel.incident_id for rel in self.defect_relations]

    def to_dict(self):
        data = {
            "id": self.id,
            "user_story_id": self.user_story_id,
            "name": self.name,
            "project_id": self.project_id,
            "test_plan_id": self.test_plan_id,
            "code_ref": self.code_ref,
            "steps": [step.to_dict() for step in self.steps],
            "expected_result": self.expected_result,
            "test_type": self.test_type,
            "status": self.status,
            "defects": self.linked_defect_ids,
            "evidences": [evidence.to_dict() for evidence in self.evidences],
            "cycle": self.cycle,
            "category": self.category,
            "responsible_person": self.responsible_person,
            "priority": self.priority,
        }
        data.update(self.timestamps_to_dict())
        return data


class TestStep(db.Model):
    __tablename__ = "test_step"
    __table_args__ = (COMMON_TABLE_ARGS,)

    id = db.Column(db.String(ID_LENGTH), primary_key=True)
    test_case_id = db.Column(
        db.String(ID_LENGTH),
        db.ForeignKey("test_case.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = db.Column(db.Integer, nullable=False, server_default="0")
    description = db.Column(db.Text, nullable=False)
    expected = db.Column(db.Text)

    test_case = db.relationship("TestCase", back_populates="steps")

    def to_dict(self):
        return {"id": self.id, "description": self.description, "expected": self.expected}


class TestEvidence(db.Model):
    __tablename__ = "test_evidence"
    __table_args__ = (COMMON_TABLE_ARGS,)

    id = db.Column(db.String(ID_LENGTH), primary_key=True)
    test_case_id = db.Column(
        db.String(ID_LENGTH),
        db.ForeignKey("test_case.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date = db.Column(db.DateTime, nullable=False)
    tester = db.Column(db.String(128))
    precondition = db.Column(db.Text)
    # 例如：["打开页面", "输入账号"]
    steps = db.Column(db.JSON, nullable=False, default=list)
    screenshots = db.Column(db.JSON, nullable=False, default=list)
    result = db.Column(db.String(32))
    comments = db.Column(db.Text)

    test_case = db.relationship("TestCase", back_populates="evidences")

    def to_dict(self):
        return {
            "id": self.id,
            "date": datetime_to_iso(self.date),
            "tester": self.tester,
            "precondition": self.precondition,
            "steps": list(self.steps or []),
            "screenshots": list(self.screenshots or []),
            "result": self.result,
            "comments": self.comments,
        }
