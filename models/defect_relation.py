# -*- coding: utf-8 -*-
"""
defect_relation.py
--------------------------------------------------------------------
测试用例与缺陷的多对多关联：
- (test_case_id, incident_id) 唯一，重复创建视为无操作
- 只由匹配规则 + 同步流程创建 / 删除
"""

from extensions.database import db
from .mixins import TimestampMixin, COMMON_TABLE_ARGS, ID_LENGTH


class DefectRelation(TimestampMixin, db.Model):
    __tablename__ = "defect_relation"
    __table_args__ = (
        db.UniqueConstraint("test_case_id", "incident_id", name="uq_defect_relation_case_incident"),
        COMMON_TABLE_ARGS,
    )

    id = db.Column(db.Integer, primary_key=True)
    test_case_id = db.Column(
        db.String(ID_LENGTH),
        db.ForeignKey("test_case.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    incident_id = db.Column(
        db.String(ID_LENGTH),
        db.ForeignKey("incident.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    test_case = db.relationship("TestCase", back_populates="defect_relations")
    incident = db.relationship("Incident", back_populates="defect_relations")

    @property
    def key(self):
        return self.test_case_id, self.incident_id

    def to_dict(self):
        return {"test_case_id": self.test_case_id, "incident_id": self.incident_id}
