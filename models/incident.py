# -*- coding: utf-8 -*-
"""
incident.py
--------------------------------------------------------------------
缺陷报告（Incident）：
- jira_id 为自由文本工单号（如 KOIN-261-T003），通过匹配规则关联到测试用例
- cell / reported_by / assigned_to 在文件中以名称保存，解析不到时置空
"""

from extensions.database import db
from utils.datetime_helpers import datetime_to_iso
from constants.incident import DEFAULT_INCIDENT_STATUS
from .mixins import TimestampMixin, COMMON_TABLE_ARGS, ID_LENGTH


class Incident(TimestampMixin, db.Model):
    __tablename__ = "incident"
    __table_args__ = (COMMON_TABLE_ARGS,)

    id = db.Column(db.String(ID_LENGTH), primary_key=True)
    jira_id = db.Column(db.String(128), index=True)
    description = db.Column(db.Text)
    status = db.Column(db.String(32), nullable=False, server_default=DEFAULT_INCIDENT_STATUS)
    priority = db.Column(db.String(16))
    client = db.Column(db.String(128))
    bug_type = db.Column(db.String(64))
    affected_area = db.Column(db.String(128))
    applies = db.Column(db.Boolean, nullable=False, server_default="1")
    days_open = db.Column(db.Integer, nullable=False, server_default="0")
    is_erroneous = db.Column(db.Boolean, nullable=False, server_default="0")
    reported_at = db.Column(db.DateTime)
    resolved_at = db.Column(db.DateTime)

    cell_id = db.Column(db.String(ID_LENGTH), db.ForeignKey("cell.id", ondelete="SET NULL"))
    reported_by_id = db.Column(
        db.String(ID_LENGTH), db.ForeignKey("qa_analyst.id", ondelete="SET NULL")
    )
    assigned_to_id = db.Column(
        db.String(ID_LENGTH), db.ForeignKey("qa_analyst.id", ondelete="SET NULL")
    )

    cell = db.relationship("Cell")
    reported_by = db.relationship("QAAnalyst", foreign_keys=[reported_by_id])
    assigned_to = db.relationship("QAAnalyst", foreign_keys=[assigned_to_id])
    defect_relations = db.relationship(
        "DefectRelation",
        back_populates="incident",
        cascade="all, delete-orphan",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "jira_id": self.jira_id,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "client": self.client,
            "bug_type": self.bug_type,
            "affected_area": self.affected_area,
            "applies": self.applies,
            "days_open": self.days_open,
            "is_erroneous": self.is_erroneous,
            "reported_at": datetime_to_iso(self.reported_at),
            "created_at": datetime_to_iso(self.created_at),
            "resolved_at": datetime_to_iso(self.resolved_at),
            "cell": self.cell.name if self.cell else None,
            "reported_by": self.reported_by.name if self.reported_by else None,
            "assigned_to": self.assigned_to.name if self.assigned_to else None,
        }
