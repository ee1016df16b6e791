# -*- coding: utf-8 -*-
"""
project.py
--------------------------------------------------------------------
项目跟踪实体：
- Project: 以 jira_id（项目工单号，如 SRCA-6556）作为跨存储的同步键。
  team / cell 在文件中以名称保存，迁移时必须能解析到已存在的记录。
- ProjectAnalyst: 项目与 QA 分析师的关联。
"""

from extensions.database import db
from utils.datetime_helpers import datetime_to_iso
from .mixins import TimestampMixin, COMMON_TABLE_ARGS, ID_LENGTH


class Project(TimestampMixin, db.Model):
    __tablename__ = "project"
    __table_args__ = (COMMON_TABLE_ARGS,)

    id = db.Column(db.String(ID_LENGTH), primary_key=True)
    jira_id = db.Column(db.String(64), nullable=False, unique=True)
    name = db.Column(db.String(255))
    project = db.Column(db.String(255), nullable=False)
    team_id = db.Column(
        db.String(ID_LENGTH), db.ForeignKey("team.id", ondelete="RESTRICT"), nullable=False
    )
    cell_id = db.Column(
        db.String(ID_LENGTH), db.ForeignKey("cell.id", ondelete="RESTRICT"), nullable=False
    )
    hours = db.Column(db.Float, nullable=False, server_default="0")
    days = db.Column(db.Float, nullable=False, server_default="0")
    estimated_hours = db.Column(db.Float)
    status = db.Column(db.String(64))
    calculated_status = db.Column(db.String(64))
    description = db.Column(db.Text)
    start_date = db.Column(db.DateTime)
    end_date = db.Column(db.DateTime)
    delivery_date = db.Column(db.DateTime)
    real_delivery_date = db.Column(db.DateTime)
    certification_date = db.Column(db.DateTime)
    delay_days = db.Column(db.Integer, nullable=False, server_default="0")
    product_analyst = db.Column(db.String(128))
    work_plan = db.Column(db.String(255))

    team = db.relationship("Team")
    cell = db.relationship("Cell")
    analyst_links = db.relationship(
        "ProjectAnalyst",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectAnalyst.analyst_id",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "jira_id": self.jira_id,
            "name": self.name,
            "project": self.project,
            "team": self.team.name if self.team else self.team_id,
            "cell": self.cell.name if self.cell else self.cell_id,
            "hours": self.hours,
            "days": self.days,
            "estimated_hours": self.estimated_hours,
            "status": self.status,
            "calculated_status": self.calculated_status,
            "description": self.description,
            "start_date": datetime_to_iso(self.start_date),
            "end_date": datetime_to_iso(self.end_date),
            "delivery_date": datetime_to_iso(self.delivery_date),
            "real_delivery_date": datetime_to_iso(self.real_delivery_date),
            "certification_date": datetime_to_iso(self.certification_date),
            "delay_days": self.delay_days,
            "product_analyst": self.product_analyst,
            "work_plan": self.work_plan,
            "analysts": [link.analyst_id for link in self.analyst_links],
        }


class ProjectAnalyst(db.Model):
    __tablename__ = "project_analyst"
    __table_args__ = (
        db.UniqueConstraint("project_id", "analyst_id", name="uq_project_analyst"),
        COMMON_TABLE_ARGS,
    )

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.String(ID_LENGTH), db.ForeignKey("project.id", ondelete="CASCADE"), nullable=False
    )
    analyst_id = db.Column(
        db.String(ID_LENGTH), db.ForeignKey("qa_analyst.id", ondelete="CASCADE"), nullable=False
    )

    project = db.relationship("Project", back_populates="analyst_links")
    analyst = db.relationship("QAAnalyst")
