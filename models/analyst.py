# -*- coding: utf-8 -*-
"""
analyst.py
--------------------------------------------------------------------
QA 分析师：
- QAAnalyst: 分析师基本信息，缺陷的 reported_by / assigned_to 按名称引用。
- AnalystSkill: 技能列表（子集合，同步时整体替换）。
- AnalystCell: 分析师与单元的多对多关联。
"""

from extensions.database import db
from .mixins import TimestampMixin, COMMON_TABLE_ARGS, ID_LENGTH


class QAAnalyst(TimestampMixin, db.Model):
    __tablename__ = "qa_analyst"
    __table_args__ = (COMMON_TABLE_ARGS,)

    id = db.Column(db.String(ID_LENGTH), primary_key=True)
    name = db.Column(db.String(128), nullable=False, index=True)
    email = db.Column(db.String(255))
    role = db.Column(db.String(64))
    color = db.Column(db.String(16))
    # 可用度百分比
    availability = db.Column(db.Integer)

    skills = db.relationship(
        "AnalystSkill",
        back_populates="analyst",
        cascade="all, delete-orphan",
        order_by="AnalystSkill.id",
    )
    cell_links = db.relationship(
        "AnalystCell",
        back_populates="analyst",
        cascade="all, delete-orphan",
        order_by="AnalystCell.cell_id",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "color": self.color,
            "availability": self.availability,
            "skills": [{"name": s.name, "level": s.level} for s in self.skills],
            "cell_ids": [link.cell_id for link in self.cell_links],
        }


class AnalystSkill(db.Model):
    __tablename__ = "analyst_skill"
    __table_args__ = (COMMON_TABLE_ARGS,)

    id = db.Column(db.Integer, primary_key=True)
    analyst_id = db.Column(
        db.String(ID_LENGTH),
        db.ForeignKey("qa_analyst.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(128), nullable=False)
    level = db.Column(db.String(32))

    analyst = db.relationship("QAAnalyst", back_populates="skills")


class AnalystCell(db.Model):
    __tablename__ = "analyst_cell"
    __table_args__ = (
        db.UniqueConstraint("analyst_id", "cell_id", name="uq_analyst_cell"),
        COMMON_TABLE_ARGS,
    )

    id = db.Column(db.Integer, primary_key=True)
    analyst_id = db.Column(
        db.String(ID_LENGTH),
        db.ForeignKey("qa_analyst.id", ondelete="CASCADE"),
        nullable=False,
    )
    cell_id = db.Column(
        db.String(ID_LENGTH),
        db.ForeignKey("cell.id", ondelete="CASCADE"),
        nullable=False,
    )

    analyst = db.relationship("QAAnalyst", back_populates="cell_links")
    cell = db.relationship("Cell")
