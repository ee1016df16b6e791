# -*- coding: utf-8 -*-
"""
team.py
--------------------------------------------------------------------
团队与单元（célula）：
- Team: QA 团队，名称唯一。
- Cell: 团队下的业务单元，必须归属于一个已存在的团队。
用途：
- 项目、缺陷迁移时按名称解析 team / cell 外键。
"""

from extensions.database import db
from .mixins import TimestampMixin, COMMON_TABLE_ARGS, ID_LENGTH


class Team(TimestampMixin, db.Model):
    __tablename__ = "team"
    __table_args__ = (COMMON_TABLE_ARGS,)

    id = db.Column(db.String(ID_LENGTH), primary_key=True)
    name = db.Column(db.String(128), nullable=False, unique=True)
    description = db.Column(db.Text)
    color = db.Column(db.String(16))

    cells = db.relationship("Cell", back_populates="team", cascade="all, delete-orphan")

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "color": self.color,
        }


class Cell(TimestampMixin, db.Model):
    __tablename__ = "cell"
    __table_args__ = (COMMON_TABLE_ARGS,)

    id = db.Column(db.String(ID_LENGTH), primary_key=True)
    name = db.Column(db.String(128), nullable=False, unique=True)
    description = db.Column(db.Text)
    team_id = db.Column(
        db.String(ID_LENGTH),
        db.ForeignKey("team.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    team = db.relationship("Team", back_populates="cells")

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "team_id": self.team_id,
        }
