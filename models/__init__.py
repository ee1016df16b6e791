# -*- coding: utf-8 -*-
"""
__init__.py
--------------------------------------------------------------------
汇总导入所有模型，使得：
- Flask-Migrate/Alembic 自动检测模型。
- 外部模块可简化引用：from models import TestCase, Incident
注意：
- 避免循环导入：各模型仅在这里集中 import。
"""

from .mixins import TimestampMixin
from .team import Team, Cell
from .analyst import QAAnalyst, AnalystSkill, AnalystCell
from .project import Project, ProjectAnalyst
from .test_plan import TestPlan, TestCycle
from .test_case import TestCase, TestStep, TestEvidence
from .incident import Incident
from .defect_relation import DefectRelation

__all__ = [
    "TimestampMixin",
    "Team", "Cell", "QAAnalyst", "AnalystSkill", "AnalystCell",
    "Project", "ProjectAnalyst", "TestPlan", "TestCycle",
    "TestCase", "TestStep", "TestEvidence", "Incident", "DefectRelation",
]
