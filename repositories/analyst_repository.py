from typing import Any, Dict, Iterable, List

from extensions.database import db
from models.analyst import QAAnalyst, AnalystSkill, AnalystCell
from repositories.base_repository import BaseRepository


class AnalystRepository(BaseRepository):
    model = QAAnalyst

    @staticmethod
    def create(id: str, name: str, **fields) -> QAAnalyst:
        analyst = QAAnalyst(id=id, name=name.strip(), **fields)
        return BaseRepository.add(analyst)

    @staticmethod
    def update(analyst: QAAnalyst, **fields) -> QAAnalyst:
        for key, value in fields.items():
            setattr(analyst, key, value)
        db.session.flush()
        return analyst

    @staticmethod
    def replace_skills(analyst: QAAnalyst, skills: Iterable[Dict[str, Any]]):
        """技能整体删除后重建"""
        analyst.skills.clear()
        db.session.flush()
        for skill in skills:
            analyst.skills.append(AnalystSkill(name=skill["name"], level=skill.get("level")))
        db.session.flush()

    @staticmethod
    def replace_cells(analyst: QAAnalyst, cell_ids: List[str]):
        analyst.cell_links.clear()
        db.session.flush()
        for cell_id in cell_ids:
            analyst.cell_links.append(AnalystCell(cell_id=cell_id))
        db.session.flush()
