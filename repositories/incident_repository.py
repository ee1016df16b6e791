from typing import List, Optional

from sqlalchemy import select

from extensions.database import db
from models.incident import Incident
from repositories.base_repository import BaseRepository


class IncidentRepository(BaseRepository):
    model = Incident

    @staticmethod
    def list_with_ticket() -> List[Incident]:
        """只返回填写了工单号的缺陷，空工单号不参与匹配"""
        stmt = (
            select(Incident)
            .where(Incident.jira_id.isnot(None), Incident.jira_id != "")
            .order_by(Incident.id)
        )
        return list(db.session.execute(stmt).scalars().all())

    @staticmethod
    def search_by_ticket(fragment: Optional[str]) -> List[Incident]:
        if not fragment:
            return []
        stmt = select(Incident).where(Incident.jira_id.ilike(f"%{fragment.strip()}%"))
        return list(db.session.execute(stmt).scalars().all())

    @staticmethod
    def create(id: str, **fields) -> Incident:
        incident = Incident(id=id, **fields)
        return BaseRepository.add(incident)

    @staticmethod
    def update(incident: Incident, **fields) -> Incident:
        for key, value in fields.items():
            setattr(incident, key, value)
        db.session.flush()
        return incident
