from typing import List

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from extensions.database import db
from models.project import Project, ProjectAnalyst
from repositories.base_repository import BaseRepository


class ProjectRepository(BaseRepository):
    model = Project
    order_column = "jira_id"

    @staticmethod
    def list_all() -> List[Project]:
        stmt = (
            select(Project)
            .options(
                selectinload(Project.team),
                selectinload(Project.cell),
                selectinload(Project.analyst_links),
            )
            .order_by(Project.jira_id)
        )
        return list(db.session.execute(stmt).scalars().all())

    @staticmethod
    def create(id: str, jira_id: str, **fields) -> Project:
        project = Project(id=id, jira_id=jira_id.strip(), **fields)
        return BaseRepository.add(project)

    @staticmethod
    def update(project: Project, **fields) -> Project:
        for key, value in fields.items():
            setattr(project, key, value)
        db.session.flush()
        return project

    @staticmethod
    def replace_analysts(project: Project, analyst_ids: List[str]):
        project.analyst_links.clear()
        db.session.flush()
        for analyst_id in analyst_ids:
            project.analyst_links.append(ProjectAnalyst(analyst_id=analyst_id))
        db.session.flush()
