from extensions.database import db
from models.team import Team, Cell
from repositories.base_repository import BaseRepository


class TeamRepository(BaseRepository):
    model = Team

    @staticmethod
    def create(id: str, name: str, description=None, color=None) -> Team:
        team = Team(id=id, name=name.strip(), description=description, color=color)
        return BaseRepository.add(team)

    @staticmethod
    def update(team: Team, name=None, description=None, color=None) -> Team:
        if name is not None:
            team.name = name.strip()
        team.description = description
        team.color = color
        db.session.flush()
        return team


class CellRepository(BaseRepository):
    model = Cell

    @staticmethod
    def create(id: str, name: str, team_id: str, description=None) -> Cell:
        cell = Cell(id=id, name=name.strip(), team_id=team_id, description=description)
        return BaseRepository.add(cell)

    @staticmethod
    def update(cell: Cell, name=None, team_id=None, description=None) -> Cell:
        if name is not None:
            cell.name = name.strip()
        if team_id is not None:
            cell.team_id = team_id
        cell.description = description
        db.session.flush()
        return cell
