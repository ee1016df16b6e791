# -*- coding: utf-8 -*-
"""公共 fixture：内存数据库 + 临时文件存储目录"""

import copy
import json
import os

import pytest

from app import create_app
from constants.sync import EntityType, FILE_NAMES
from extensions.database import db
from extensions.file_store import JsonFileStore, StoreHandle
from services.sync_service import SyncOrchestrator


SAMPLE_DATA = {
    EntityType.TEAMS: [
        {"id": "team-1", "name": "Core Banking", "description": "Equipo core", "color": "#0055ff"},
        {"id": "team-2", "name": "Canales", "description": None, "color": None},
    ],
    EntityType.CELLS: [
        {"id": "cell-1", "name": "Pagos", "description": None, "team_id": "team-1"},
        {"id": "cell-2", "name": "Onboarding", "description": None, "team_id": "team-2"},
    ],
    EntityType.ANALYSTS: [
        {
            "id": "an-1",
            "name": "Ana Ruiz",
            "email": "ana@example.com",
            "role": "QA Senior",
            "color": None,
            "availability": 100,
            "skills": [{"name": "API", "level": "alto"}],
            "cell_ids": ["cell-1"],
        },
    ],
    EntityType.PLANS: [
        {
            "id": "plan-1",
            "project_id": "KOIN-261",
            "project_name": "Koin",
            "code_reference": "KOIN-261",
            "start_date": "2024-05-01T00:00:00.000Z",
            "end_date": None,
            "estimated_hours": 40,
            "estimated_days": 5,
            "total_cases": 2,
            "test_quality": 0,
            "cycles": [{"id": "cy-1", "number": 1, "designed": 2}],
        },
    ],
    EntityType.CASES: [
        {
            "id": "tc-1",
            "user_story_id": "HU-1",
            "name": "Login con usuario bloqueado",
            "project_id": "KOIN-261",
            "test_plan_id": "plan-1",
            "code_ref": "T003",
            "steps": [{"description": "Abrir app"}, {"description": "Ingresar", "expected": "Error"}],
            "expected_result": "Mensaje de bloqueo",
            "test_type": "Funcional",
            "status": "No ejecutado",
            "cycle": 1,
            "category": "Login",
            "responsible_person": "Ana Ruiz",
            "priority": "Alta",
        },
        {
            "id": "tc-2",
            "user_story_id": "HU-7",
            "name": "Pago con tarjeta",
            "project_id": "PAY-100",
            "test_plan_id": None,
            "code_ref": "T010",
            "steps": [],
            "expected_result": "Pago aprobado",
            "test_type": "Funcional",
            "status": "Exitoso",
            "cycle": 1,
            "category": "Pagos",
            "responsible_person": None,
            "priority": "Media",
        },
    ],
    EntityType.DEFECTS: [
        {
            "id": "inc-1",
            "jira_id": "KOIN-261-T003",
            "description": "Login no muestra mensaje de bloqueo",
            "status": "Abierto",
            "priority": "Alta",
            "cell": "Pagos",
            "reported_by": "Ana Ruiz",
            "reported_at": "2024-05-02T10:00:00.000Z",
        },
    ],
    EntityType.PROJECTS: [
        {
            "id": "prj-1",
            "jira_id": "KOIN-261",
            "project": "Koin",
            "name": "Koin wallet",
            "team": "Core Banking",
            "cell": "Pagos",
            "hours": 10,
            "days": 2,
            "start_date": "2024-05-01",
            "analysts": ["an-1"],
        },
    ],
    EntityType.RELATIONS: [],
}


@pytest.fixture()
def app_context():
    """提供测试用的 Flask 应用上下文（使用内存数据库）。"""

    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def data_dir(tmp_path):
    path = tmp_path / "data"
    path.mkdir()
    return str(path)


@pytest.fixture()
def store(data_dir):
    return JsonFileStore(data_dir)


@pytest.fixture()
def handle(app_context, store):
    app_context.config["SYNC_DATA_DIR"] = store.data_dir
    return StoreHandle(store)


@pytest.fixture()
def write_entity(store):
    def _write(entity: EntityType, records):
        store.write(FILE_NAMES[entity], records)
    return _write


@pytest.fixture()
def read_entity(store):
    def _read(entity: EntityType):
        with open(os.path.join(store.data_dir, FILE_NAMES[entity]), encoding="utf-8") as fh:
            return json.load(fh)
    return _read


@pytest.fixture()
def sample_files(write_entity):
    """写入一套完整的样例文件，返回可修改的副本"""
    data = copy.deepcopy(SAMPLE_DATA)
    for entity, records in data.items():
        write_entity(entity, records)
    return data


@pytest.fixture()
def run_sync(app_context, handle):
    def _run(entities=None, **overrides):
        app_context.config.update(overrides)
        return SyncOrchestrator(handle, app_context.config).run(entities)
    return _run
