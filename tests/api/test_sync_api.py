# -*- coding: utf-8 -*-
"""/api/sync 接口"""

import os

from constants.sync import EntityType, FILE_NAMES
from extensions.database import db
from extensions.file_store import StoreHandle
from models import Team, TestCase


def test_run_endpoint_returns_report(sample_files, handle, app_context):
    client = app_context.test_client()

    resp = client.post("/api/sync/run", json={})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["code"] == 200
    assert body["data"]["totals"]["created"] == 11
    assert body["data"]["fatal_error"] is None


def test_run_endpoint_rejects_unknown_entity(handle, app_context):
    client = app_context.test_client()

    resp = client.post("/api/sync/run", json={"entities": ["users"]})

    assert resp.status_code == 400
    assert resp.get_json()["code"] == 400


def test_run_endpoint_reports_fatal_error(handle, app_context, store):
    with open(os.path.join(store.data_dir, FILE_NAMES[EntityType.TEAMS]), "w", encoding="utf-8") as fh:
        fh.write("[{")
    client = app_context.test_client()

    resp = client.post("/api/sync/run", json={"entities": ["teams"]})

    assert resp.status_code == 503
    assert "JSON" in resp.get_json()["message"]


def test_match_preview(sample_files, run_sync, app_context):
    run_sync()
    client = app_context.test_client()

    resp = client.get("/api/sync/match", query_string={"ticket": "KOIN"})

    data = resp.get_json()["data"]
    assert data["total"] == 1
    assert data["items"][0]["rule"] == "composite"
    assert data["items"][0]["linked"] is True


def test_unlink_endpoint_refreshes_snapshots(sample_files, run_sync, app_context, read_entity):
    run_sync()
    client = app_context.test_client()

    resp = client.delete("/api/sync/relations", json={"test_case_id": "tc-1", "incident_id": "inc-1"})

    assert resp.status_code == 200
    assert resp.get_json()["data"]["status_transition"]["new_status"] == "No ejecutado"
    assert read_entity(EntityType.RELATIONS) == []
    cases = {record["id"]: record for record in read_entity(EntityType.CASES)}
    assert cases["tc-1"]["defects"] == []
    assert cases["tc-1"]["status"] == "No ejecutado"
    assert db.session.get(TestCase, "tc-1").status == "No ejecutado"


def test_link_endpoint(sample_files, run_sync, app_context, read_entity):
    run_sync()
    client = app_context.test_client()

    resp = client.post("/api/sync/relations", json={"test_case_id": "tc-2", "incident_id": "inc-1"})

    assert resp.status_code == 200
    assert resp.get_json()["data"]["created"] is True
    assert {"test_case_id": "tc-2", "incident_id": "inc-1"} in read_entity(EntityType.RELATIONS)


def test_relation_endpoints_validate_input(handle, app_context):
    client = app_context.test_client()

    resp = client.delete("/api/sync/relations", json={"test_case_id": "tc-1"})
    assert resp.status_code == 400

    resp = client.delete("/api/sync/relations", json={"test_case_id": "tc-1", "incident_id": "inc-1"})
    assert resp.status_code == 404


def test_duplicates_endpoint(sample_files, run_sync, app_context):
    run_sync()
    client = app_context.test_client()

    resp = client.get("/api/sync/test-cases/tc-1/duplicates")
    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"items": [], "threshold": 0.6}

    resp = client.get("/api/sync/test-cases/tc-404/duplicates")
    assert resp.status_code == 404


def _count_releases(monkeypatch):
    released = []
    release = StoreHandle.release

    def counting_release(self):
        released.append(self)
        release(self)

    monkeypatch.setattr(StoreHandle, "release", counting_release)
    return released


def test_run_endpoint_releases_stores(sample_files, handle, app_context, monkeypatch):
    released = _count_releases(monkeypatch)
    client = app_context.test_client()

    resp = client.post("/api/sync/run", json={"entities": ["teams"]})

    assert resp.status_code == 200
    assert len(released) == 1
    # 内存数据库释放连接后数据仍在
    assert db.session.get(Team, "team-1") is not None


def test_run_endpoint_releases_stores_after_fatal_error(handle, app_context, store, monkeypatch):
    with open(os.path.join(store.data_dir, FILE_NAMES[EntityType.TEAMS]), "w", encoding="utf-8") as fh:
        fh.write("[{")
    released = _count_releases(monkeypatch)

    resp = app_context.test_client().post("/api/sync/run", json={"entities": ["teams"]})

    assert resp.status_code == 503
    assert len(released) == 1


def test_relation_endpoints_release_stores(sample_files, run_sync, app_context, monkeypatch):
    run_sync()
    released = _count_releases(monkeypatch)
    client = app_context.test_client()

    client.post("/api/sync/relations", json={"test_case_id": "tc-2", "incident_id": "inc-1"})
    client.delete("/api/sync/relations", json={"test_case_id": "tc-2", "incident_id": "inc-1"})

    assert len(released) == 2
